"""Sequential and binary search over a densely packed slot array."""

from __future__ import annotations

from collections.abc import Callable
from functools import cmp_to_key
from typing import TYPE_CHECKING

from keysearch.core.trace import SearchResult, Step, StepAction

if TYPE_CHECKING:
  from collections.abc import Sequence

Comparator = Callable[[str, str], int]


def sequential_search(slots: Sequence[str | None], target: str) -> SearchResult:
  """Scan slots from the start, stopping at a match or the first empty slot.

  Args:
      slots: Slot contents; occupied slots are assumed to form a prefix
      target: Canonical key to look for

  Returns:
      SearchResult with one COMPARED or FOUND step per visited slot
  """
  steps: list[Step] = []
  for position, key in enumerate(slots):
    if key is None:
      break
    if key == target:
      steps.append(Step(position, StepAction.FOUND, key=key))
      return SearchResult(found=True, position=position, steps=tuple(steps))
    steps.append(Step(position, StepAction.COMPARED, key=key))
  return SearchResult(found=False, steps=tuple(steps))


def binary_search(
  slots: Sequence[str | None], count: int, target: str, compare: Comparator
) -> SearchResult:
  """Binary search over the ascending prefix ``slots[0:count]``.

  Equality is tested once per iteration at the midpoint. A miss ends with a
  NOT_FOUND step whose ``low``/``high`` are the final bounds (``low >
  high``) and whose position and key repeat the last midpoint examined.

  Args:
      slots: Slot contents with the ascending keys in the first ``count``
      count: Number of occupied slots
      target: Canonical key to look for
      compare: Three-way key comparator

  Returns:
      SearchResult whose steps record every midpoint

  Raises:
      ValueError: If a slot before ``count`` is empty
  """
  steps: list[Step] = []
  low, high = 0, count - 1
  mid: int | None = None
  mid_key: str | None = None

  while low <= high:
    mid = (low + high) // 2
    mid_key = slots[mid]
    if mid_key is None:
      raise ValueError(
        f"Empty slot at position {mid} inside the first {count} slots"
      )
    order = compare(target, mid_key)
    if order == 0:
      steps.append(Step(mid, StepAction.FOUND, key=mid_key, low=low, high=high))
      return SearchResult(found=True, position=mid, steps=tuple(steps))
    if order < 0:
      steps.append(Step(mid, StepAction.DISCARD_RIGHT, key=mid_key, low=low, high=high))
      high = mid - 1
    else:
      steps.append(Step(mid, StepAction.DISCARD_LEFT, key=mid_key, low=low, high=high))
      low = mid + 1

  steps.append(Step(mid, StepAction.NOT_FOUND, key=mid_key, low=low, high=high))
  return SearchResult(found=False, steps=tuple(steps))


def sorted_position(
  slots: Sequence[str | None], count: int, key: str, compare: Comparator
) -> int:
  """Index of the first key in ``slots[0:count]`` strictly greater than ``key``.

  Raises:
      ValueError: If a slot before ``count`` is empty
  """
  for position in range(count):
    existing = slots[position]
    if existing is None:
      raise ValueError(
        f"Empty slot at position {position} inside the first {count} slots"
      )
    if compare(key, existing) < 0:
      return position
  return count


def is_ascending(
  slots: Sequence[str | None], count: int, compare: Comparator
) -> bool:
  prefix = slots[:count]
  if any(key is None for key in prefix):
    return False
  return all(compare(a, b) <= 0 for a, b in zip(prefix, prefix[1:]))  # type: ignore[arg-type]


def sorted_keys(slots: Sequence[str | None], compare: Comparator) -> list[str]:
  """Occupied keys in ascending order."""
  return sorted((key for key in slots if key is not None), key=cmp_to_key(compare))
