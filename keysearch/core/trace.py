"""Step traces and result objects returned by every engine operation.

A trace is a tuple of frozen Step records. It is fully computed before the
operation returns, so consumers can replay it at any pace without touching
the store again.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class StepAction(str, Enum):
  """What happened at one probed or compared position."""

  INSERTED = "inserted"
  COLLISION = "collision"
  EMPTY = "empty"
  FOUND = "found"
  COMPARED = "compared"
  DISCARD_RIGHT = "discard-right"
  DISCARD_LEFT = "discard-left"
  NOT_FOUND = "not-found"


@dataclass(frozen=True)
class Step:
  """One probe or comparison.

  ``position`` is the 0-indexed slot examined (None only for the final step
  of a binary search over an empty prefix). Probe steps fill ``offset``
  with the attempt number; binary search steps fill ``low``/``high``.
  """

  position: int | None
  action: StepAction
  key: str | None = None
  formula: str | None = None
  offset: int | None = None
  low: int | None = None
  high: int | None = None

  @property
  def match(self) -> bool:
    return self.action is StepAction.FOUND


Trace = tuple[Step, ...]


@dataclass(frozen=True)
class OperationResult:
  """Outcome of a mutating operation (create, insert, delete)."""

  success: bool
  position: int = -1
  error: str | None = None
  error_kind: str | None = None
  steps: Trace = ()
  collisions: int = 0
  hash_value: int | None = None
  formula: str | None = None

  def to_dict(self) -> dict[str, Any]:
    return _as_plain_dict(self)


@dataclass(frozen=True)
class SearchResult:
  """Outcome of a search."""

  found: bool
  position: int = -1
  steps: Trace = ()
  error: str | None = None
  error_kind: str | None = None
  hash_value: int | None = None
  formula: str | None = None

  def to_dict(self) -> dict[str, Any]:
    return _as_plain_dict(self)


def _as_plain_dict(result: OperationResult | SearchResult) -> dict[str, Any]:
  data = asdict(result)
  data["steps"] = [
    {
      **{k: (v.value if isinstance(v, StepAction) else v) for k, v in plain.items()},
      "match": step.match,
    }
    for step, plain in zip(result.steps, data["steps"])
  ]
  return data
