"""Unit tests for sequential and binary search traces."""

from __future__ import annotations

from functools import partial

import pytest

from keysearch.core.codec import compare_keys
from keysearch.core.search import (
  binary_search,
  is_ascending,
  sequential_search,
  sorted_keys,
  sorted_position,
)
from keysearch.core.trace import StepAction
from keysearch.core.types import DataType

pytestmark = pytest.mark.unit
numeric = partial(compare_keys, data_type=DataType.NUMERIC)
text = partial(compare_keys, data_type=DataType.TEXT)


class TestSequentialSearch:
  """Test the linear scan."""

  def test_found(self) -> None:
    slots = ["05", "03", "09", None]
    result = sequential_search(slots, "09")

    assert result.found
    assert result.position == 2
    assert [s.action for s in result.steps] == [
      StepAction.COMPARED,
      StepAction.COMPARED,
      StepAction.FOUND,
    ]

  def test_stops_at_first_empty(self) -> None:
    slots = ["05", None, "09"]
    result = sequential_search(slots, "09")

    assert not result.found
    assert result.position == -1
    assert len(result.steps) == 1

  def test_empty_array(self) -> None:
    result = sequential_search([None, None], "01")
    assert not result.found
    assert result.steps == ()


class TestBinarySearch:
  """Test midpoint traces."""

  def test_found_in_two_steps(self) -> None:
    slots = ["01", "03", "05", "07", None]
    result = binary_search(slots, 4, "05", numeric)

    assert result.found
    assert result.position == 2
    first, second = result.steps
    assert first.action is StepAction.DISCARD_LEFT
    assert (first.position, first.low, first.high) == (1, 0, 3)
    assert second.action is StepAction.FOUND
    assert (second.position, second.low, second.high) == (2, 2, 3)

  def test_miss_ends_with_final_bounds(self) -> None:
    slots = ["01", "03", "05", "07", None]
    result = binary_search(slots, 4, "06", numeric)

    assert not result.found
    assert result.position == -1
    last = result.steps[-1]
    assert last.action is StepAction.NOT_FOUND
    assert (last.low, last.high) == (3, 2)
    assert last.position == 3
    assert last.key == "07"
    assert [s.action for s in result.steps[:-1]] == [
      StepAction.DISCARD_LEFT,
      StepAction.DISCARD_LEFT,
      StepAction.DISCARD_RIGHT,
    ]

  def test_empty_prefix(self) -> None:
    result = binary_search([None, None], 0, "01", numeric)

    assert not result.found
    (only,) = result.steps
    assert only.action is StepAction.NOT_FOUND
    assert only.position is None
    assert (only.low, only.high) == (0, -1)

  def test_gap_in_prefix_rejected(self) -> None:
    with pytest.raises(ValueError, match="Empty slot at position 0"):
      binary_search([None, None, "07", "12", None], 2, "12", numeric)

  def test_steps_are_immutable(self) -> None:
    result = binary_search(["01"], 1, "01", numeric)
    assert isinstance(result.steps, tuple)


class TestOrdering:
  """Test sorted insertion points and sorting helpers."""

  def test_sorted_position_after_equal_keys(self) -> None:
    slots = ["01", "03", "03", "07", None]
    assert sorted_position(slots, 4, "03", numeric) == 3
    assert sorted_position(slots, 4, "00", numeric) == 0
    assert sorted_position(slots, 4, "09", numeric) == 4

  def test_sorted_position_gap_rejected(self) -> None:
    with pytest.raises(ValueError, match="Empty slot"):
      sorted_position(["01", None, "05"], 3, "04", numeric)

  def test_is_ascending(self) -> None:
    assert is_ascending(["01", "02", None], 2, numeric)
    assert not is_ascending(["02", "01", None], 2, numeric)
    assert is_ascending([None], 0, numeric)

  def test_sorted_keys_by_character_code(self) -> None:
    assert sorted_keys(["b", None, "B", "a"], text) == ["B", "a", "b"]
