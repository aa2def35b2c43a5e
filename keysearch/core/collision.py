"""Open-addressing collision resolution.

Strategies differ only in their probe sequence and in how many empty slots
end an unsuccessful search, so each one is a ProbePlan entry in
PROBE_PLANS rather than a subclass:

- Linear: ``(h - 1 + i) mod N``; a search gives up after two empty slots.
- Quadratic: ``(h - 1 + i²) mod N`` for ``i < N``; same two-empty rule.
- Double hashing: the active hash function is re-applied to
  ``position + 1``; a search gives up at the first empty slot.

Deletion nulls the slot without a tombstone. Once deletions have opened
gaps inside a probe chain the early-exit rules above can miss keys that are
still stored; that behavior is kept as is.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from keysearch.core.errors import CapacityError, NotFoundError
from keysearch.core.hashing import HashResult, compute_hash
from keysearch.core.trace import OperationResult, SearchResult, Step, StepAction
from keysearch.core.types import CollisionStrategy, HashMethod

if TYPE_CHECKING:
  from collections.abc import MutableSequence

logger = structlog.get_logger()

Rehash = Callable[[int], HashResult]
# Yields (0-indexed position, formula explaining how it was reached)
ProbeSequence = Iterator[tuple[int, str | None]]


def linear_probes(h: int, capacity: int, rehash: Rehash) -> ProbeSequence:
  for i in range(capacity):
    position = (h - 1 + i) % capacity
    yield position, (None if i == 0 else f"{h} + {i} = {position + 1}")


def quadratic_probes(h: int, capacity: int, rehash: Rehash) -> ProbeSequence:
  for i in range(capacity):
    position = (h - 1 + i * i) % capacity
    yield position, (None if i == 0 else f"{h} + {i}² = {position + 1}")


def double_hash_probes(h: int, capacity: int, rehash: Rehash) -> ProbeSequence:
  current = h
  formula = None
  for _ in range(capacity):
    yield current - 1, formula
    step = rehash(current + 1)
    formula = f"H'({current}) = {step.formula}"
    current = step.slot


@dataclass(frozen=True)
class ProbePlan:
  """How one collision strategy walks the table."""

  probes: Callable[[int, int, Rehash], ProbeSequence]
  empty_limit: int


PROBE_PLANS: dict[CollisionStrategy, ProbePlan] = {
  CollisionStrategy.LINEAR: ProbePlan(probes=linear_probes, empty_limit=2),
  CollisionStrategy.QUADRATIC: ProbePlan(probes=quadratic_probes, empty_limit=2),
  CollisionStrategy.DOUBLE_HASH: ProbePlan(probes=double_hash_probes, empty_limit=1),
}


class CollisionResolver:
  """Runs insert/search/delete for one strategy over a store's slot list.

  The resolver writes into ``slots`` in place; the owning KeyStore keeps the
  occupancy count in step with the results it returns.
  """

  def __init__(
    self,
    strategy: CollisionStrategy | str,
    slots: MutableSequence[str | None],
    hash_method: HashMethod | str,
    project: Callable[[str], int],
  ) -> None:
    """
    Args:
        strategy: Collision strategy name or member
        slots: The store's slot list, mutated on insert/delete
        hash_method: Active hash method, reused by double hashing
        project: Maps a stored key to the integer fed to the hash function

    Raises:
        ConfigurationError: If strategy or hash method is unknown
    """
    self.strategy = CollisionStrategy.from_name(strategy)
    self.hash_method = HashMethod.from_name(hash_method)
    self.plan = PROBE_PLANS[self.strategy]
    self.slots = slots
    self.capacity = len(slots)
    self._project = project

  def insert(self, key: str, h: int) -> OperationResult:
    """Place ``key`` at the first empty slot of its probe sequence.

    Raises:
        CapacityError: If no empty slot is reached within ``N`` probes; the
            slots are left untouched and the error carries the trace
    """
    steps: list[Step] = []
    for attempt, (position, formula) in enumerate(self._probes(h)):
      occupant = self.slots[position]
      if occupant is None:
        self.slots[position] = key
        steps.append(
          Step(position, StepAction.INSERTED, key=key, formula=formula, offset=attempt)
        )
        return OperationResult(
          success=True, position=position, steps=tuple(steps), collisions=attempt
        )
      steps.append(self._collision(position, occupant, attempt))

    logger.debug("table_full", strategy=self.strategy.value, probes=len(steps))
    raise CapacityError(
      f"The table is full: no empty slot found after {len(steps)} probes.",
      "TableFull",
      steps=tuple(steps),
    )

  def search(self, key: str, h: int) -> SearchResult:
    """Walk the probe sequence until ``key`` or enough empty slots are met."""
    steps: list[Step] = []
    empties = 0
    for attempt, (position, formula) in enumerate(self._probes(h)):
      occupant = self.slots[position]
      if occupant is None:
        empties += 1
        steps.append(
          Step(position, StepAction.EMPTY, formula=formula, offset=attempt)
        )
        if empties >= self.plan.empty_limit:
          break
        continue
      if occupant == key:
        steps.append(
          Step(position, StepAction.FOUND, key=occupant, formula=formula, offset=attempt)
        )
        return SearchResult(found=True, position=position, steps=tuple(steps))
      steps.append(self._collision(position, occupant, attempt))
    return SearchResult(found=False, steps=tuple(steps))

  def delete(self, key: str, h: int) -> OperationResult:
    """Locate ``key`` with :meth:`search` and empty its slot.

    Raises:
        NotFoundError: If the search misses; carries the search trace
    """
    result = self.search(key, h)
    if not result.found:
      raise NotFoundError(
        f'Key "{key}" was not found.', "NotFound", steps=result.steps
      )
    self.slots[result.position] = None
    return OperationResult(success=True, position=result.position, steps=result.steps)

  def hash_key(self, key: str) -> HashResult:
    return self._rehash(self._project(key))

  def _rehash(self, k: int) -> HashResult:
    return compute_hash(self.hash_method, k, self.capacity)

  def _probes(self, h: int) -> ProbeSequence:
    return self.plan.probes(h, self.capacity, self._rehash)

  def _collision(self, position: int, occupant: str, attempt: int) -> Step:
    # The occupant's own hash shows why it sits on the probed slot
    return Step(
      position,
      StepAction.COLLISION,
      key=occupant,
      formula=self.hash_key(occupant).formula,
      offset=attempt,
    )
