"""Hash functions mapping a projected key to a 1-indexed slot.

Each function receives the projected integer ``k`` and the table capacity
``N`` and returns a HashResult with the slot in ``[1, N]`` together with
the intermediate values needed to render its formula. Squares and sums use
Python ints, so keys beyond 64 bits hash exactly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from keysearch.core.types import HashMethod


@dataclass(frozen=True)
class HashResult:
  """Outcome of one hash computation."""

  method: HashMethod
  k: int
  capacity: int
  slot: int
  # Integer reduced modulo the capacity
  value: int
  squared: int | None = None
  central_digits: str | None = None
  blocks: tuple[str, ...] = ()
  block_sum: int | None = None
  last_digits: str | None = None
  picked_digits: str | None = None

  @property
  def formula(self) -> str:
    """Human readable rendering of the arithmetic performed."""
    k, n, h = self.k, self.capacity, self.slot
    if self.method is HashMethod.MID_SQUARE:
      return (
        f"h({k}) = mid({k}²) = mid({self.squared}) = {self.central_digits}"
        f" -> ({self.value} mod {n}) + 1 = {h}"
      )
    if self.method is HashMethod.FOLDING:
      return (
        f"h({k}) = last({' + '.join(self.blocks)}) = last({self.block_sum})"
        f" = {self.last_digits} -> ({self.value} mod {n}) + 1 = {h}"
      )
    if self.method is HashMethod.TRUNCATION:
      return (
        f"h({k}) = odd_positions({k}) = {self.picked_digits or '0'}"
        f" -> ({self.value} mod {n}) + 1 = {h}"
      )
    return f"h({k}) = ({k} mod {n}) + 1 = {h}"


def digit_width(capacity: int) -> int:
  """Number of decimal digits of ``capacity - 1`` (at least 1)."""
  return len(str(max(capacity - 1, 0)))


def modulo_hash(k: int, capacity: int) -> HashResult:
  return HashResult(
    method=HashMethod.MODULO,
    k=k,
    capacity=capacity,
    slot=(k % capacity) + 1,
    value=k,
  )


def mid_square_hash(k: int, capacity: int) -> HashResult:
  """Take the central ``d`` digits of ``k²``."""
  d = digit_width(capacity)
  squared = k * k
  digits = str(squared)
  start = max(0, (len(digits) - d) // 2)
  central = digits[start : start + d]
  value = int(central)
  return HashResult(
    method=HashMethod.MID_SQUARE,
    k=k,
    capacity=capacity,
    slot=(value % capacity) + 1,
    value=value,
    squared=squared,
    central_digits=central,
  )


def folding_hash(k: int, capacity: int) -> HashResult:
  """Sum ``d``-digit blocks of ``k`` and keep the last ``d`` digits."""
  d = digit_width(capacity)
  digits = str(k)
  blocks = tuple(digits[i : i + d] for i in range(0, len(digits), d))
  block_sum = sum(int(block) for block in blocks)
  sum_digits = str(block_sum)
  last_digits = sum_digits[-d:] if len(sum_digits) > d else sum_digits
  value = int(last_digits)
  return HashResult(
    method=HashMethod.FOLDING,
    k=k,
    capacity=capacity,
    slot=(value % capacity) + 1,
    value=value,
    blocks=blocks,
    block_sum=block_sum,
    last_digits=last_digits,
  )


def truncation_hash(k: int, capacity: int) -> HashResult:
  """Keep digits at display positions 1, 3, 5, ... until ``d`` are picked."""
  d = digit_width(capacity)
  picked = str(k)[0::2][:d]
  # An empty pick counts as zero
  value = int(picked) if picked else 0
  return HashResult(
    method=HashMethod.TRUNCATION,
    k=k,
    capacity=capacity,
    slot=(value % capacity) + 1,
    value=value,
    picked_digits=picked,
  )


HashFunction = Callable[[int, int], HashResult]

HASH_FUNCTIONS: dict[HashMethod, HashFunction] = {
  HashMethod.MODULO: modulo_hash,
  HashMethod.MID_SQUARE: mid_square_hash,
  HashMethod.FOLDING: folding_hash,
  HashMethod.TRUNCATION: truncation_hash,
}


def compute_hash(method: HashMethod | str, k: int, capacity: int) -> HashResult:
  """Dispatch ``k`` to the hash function registered for ``method``.

  Raises:
      ConfigurationError: If ``method`` names no known hash function
  """
  return HASH_FUNCTIONS[HashMethod.from_name(method)](k, capacity)
