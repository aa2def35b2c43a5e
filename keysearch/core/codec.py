"""Key normalization, numeric projection and key ordering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from keysearch.core.errors import KeyValidationError
from keysearch.core.types import DataType

if TYPE_CHECKING:
  from collections.abc import Sequence

_ACCENTS = "áéíóúñÁÉÍÓÚÑüÜ"

_GRAMMARS: dict[DataType, re.Pattern[str]] = {
  DataType.NUMERIC: re.compile(r"^\d+$", re.ASCII),
  DataType.TEXT: re.compile(rf"^[a-zA-Z{_ACCENTS}\s]+$"),
  DataType.ALPHANUMERIC: re.compile(rf"^[a-zA-Z0-9{_ACCENTS}]+$"),
}

_GRAMMAR_ERRORS: dict[DataType, str] = {
  DataType.NUMERIC: "Key must be numeric. Only digits (0-9) are allowed.",
  DataType.TEXT: "Key must contain letters only.",
  DataType.ALPHANUMERIC: (
    "Key must be alphanumeric (letters and/or digits, no spaces or symbols)."
  ),
}


@dataclass(frozen=True)
class KeyCodec:
  """Turns raw user input into canonical keys for one store configuration."""

  key_length: int
  data_type: DataType
  allow_duplicates: bool = True

  def normalize(self, raw: str | None, slots: Sequence[str | None] = ()) -> str:
    """Validate a raw key and return its canonical form.

    Checks run in order: blank input, grammar, length (numeric keys are
    left-padded with zeros), then duplicates against ``slots``.

    Args:
        raw: Raw key as typed by the user
        slots: Current slot contents, used for the duplicate check

    Returns:
        Canonical key of exactly ``key_length`` characters

    Raises:
        KeyValidationError: With code EmptyKey, InvalidKey, TooLong,
            WrongLength or DuplicateKey
    """
    key = self._strip(raw)

    if not _GRAMMARS[self.data_type].match(key):
      raise KeyValidationError(_GRAMMAR_ERRORS[self.data_type], "InvalidKey")

    if self.data_type is DataType.NUMERIC:
      if len(key) > self.key_length:
        raise KeyValidationError(
          f"Numeric key exceeds the configured size of {self.key_length} digits.",
          "TooLong",
        )
      key = key.zfill(self.key_length)
    elif len(key) != self.key_length:
      raise KeyValidationError(
        f"Key size must be exactly {self.key_length} character(s). "
        f"Current size: {len(key)}.",
        "WrongLength",
      )

    if not self.allow_duplicates and key in slots:
      raise KeyValidationError(
        f'Key "{key}" already exists and duplicates are not allowed.',
        "DuplicateKey",
      )
    return key

  def prepare(self, raw: str | None) -> str:
    """Normalize a lookup key without rejecting malformed input.

    Only trims and zero-pads short all-digit keys in numeric stores; a key
    that could never be stored is simply not found by the caller.
    """
    key = self._strip(raw)
    if (
      self.data_type is DataType.NUMERIC
      and key.isascii()
      and key.isdigit()
      and len(key) < self.key_length
    ):
      return key.zfill(self.key_length)
    return key

  def projectable(self, key: str) -> bool:
    """Whether ``key`` maps to an integer under this store's data type."""
    if self.data_type is not DataType.NUMERIC:
      return True
    return bool(_GRAMMARS[DataType.NUMERIC].match(key))

  def project(self, key: str) -> int:
    """Map a canonical key to the integer fed to hash functions.

    Raises:
        KeyValidationError: If a numeric store's key is not all digits
    """
    if not self.projectable(key):
      raise KeyValidationError(_GRAMMAR_ERRORS[self.data_type], "InvalidKey")
    return project(key, self.data_type)

  def compare(self, a: str, b: str) -> int:
    """Three-way comparison of two canonical keys."""
    return compare_keys(a, b, self.data_type)

  @staticmethod
  def _strip(raw: str | None) -> str:
    if raw is None or not str(raw).strip():
      raise KeyValidationError("A key must be entered.", "EmptyKey")
    return str(raw).strip()


def project(key: str, data_type: DataType) -> int:
  """Project a key to an integer.

  Numeric keys parse as decimal (Python ints never lose precision). Text and
  alphanumeric keys become the sum of their character codes, so anagrams
  project to the same value.
  """
  if data_type is DataType.NUMERIC:
    return int(key, 10)
  return sum(ord(ch) for ch in key)


def compare_keys(a: str, b: str, data_type: DataType) -> int:
  """Compare two keys, returning negative, zero or positive.

  Numeric keys share a padded width, so codepoint order equals numeric order.
  Other keys compare character codes position by position and the shorter
  prefix sorts first.
  """
  if data_type is DataType.NUMERIC:
    return (a > b) - (a < b)
  for ch_a, ch_b in zip(a, b):
    diff = ord(ch_a) - ord(ch_b)
    if diff:
      return diff
  return len(a) - len(b)
