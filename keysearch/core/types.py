"""Closed variant enums for key types, hash methods and collision strategies."""

from __future__ import annotations

from enum import Enum

from keysearch.core.errors import ConfigurationError


class _NamedVariant(str, Enum):
  """Base for string-valued variants that accept legacy aliases."""

  @classmethod
  def _aliases(cls) -> dict[str, str]:
    return {}

  @classmethod
  def from_name(cls, name: str | _NamedVariant) -> _NamedVariant:
    """Resolve a variant from its canonical name or a known alias.

    Args:
        name: Canonical value (e.g. "modulo"), alias, or an existing member

    Returns:
        The matching enum member

    Raises:
        ConfigurationError: If the name is not a known variant
    """
    if isinstance(name, cls):
      return name
    normalized = str(name).strip().lower()
    normalized = cls._aliases().get(normalized, normalized)
    try:
      return cls(normalized)
    except ValueError:
      valid = ", ".join(member.value for member in cls)
      raise ConfigurationError(
        f"Unknown {cls.__name__} {name!r}; expected one of: {valid}"
      ) from None


class DataType(_NamedVariant):
  """Key categories a store accepts."""

  NUMERIC = "numeric"
  TEXT = "text"
  ALPHANUMERIC = "alphanumeric"

  @classmethod
  def _aliases(cls) -> dict[str, str]:
    return {
      "numerico": "numeric",
      "texto": "text",
      "alfanumerico": "alphanumeric",
    }


class HashMethod(_NamedVariant):
  """Hash functions mapping a projected key to a 1-indexed slot."""

  MODULO = "modulo"
  MID_SQUARE = "mid-square"
  FOLDING = "folding"
  TRUNCATION = "truncation"

  @classmethod
  def _aliases(cls) -> dict[str, str]:
    return {
      "cuadrado": "mid-square",
      "mid_square": "mid-square",
      "plegamiento": "folding",
      "truncamiento": "truncation",
    }


class CollisionStrategy(_NamedVariant):
  """Open-addressing probe strategies."""

  LINEAR = "linear"
  QUADRATIC = "quadratic"
  DOUBLE_HASH = "double-hash"

  @classmethod
  def _aliases(cls) -> dict[str, str]:
    return {
      "prueba-lineal": "linear",
      "prueba-cuadratica": "quadratic",
      "doble-hash": "double-hash",
      "double_hash": "double-hash",
    }

  @property
  def label(self) -> str:
    """Human readable strategy name."""
    return {
      CollisionStrategy.LINEAR: "Linear Probing",
      CollisionStrategy.QUADRATIC: "Quadratic Probing",
      CollisionStrategy.DOUBLE_HASH: "Double Hashing",
    }[self]


class SearchMethod(_NamedVariant):
  """Search algorithms offered over a store."""

  SEQUENTIAL = "sequential"
  BINARY = "binary"
  HASH = "hash"

  @classmethod
  def _aliases(cls) -> dict[str, str]:
    return {"secuencial": "sequential", "binaria": "binary"}
