"""Store configuration model.

Validates the parameters a KeyStore is created with. A configuration can
also be kept in a small YAML "store profile" so the CLI can recreate the
same table repeatedly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import (
  BaseModel,
  ConfigDict,
  Field,
  ValidationInfo,
  field_validator,
  model_validator,
)

from keysearch.core.types import CollisionStrategy, DataType, HashMethod
from keysearch.settings import settings

_VARIANTS = {
  "data_type": DataType,
  "hash_method": HashMethod,
  "collision_strategy": CollisionStrategy,
}


class StoreConfig(BaseModel):
  """Creation parameters of a KeyStore.

  Capacity is fixed for the life of the store. Hash method and collision
  strategy only matter for hash-table stores.
  """

  model_config = ConfigDict(extra="forbid", frozen=True)

  capacity: Annotated[int, Field(gt=0, description="Number of slots")]
  key_length: Annotated[int, Field(gt=0, description="Exact canonical key width")]
  data_type: DataType
  allow_duplicates: bool = True
  hash_method: HashMethod = HashMethod.MODULO
  collision_strategy: CollisionStrategy | None = None

  @field_validator("data_type", "hash_method", "collision_strategy", mode="before")
  @classmethod
  def resolve_variant_names(cls, v: Any, info: ValidationInfo) -> Any:
    """Accept legacy variant names such as "numerico" or "prueba-lineal"."""
    if isinstance(v, str):
      return _VARIANTS[info.field_name].from_name(v)
    return v

  @model_validator(mode="after")
  def check_capacity_limit(self) -> StoreConfig:
    """Reject capacities above the configured maximum."""
    if self.capacity > settings.max_capacity:
      raise ValueError(
        f"capacity must be at most {settings.max_capacity:,}, got {self.capacity:,}"
      )
    return self

  @classmethod
  def from_yaml(cls, yaml_content: str) -> StoreConfig:
    """Parse and validate a store profile from a YAML string.

    Raises:
        ValueError: If YAML is invalid or doesn't match schema
    """
    try:
      data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
      raise ValueError(f"Invalid YAML syntax: {e}") from e

    if data is None:
      data = {}

    return cls.model_validate(data)

  @classmethod
  def from_yaml_file(cls, path: Path | str) -> StoreConfig:
    """Load and validate a store profile from a YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If YAML is invalid or doesn't match schema
    """
    path = Path(path)
    if not path.exists():
      raise FileNotFoundError(f"Store profile not found: {path}")
    return cls.from_yaml(path.read_text(encoding="utf-8"))

  def to_yaml(self) -> str:
    data = self.model_dump(mode="json", exclude_none=True)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def format_validation_errors(errors: list[Any]) -> str:
  """Format Pydantic validation errors for user-friendly display.

  Args:
      errors: List of error dictionaries from ValidationError

  Returns:
      Formatted error message string
  """
  lines = ["Invalid store parameters:"]
  for error in errors:
    loc = ".".join(str(x) for x in error["loc"]) or "store"
    lines.append(f"  - {loc}: {error['msg']}")
  return "\n".join(lines)
