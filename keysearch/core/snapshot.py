"""Serialized form of a KeyStore and the saved-file envelope around it.

The JSON shape uses camelCase field names so files written by earlier
versions of the tool load unchanged::

    {"keys": [...], "size": 10, "keyLength": 2, "dataType": "numeric",
     "allowDuplicates": true, "count": 3, "hashMethod": "modulo",
     "collisionStrategy": "linear"}

Only the shape is validated; keys are restored verbatim.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
  from keysearch.core.store import KeyStore

logger = structlog.get_logger()


class StoreSnapshot(BaseModel):
  """Plain-data image of a created KeyStore."""

  model_config = ConfigDict(populate_by_name=True, extra="ignore")

  keys: list[str | None]
  size: int
  key_length: int = Field(alias="keyLength")
  data_type: str = Field(alias="dataType")
  allow_duplicates: bool = Field(alias="allowDuplicates")
  count: int
  hash_method: str | None = Field(default=None, alias="hashMethod")
  collision_strategy: str | None = Field(default=None, alias="collisionStrategy")

  def to_json_dict(self) -> dict[str, Any]:
    return self.model_dump(by_alias=True, exclude_none=True)


class SavedStructure(BaseModel):
  """File envelope: which view saved the store, when, and the store itself."""

  algorithm: str = "structure"
  timestamp: datetime = Field(default_factory=datetime.now)
  structure: StoreSnapshot

  @classmethod
  def from_json(cls, json_content: str) -> SavedStructure:
    """Parse and validate a saved file from a JSON string.

    Raises:
        ValueError: If the JSON is malformed or lacks a structure with keys
    """
    try:
      data = json.loads(json_content)
    except json.JSONDecodeError as e:
      raise ValueError(f"Invalid JSON: {e}") from e
    return cls.model_validate(data)

  def to_json(self) -> str:
    data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def save_structure(
  path: Path | str, store: KeyStore, algorithm: str = "structure"
) -> Path:
  """Write ``store`` to ``path`` inside a SavedStructure envelope.

  Raises:
      StateError: If the store has not been created
  """
  path = Path(path)
  envelope = SavedStructure(
    algorithm=algorithm, structure=StoreSnapshot.model_validate(store.to_json())
  )
  path.write_text(envelope.to_json(), encoding="utf-8")
  logger.debug("structure_saved", path=str(path), algorithm=algorithm)
  return path


def load_structure(path: Path | str) -> SavedStructure:
  """Read a saved file.

  Raises:
      FileNotFoundError: If the file doesn't exist
      ValueError: If the content is not a valid saved structure
  """
  path = Path(path)
  if not path.exists():
    raise FileNotFoundError(f"Saved structure not found: {path}")
  return SavedStructure.from_json(path.read_text(encoding="utf-8"))
