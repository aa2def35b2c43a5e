"""Fixed-capacity key store.

KeyStore owns the slot array and is the only writer to it. Array variants
(``insert``, ``sorted_insert``, ``delete`` with sequential/binary search)
keep occupied slots packed at the front; hash variants (``hash_*``) place
keys wherever the hash function and collision strategy send them.

Recoverable failures (bad key, full table, wrong lifecycle state, missing
key) come back as result objects with ``error``/``error_kind`` set. Unknown
variant names raise ConfigurationError.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

import pydantic
import structlog

from keysearch.core import search
from keysearch.core.codec import KeyCodec
from keysearch.core.collision import CollisionResolver
from keysearch.core.config import StoreConfig, format_validation_errors
from keysearch.core.errors import (
  CapacityError,
  ConfigurationError,
  KeyStoreError,
  KeyValidationError,
  NotFoundError,
  StateError,
)
from keysearch.core.hashing import HashResult, compute_hash
from keysearch.core.snapshot import StoreSnapshot
from keysearch.core.trace import OperationResult, SearchResult
from keysearch.core.types import CollisionStrategy, DataType, HashMethod

if TYPE_CHECKING:
  from collections.abc import Mapping

logger = structlog.get_logger()


class KeyStore:
  """A fixed-size array of typed keys with traced search algorithms."""

  def __init__(self) -> None:
    self._config: StoreConfig | None = None
    self._codec: KeyCodec | None = None
    self._slots: list[str | None] = []
    self._count = 0

  # ------------------------------------------------------------------
  # Lifecycle
  # ------------------------------------------------------------------

  def create(
    self,
    capacity: int,
    key_length: int,
    data_type: DataType | str,
    allow_duplicates: bool = True,
    collision_strategy: CollisionStrategy | str | None = None,
    hash_method: HashMethod | str = HashMethod.MODULO,
  ) -> OperationResult:
    """Create an empty store.

    Args:
        capacity: Number of slots, fixed for the life of the store
        key_length: Exact width of every canonical key
        data_type: "numeric", "text" or "alphanumeric"
        allow_duplicates: Whether the same key may be stored twice
        collision_strategy: Default strategy for hash operations
        hash_method: Hash function used by hash operations

    Returns:
        OperationResult; fails with AlreadyCreated or InvalidParameters

    Raises:
        ConfigurationError: If a variant name is unknown
    """
    data_type = DataType.from_name(data_type)
    hash_method = HashMethod.from_name(hash_method)
    if collision_strategy is not None:
      collision_strategy = CollisionStrategy.from_name(collision_strategy)

    try:
      if self.created:
        raise StateError(
          "A structure already exists; reset it before creating another.",
          "AlreadyCreated",
        )
      try:
        config = StoreConfig(
          capacity=capacity,
          key_length=key_length,
          data_type=data_type,
          allow_duplicates=allow_duplicates,
          hash_method=hash_method,
          collision_strategy=collision_strategy,
        )
      except pydantic.ValidationError as e:
        raise KeyValidationError(
          format_validation_errors(e.errors()), "InvalidParameters"
        ) from e
    except KeyStoreError as exc:
      return self._failed(exc)

    self._configure(config, [None] * config.capacity, 0)
    logger.debug(
      "store_created",
      capacity=config.capacity,
      key_length=config.key_length,
      data_type=config.data_type.value,
    )
    return OperationResult(success=True)

  def reset(self) -> None:
    """Return to the uncreated state."""
    self._config = None
    self._codec = None
    self._slots = []
    self._count = 0
    logger.debug("store_reset")

  def clear_keys(self) -> None:
    """Empty every slot but keep the configuration."""
    self._require_created()
    self._slots = [None] * len(self._slots)
    self._count = 0

  # ------------------------------------------------------------------
  # Read-only view
  # ------------------------------------------------------------------

  @property
  def created(self) -> bool:
    return self._config is not None

  @property
  def config(self) -> StoreConfig:
    if self._config is None:
      raise StateError("The structure must be created first.", "NotCreated")
    return self._config

  @property
  def capacity(self) -> int:
    return self._config.capacity if self._config else 0

  @property
  def key_length(self) -> int:
    return self._config.key_length if self._config else 0

  @property
  def data_type(self) -> DataType | None:
    return self._config.data_type if self._config else None

  @property
  def allow_duplicates(self) -> bool:
    return self._config.allow_duplicates if self._config else True

  @property
  def hash_method(self) -> HashMethod | None:
    return self._config.hash_method if self._config else None

  @property
  def collision_strategy(self) -> CollisionStrategy | None:
    return self._config.collision_strategy if self._config else None

  @property
  def count(self) -> int:
    return self._count

  @property
  def slots(self) -> tuple[str | None, ...]:
    """Snapshot of the slot contents; index is the physical position."""
    return tuple(self._slots)

  @property
  def is_full(self) -> bool:
    return self._count >= self.capacity

  # ------------------------------------------------------------------
  # Array variants
  # ------------------------------------------------------------------

  def insert(self, raw_key: str | None) -> OperationResult:
    """Store a key in the first empty slot."""
    try:
      codec = self._require_created()
      self._require_room()
      key = codec.normalize(raw_key, self._slots)
      position = next(
        (i for i, existing in enumerate(self._slots) if existing is None), -1
      )
      if position < 0:
        raise CapacityError("No free slot is available.", "TableFull")
    except KeyStoreError as exc:
      return self._failed(exc)

    self._place(position, key)
    return OperationResult(success=True, position=position)

  def sorted_insert(self, raw_key: str | None) -> OperationResult:
    """Store a key keeping the occupied prefix in ascending order.

    The key goes before the first stored key that compares strictly greater
    and the rest of the prefix shifts one slot to the right.
    Fails with NotSorted when the stored keys are not an ascending prefix.
    """
    try:
      codec = self._require_created()
      self._require_room()
      key = codec.normalize(raw_key, self._slots)
      self._require_sorted()
    except KeyStoreError as exc:
      return self._failed(exc)

    position = search.sorted_position(self._slots, self._count, key, codec.compare)
    self._slots[position + 1 : self._count + 1] = self._slots[position : self._count]
    self._place(position, key)
    return OperationResult(success=True, position=position)

  def delete(self, raw_key: str | None) -> OperationResult:
    """Remove the first occurrence of a key and shift the suffix left."""
    try:
      codec = self._require_created()
      key = codec.prepare(raw_key)
      if key not in self._slots:
        raise NotFoundError(f'Key "{key}" was not found in the structure.')
    except KeyStoreError as exc:
      return self._failed(exc)

    position = self._slots.index(key)
    del self._slots[position]
    self._slots.append(None)
    self._count -= 1
    logger.debug("key_deleted", key=key, position=position)
    return OperationResult(success=True, position=position)

  def sequential_search(self, raw_key: str | None) -> SearchResult:
    try:
      key = self._require_created().prepare(raw_key)
    except KeyStoreError as exc:
      return self._missed(exc)
    return search.sequential_search(self._slots, key)

  def binary_search(self, raw_key: str | None) -> SearchResult:
    """Binary search over the ascending prefix ``[0, count)``.

    The prefix must already be ordered, either because every key went
    through :meth:`sorted_insert` or after a one-time :meth:`sort_keys`;
    otherwise the result fails with NotSorted.
    """
    try:
      codec = self._require_created()
      key = codec.prepare(raw_key)
      self._require_sorted()
    except KeyStoreError as exc:
      return self._missed(exc)
    return search.binary_search(self._slots, self._count, key, codec.compare)

  def sort_keys(self) -> None:
    """Pack every stored key into an ascending prefix."""
    codec = self._require_created()
    keys = search.sorted_keys(self._slots, codec.compare)
    self._slots = keys + [None] * (len(self._slots) - len(keys))
    self._count = len(keys)
    logger.debug("keys_sorted", count=self._count)

  def is_sorted(self) -> bool:
    codec = self._require_created()
    return search.is_ascending(self._slots, self._count, codec.compare)

  # ------------------------------------------------------------------
  # Hash variants
  # ------------------------------------------------------------------

  def hash_insert(
    self, raw_key: str | None, strategy: CollisionStrategy | str | None = None
  ) -> OperationResult:
    """Insert through the hash function, resolving collisions by ``strategy``.

    ``strategy`` defaults to the store's configured collision strategy.
    """
    hashed: HashResult | None = None
    try:
      codec = self._require_created()
      resolver = self._resolver(strategy)
      self._require_room()
      key = codec.normalize(raw_key, self._slots)
      hashed = resolver.hash_key(key)
      result = resolver.insert(key, hashed.slot)
    except KeyStoreError as exc:
      return self._failed(exc, hashed)

    self._count += 1
    logger.debug(
      "key_inserted",
      key=key,
      position=result.position,
      hash=hashed.slot,
      collisions=result.collisions,
    )
    return replace(result, hash_value=hashed.slot, formula=hashed.formula)

  def hash_search(
    self, raw_key: str | None, strategy: CollisionStrategy | str | None = None
  ) -> SearchResult:
    hashed: HashResult | None = None
    try:
      codec = self._require_created()
      resolver = self._resolver(strategy)
      key = codec.prepare(raw_key)
      if not codec.projectable(key):
        logger.debug("search_failed", code="NotFound", key=key)
        return SearchResult(found=False, error_kind="NotFound")
      hashed = resolver.hash_key(key)
    except KeyStoreError as exc:
      return self._missed(exc, hashed)
    result = resolver.search(key, hashed.slot)
    return replace(result, hash_value=hashed.slot, formula=hashed.formula)

  def hash_delete(
    self, raw_key: str | None, strategy: CollisionStrategy | str | None = None
  ) -> OperationResult:
    hashed: HashResult | None = None
    try:
      codec = self._require_created()
      resolver = self._resolver(strategy)
      key = codec.prepare(raw_key)
      if not codec.projectable(key):
        raise NotFoundError(f'Key "{key}" was not found.')
      hashed = resolver.hash_key(key)
      result = resolver.delete(key, hashed.slot)
    except KeyStoreError as exc:
      return self._failed(exc, hashed)

    self._count -= 1
    logger.debug("key_deleted", key=key, position=result.position)
    return replace(result, hash_value=hashed.slot, formula=hashed.formula)

  def hash_of(self, raw_key: str | None) -> HashResult:
    """Hash a key with the active method without touching the table.

    Raises:
        StateError: If the store has not been created
        KeyValidationError: If the key is blank, or not all digits in a
            numeric store
    """
    codec = self._require_created()
    key = codec.prepare(raw_key)
    return compute_hash(self.config.hash_method, codec.project(key), self.capacity)

  # ------------------------------------------------------------------
  # Persistence
  # ------------------------------------------------------------------

  def to_json(self) -> dict[str, Any]:
    """Serialize to the plain JSON shape.

    Raises:
        StateError: If the store has not been created
    """
    config = self.config
    snapshot = StoreSnapshot(
      keys=list(self._slots),
      size=config.capacity,
      key_length=config.key_length,
      data_type=config.data_type.value,
      allow_duplicates=config.allow_duplicates,
      count=self._count,
      hash_method=config.hash_method.value,
      collision_strategy=(
        config.collision_strategy.value if config.collision_strategy else None
      ),
    )
    return snapshot.to_json_dict()

  def from_json(self, data: Mapping[str, Any] | StoreSnapshot) -> None:
    """Restore a store verbatim from its JSON shape.

    Keys are not re-validated against the current rules.

    Raises:
        pydantic.ValidationError: If ``data`` does not have the JSON shape
        ConfigurationError: If a stored variant name is unknown
    """
    snapshot = (
      data if isinstance(data, StoreSnapshot) else StoreSnapshot.model_validate(data)
    )
    config = StoreConfig.model_construct(
      capacity=snapshot.size,
      key_length=snapshot.key_length,
      data_type=DataType.from_name(snapshot.data_type),
      allow_duplicates=snapshot.allow_duplicates,
      hash_method=HashMethod.from_name(snapshot.hash_method or HashMethod.MODULO),
      collision_strategy=(
        CollisionStrategy.from_name(snapshot.collision_strategy)
        if snapshot.collision_strategy
        else None
      ),
    )
    self._configure(config, list(snapshot.keys), snapshot.count)
    logger.debug("store_loaded", capacity=config.capacity, count=snapshot.count)

  # ------------------------------------------------------------------
  # Internals
  # ------------------------------------------------------------------

  def _configure(
    self, config: StoreConfig, slots: list[str | None], count: int
  ) -> None:
    self._config = config
    self._codec = KeyCodec(
      key_length=config.key_length,
      data_type=config.data_type,
      allow_duplicates=config.allow_duplicates,
    )
    self._slots = slots
    self._count = count

  def _require_created(self) -> KeyCodec:
    if self._codec is None:
      raise StateError("The structure must be created first.", "NotCreated")
    return self._codec

  def _require_room(self) -> None:
    if self.is_full:
      raise CapacityError(
        "The structure is full. No more keys can be inserted.", "TableFull"
      )

  def _resolver(self, strategy: CollisionStrategy | str | None) -> CollisionResolver:
    config = self.config
    strategy = strategy if strategy is not None else config.collision_strategy
    if strategy is None:
      raise ConfigurationError(
        "No collision strategy given and none configured for this store."
      )
    return CollisionResolver(
      strategy, self._slots, config.hash_method, self._require_created().project
    )

  def _require_sorted(self) -> None:
    if not self.is_sorted():
      raise StateError(
        "The stored keys are not packed in ascending order; run sort_keys() first.",
        "NotSorted",
      )

  def _place(self, position: int, key: str) -> None:
    self._slots[position] = key
    self._count += 1
    logger.debug("key_inserted", key=key, position=position)

  def _failed(
    self, exc: KeyStoreError, hashed: HashResult | None = None
  ) -> OperationResult:
    logger.debug("operation_failed", code=exc.code, error=exc.message)
    return OperationResult(
      success=False,
      error=exc.message,
      error_kind=exc.code,
      steps=exc.steps,
      hash_value=hashed.slot if hashed else None,
      formula=hashed.formula if hashed else None,
    )

  def _missed(self, exc: KeyStoreError, hashed: HashResult | None = None) -> SearchResult:
    logger.debug("search_failed", code=exc.code, error=exc.message)
    return SearchResult(
      found=False,
      error=exc.message,
      error_kind=exc.code,
      steps=exc.steps,
      hash_value=hashed.slot if hashed else None,
      formula=hashed.formula if hashed else None,
    )
