"""Unit tests for StoreConfig, store profiles and variant names."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from keysearch.core.config import StoreConfig, format_validation_errors
from keysearch.core.errors import ConfigurationError
from keysearch.core.types import CollisionStrategy, DataType, HashMethod, SearchMethod

pytestmark = pytest.mark.unit


class TestVariantNames:
  """Test canonical names and legacy aliases."""

  @pytest.mark.parametrize(
    ("name", "expected"),
    [
      ("numeric", DataType.NUMERIC),
      ("Numerico", DataType.NUMERIC),
      ("texto", DataType.TEXT),
      ("alfanumerico", DataType.ALPHANUMERIC),
    ],
  )
  def test_data_type(self, name: str, expected: DataType) -> None:
    assert DataType.from_name(name) is expected

  @pytest.mark.parametrize(
    ("name", "expected"),
    [
      ("modulo", HashMethod.MODULO),
      ("cuadrado", HashMethod.MID_SQUARE),
      ("mid_square", HashMethod.MID_SQUARE),
      ("plegamiento", HashMethod.FOLDING),
      ("truncamiento", HashMethod.TRUNCATION),
    ],
  )
  def test_hash_method(self, name: str, expected: HashMethod) -> None:
    assert HashMethod.from_name(name) is expected

  @pytest.mark.parametrize(
    ("name", "expected"),
    [
      ("prueba-lineal", CollisionStrategy.LINEAR),
      ("prueba-cuadratica", CollisionStrategy.QUADRATIC),
      ("doble-hash", CollisionStrategy.DOUBLE_HASH),
      ("double_hash", CollisionStrategy.DOUBLE_HASH),
    ],
  )
  def test_collision_strategy(self, name: str, expected: CollisionStrategy) -> None:
    assert CollisionStrategy.from_name(name) is expected

  def test_search_method(self) -> None:
    assert SearchMethod.from_name("binaria") is SearchMethod.BINARY
    assert SearchMethod.from_name("secuencial") is SearchMethod.SEQUENTIAL

  def test_members_pass_through(self) -> None:
    assert HashMethod.from_name(HashMethod.FOLDING) is HashMethod.FOLDING

  def test_unknown_lists_valid_names(self) -> None:
    with pytest.raises(ConfigurationError, match="linear, quadratic, double-hash"):
      CollisionStrategy.from_name("cuckoo")

  def test_configuration_error_is_value_error(self) -> None:
    with pytest.raises(ValueError):
      DataType.from_name("binary")

  def test_strategy_labels(self) -> None:
    assert CollisionStrategy.LINEAR.label == "Linear Probing"
    assert CollisionStrategy.DOUBLE_HASH.label == "Double Hashing"


class TestStoreConfig:
  """Test validation of creation parameters."""

  def test_defaults(self) -> None:
    config = StoreConfig(capacity=10, key_length=2, data_type="numeric")
    assert config.allow_duplicates
    assert config.hash_method is HashMethod.MODULO
    assert config.collision_strategy is None

  def test_aliases_resolved(self) -> None:
    config = StoreConfig(
      capacity=10,
      key_length=2,
      data_type="texto",
      hash_method="plegamiento",
      collision_strategy="prueba-lineal",
    )
    assert config.data_type is DataType.TEXT
    assert config.hash_method is HashMethod.FOLDING
    assert config.collision_strategy is CollisionStrategy.LINEAR

  def test_non_positive_capacity(self) -> None:
    with pytest.raises(pydantic.ValidationError):
      StoreConfig(capacity=0, key_length=2, data_type="numeric")

  def test_capacity_limit(self) -> None:
    with pytest.raises(pydantic.ValidationError, match="at most"):
      StoreConfig(capacity=1_000_000_001, key_length=2, data_type="numeric")

  def test_extra_fields_forbidden(self) -> None:
    with pytest.raises(pydantic.ValidationError):
      StoreConfig(capacity=10, key_length=2, data_type="numeric", size=4)

  def test_frozen(self) -> None:
    config = StoreConfig(capacity=10, key_length=2, data_type="numeric")
    with pytest.raises(pydantic.ValidationError):
      config.capacity = 20

  def test_format_validation_errors(self) -> None:
    with pytest.raises(pydantic.ValidationError) as exc:
      StoreConfig(capacity=0, key_length=0, data_type="numeric")
    message = format_validation_errors(exc.value.errors())

    assert message.startswith("Invalid store parameters:")
    assert "capacity" in message
    assert "key_length" in message


class TestStoreProfiles:
  """Test YAML store profiles."""

  def test_from_yaml(self) -> None:
    config = StoreConfig.from_yaml(
      """
capacity: 10
key_length: 4
data_type: alphanumeric
allow_duplicates: false
hash_method: folding
collision_strategy: double-hash
"""
    )
    assert config.capacity == 10
    assert not config.allow_duplicates
    assert config.collision_strategy is CollisionStrategy.DOUBLE_HASH

  def test_invalid_yaml(self) -> None:
    with pytest.raises(ValueError, match="Invalid YAML"):
      StoreConfig.from_yaml("capacity: [10")

  def test_empty_yaml_missing_fields(self) -> None:
    with pytest.raises(pydantic.ValidationError):
      StoreConfig.from_yaml("")

  def test_from_yaml_file_missing(self, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
      StoreConfig.from_yaml_file(tmp_path / "missing.yaml")

  def test_yaml_round_trip(self, tmp_path: Path) -> None:
    config = StoreConfig(
      capacity=8, key_length=3, data_type="text", hash_method="truncation"
    )
    path = tmp_path / "store.yaml"
    path.write_text(config.to_yaml())

    assert StoreConfig.from_yaml_file(path) == config
    assert "collision_strategy" not in path.read_text()
