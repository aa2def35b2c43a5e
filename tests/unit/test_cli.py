"""Tests for the keysearch CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from keysearch.cli.app import app

pytestmark = pytest.mark.unit

runner = CliRunner()


@pytest.fixture
def state(tmp_path: Path) -> Path:
  return tmp_path / "state.json"


def invoke(state: Path, *args: str):
  return runner.invoke(app, [*args, "--state", str(state)])


class TestCreate:
  """Test the create command."""

  def test_creates_state_file(self, state: Path) -> None:
    result = invoke(state, "create", "5", "2")

    assert result.exit_code == 0
    assert "Created 5 slots" in result.output
    data = json.loads(state.read_text())
    assert data["structure"]["size"] == 5
    assert data["structure"]["collisionStrategy"] == "linear"

  def test_refuses_second_create(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "create", "3", "1")

    assert result.exit_code == 1
    assert "already exists" in result.output

  def test_force_replaces(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "create", "3", "1", "--force")

    assert result.exit_code == 0
    assert json.loads(state.read_text())["structure"]["size"] == 3

  def test_invalid_parameters(self, state: Path) -> None:
    result = invoke(state, "create", "0", "2")

    assert result.exit_code == 1
    assert "Invalid store parameters" in result.output
    assert not state.exists()

  def test_unknown_hash_method(self, state: Path) -> None:
    result = invoke(state, "create", "5", "2", "--hash", "md5")

    assert result.exit_code == 2
    assert "Unknown HashMethod" in result.output

  def test_requires_dimensions(self, state: Path) -> None:
    result = invoke(state, "create")
    assert result.exit_code != 0

  def test_profile(self, tmp_path: Path, state: Path) -> None:
    profile = tmp_path / "store.yaml"
    profile.write_text(
      "capacity: 7\nkey_length: 3\ndata_type: text\ncollision_strategy: quadratic\n"
    )
    result = invoke(state, "create", "--profile", str(profile))

    assert result.exit_code == 0
    structure = json.loads(state.read_text())["structure"]
    assert structure["dataType"] == "text"
    assert structure["collisionStrategy"] == "quadratic"

  def test_profile_schema_error(self, tmp_path: Path, state: Path) -> None:
    profile = tmp_path / "store.yaml"
    profile.write_text("capacity: 7\n")
    result = invoke(state, "create", "--profile", str(profile))

    assert result.exit_code == 1
    assert "Invalid store parameters" in result.output


class TestOperations:
  """Test key operations against a saved structure."""

  def test_insert_and_show(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "insert", "7")

    assert result.exit_code == 0
    assert "Inserted 7 at position 1" in result.output

    shown = invoke(state, "show", "--json")
    assert json.loads(shown.stdout)["keys"][0] == "07"

  def test_insert_invalid_key(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "insert", "x1")

    assert result.exit_code == 1
    assert "numeric" in result.output

  def test_operation_without_structure(self, state: Path) -> None:
    result = invoke(state, "insert", "7")

    assert result.exit_code == 1
    assert "created first" in result.output

  def test_hash_insert_json(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    invoke(state, "hash-insert", "07")
    result = invoke(state, "hash-insert", "12", "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["position"] == 3
    assert data["collisions"] == 1
    assert data["steps"][0]["action"] == "collision"

  def test_search_miss_exits_zero(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "search", "9")

    assert result.exit_code == 0
    assert "not found" in result.output

  def test_search_unknown_method(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "search", "9", "--method", "ternary")
    assert result.exit_code != 0

  def test_hash_search_non_digit_key(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "search", "ab", "--method", "hash")

    assert result.exit_code == 0
    assert "not found" in result.output

  def test_hash_delete_non_digit_key(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    result = invoke(state, "hash-delete", "1x")

    assert result.exit_code == 1
    assert "not found" in result.output

  def test_binary_search_needs_sorted_keys(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    invoke(state, "insert", "9")
    invoke(state, "insert", "2")
    result = invoke(state, "search", "2", "--method", "binary")

    assert result.exit_code == 1
    assert "ascending order" in result.output

  def test_show_flags_unsorted_array(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    invoke(state, "insert", "9")
    invoke(state, "insert", "2")

    assert "unsorted" in invoke(state, "show").output
    invoke(state, "sort")
    assert "unsorted" not in invoke(state, "show").output

  def test_sort_then_binary(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    for key in ["9", "2", "5"]:
      invoke(state, "insert", key)

    assert invoke(state, "sort").exit_code == 0
    result = invoke(state, "search", "5", "--method", "binary", "--json")

    data = json.loads(result.stdout)
    assert data["found"] is True
    assert data["position"] == 1

  def test_delete(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    invoke(state, "insert", "1")
    invoke(state, "insert", "2")
    result = invoke(state, "delete", "1")

    assert result.exit_code == 0
    keys = json.loads(state.read_text())["structure"]["keys"]
    assert keys[:2] == ["02", None]

  def test_clear_and_reset(self, state: Path) -> None:
    invoke(state, "create", "5", "2")
    invoke(state, "insert", "1")

    assert invoke(state, "clear").exit_code == 0
    assert json.loads(state.read_text())["structure"]["count"] == 0

    assert invoke(state, "reset").exit_code == 0
    assert not state.exists()

  def test_show_without_structure(self, state: Path) -> None:
    result = invoke(state, "show")
    assert result.exit_code == 1

  def test_corrupt_state_file(self, state: Path) -> None:
    state.write_text("{broken")
    result = invoke(state, "show")

    assert result.exit_code == 1
    assert "Cannot read structure" in result.output
