"""Core CLI app setup."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import pydantic
import structlog
import typer
from rich.console import Console

if TYPE_CHECKING:
  from collections.abc import Callable

  from structlog.typing import FilteringBoundLogger

  from keysearch.core.trace import OperationResult, SearchResult

from keysearch.cli.render import describe, slots_table, steps_table
from keysearch.core.config import StoreConfig, format_validation_errors
from keysearch.core.errors import ConfigurationError, KeyStoreError
from keysearch.core.snapshot import load_structure, save_structure
from keysearch.core.store import KeyStore
from keysearch.core.types import SearchMethod
from keysearch.logging_config import configure_logging
from keysearch.settings import settings

# stderr console for status lines, stdout console for tables and data
err_console = Console(stderr=True)
out_console = Console()

StateOption = Annotated[
  Path | None,
  typer.Option("--state", "-f", help="State file holding the current structure."),
]
JsonOption = Annotated[
  bool, typer.Option("--json", help="Print the result object as JSON.")
]
StrategyOption = Annotated[
  str | None,
  typer.Option("--strategy", "-s", help="Collision strategy (default: the store's)."),
]


def get_logger() -> FilteringBoundLogger:
  """Configure logging and return a logger instance."""
  configure_logging()
  return structlog.get_logger()


app = typer.Typer(
  help="Keysearch: traced internal-search algorithms over fixed-size key arrays.",
  no_args_is_help=True,
)


@app.callback()
def main(
  log_level: Annotated[
    str | None, typer.Option("--log-level", help="Override the configured log level.")
  ] = None,
):
  """
  Drive the key-storage engine over a saved structure.
  """
  configure_logging(log_level)


def state_path(state: Path | None) -> Path:
  return state if state is not None else settings.state_file


def load_store(path: Path) -> tuple[KeyStore, str]:
  """Load the structure saved at ``path``.

  A missing file yields an uncreated store, so engine operations report
  NotCreated themselves.

  Returns:
      The store and the algorithm label it was saved with

  Raises:
      typer.Exit: If the file exists but cannot be read as a structure
  """
  store = KeyStore()
  if not path.exists():
    return store, "structure"
  try:
    saved = load_structure(path)
    store.from_json(saved.structure)
  except ValueError as e:
    get_logger().error("state_load_failed", path=str(path), error=str(e))
    err_console.print(f"[red]Cannot read structure from {path}: {e}[/red]")
    raise typer.Exit(code=1) from e
  return store, saved.algorithm


def run_operation(
  state: Path | None,
  operation: Callable[[KeyStore], OperationResult | SearchResult],
  key: str,
  verb: str,
  as_json: bool,
  persist: bool = True,
) -> None:
  """Load the store, run one engine operation, report it and save."""
  path = state_path(state)
  store, algorithm = load_store(path)

  try:
    result = operation(store)
  except ConfigurationError as e:
    err_console.print(f"[red]Configuration error: {e}[/red]")
    raise typer.Exit(code=2) from e

  if as_json:
    typer.echo(json.dumps(result.to_dict(), ensure_ascii=False))
  else:
    if result.formula:
      err_console.print(f"[dim]{result.formula}[/dim]")
    if result.steps:
      out_console.print(steps_table(result.steps))
    err_console.print(describe(result, key, verb))

  if result.error:
    raise typer.Exit(code=1)
  if persist:
    save_structure(path, store, algorithm)


@app.command()
def create(
  capacity: Annotated[
    int | None, typer.Argument(help="Number of slots (fixed).")
  ] = None,
  key_length: Annotated[
    int | None, typer.Argument(help="Exact width of every key.")
  ] = None,
  data_type: Annotated[
    str, typer.Option("--type", "-t", help="numeric, text or alphanumeric.")
  ] = "numeric",
  duplicates: Annotated[
    bool,
    typer.Option("--duplicates/--no-duplicates", help="Allow repeated keys."),
  ] = True,
  hash_method: Annotated[
    str,
    typer.Option("--hash", help="modulo, mid-square, folding or truncation."),
  ] = settings.default_hash_method,
  strategy: Annotated[
    str,
    typer.Option("--strategy", "-s", help="linear, quadratic or double-hash."),
  ] = settings.default_collision_strategy,
  profile: Annotated[
    Path | None,
    typer.Option(
      "--profile", "-p", exists=True, dir_okay=False, help="YAML store profile."
    ),
  ] = None,
  algorithm: Annotated[
    str, typer.Option("--algorithm", "-a", help="Label saved with the structure.")
  ] = "structure",
  force: Annotated[
    bool, typer.Option("--force", help="Replace an existing structure.")
  ] = False,
  state: StateOption = None,
):
  """
  Create an empty structure and save it to the state file.
  """
  log = get_logger()
  path = state_path(state)

  if profile is not None:
    try:
      config = StoreConfig.from_yaml_file(profile)
    except pydantic.ValidationError as e:
      err_console.print(f"[red]{format_validation_errors(e.errors())}[/red]")
      raise typer.Exit(code=1) from e
    except ValueError as e:
      err_console.print(f"[red]{e}[/red]")
      raise typer.Exit(code=1) from e
    params = config.model_dump()
  elif capacity is None or key_length is None:
    raise typer.BadParameter("CAPACITY and KEY_LENGTH are required without --profile")
  else:
    params = {
      "capacity": capacity,
      "key_length": key_length,
      "data_type": data_type,
      "allow_duplicates": duplicates,
      "hash_method": hash_method,
      "collision_strategy": strategy,
    }

  store = KeyStore() if force else load_store(path)[0]
  try:
    result = store.create(**params)
  except ConfigurationError as e:
    err_console.print(f"[red]Configuration error: {e}[/red]")
    raise typer.Exit(code=2) from e

  if not result.success:
    err_console.print(f"[red]✗ {result.error}[/red]")
    raise typer.Exit(code=1)

  save_structure(path, store, algorithm)
  log.info("structure_created", path=str(path), capacity=store.capacity)
  err_console.print(
    f"[bold green]✓ Created {store.capacity:,} slots of "
    f"{store.key_length}-character {store.config.data_type.value} keys[/bold green]"
  )


@app.command()
def insert(
  key: Annotated[str, typer.Argument(help="Key to insert.")],
  ordered: Annotated[
    bool,
    typer.Option("--sorted", help="Keep keys ascending (for binary search)."),
  ] = False,
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Insert a key into the next free slot, or in order with --sorted.
  """
  if ordered:
    run_operation(state, lambda store: store.sorted_insert(key), key, "Inserted", as_json)
  else:
    run_operation(state, lambda store: store.insert(key), key, "Inserted", as_json)


@app.command()
def delete(
  key: Annotated[str, typer.Argument(help="Key to delete.")],
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Delete a key from the array and shift the following keys left.
  """
  run_operation(state, lambda store: store.delete(key), key, "Deleted", as_json)


@app.command("hash-insert")
def hash_insert(
  key: Annotated[str, typer.Argument(help="Key to insert.")],
  strategy: StrategyOption = None,
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Insert a key at its hash position, resolving collisions.
  """
  run_operation(
    state, lambda store: store.hash_insert(key, strategy), key, "Inserted", as_json
  )


@app.command("hash-delete")
def hash_delete(
  key: Annotated[str, typer.Argument(help="Key to delete.")],
  strategy: StrategyOption = None,
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Delete a key found through its hash position.
  """
  run_operation(
    state, lambda store: store.hash_delete(key, strategy), key, "Deleted", as_json
  )


@app.command()
def search(
  key: Annotated[str, typer.Argument(help="Key to search for.")],
  method: Annotated[
    str,
    typer.Option("--method", "-m", help="sequential, binary or hash."),
  ] = SearchMethod.SEQUENTIAL.value,
  strategy: StrategyOption = None,
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Search for a key and print every probe or comparison made.
  """
  try:
    chosen = SearchMethod.from_name(method)
  except ConfigurationError as e:
    raise typer.BadParameter(str(e)) from e

  operations = {
    SearchMethod.SEQUENTIAL: lambda store: store.sequential_search(key),
    SearchMethod.BINARY: lambda store: store.binary_search(key),
    SearchMethod.HASH: lambda store: store.hash_search(key, strategy),
  }
  run_operation(state, operations[chosen], key, "Found", as_json, persist=False)


@app.command("sort")
def sort_keys(state: StateOption = None):
  """
  Sort the stored keys ascending, as binary search requires.
  """
  path = state_path(state)
  store, algorithm = load_store(path)
  try:
    store.sort_keys()
  except KeyStoreError as e:
    err_console.print(f"[red]✗ {e.message}[/red]")
    raise typer.Exit(code=1) from e
  save_structure(path, store, algorithm)
  err_console.print(f"[bold green]✓ Sorted {store.count} keys[/bold green]")


@app.command()
def clear(state: StateOption = None):
  """
  Remove every key but keep the structure's configuration.
  """
  path = state_path(state)
  store, algorithm = load_store(path)
  try:
    store.clear_keys()
  except KeyStoreError as e:
    err_console.print(f"[red]✗ {e.message}[/red]")
    raise typer.Exit(code=1) from e
  save_structure(path, store, algorithm)
  err_console.print("[bold green]✓ Cleared all keys[/bold green]")


@app.command()
def reset(state: StateOption = None):
  """
  Discard the structure entirely.
  """
  path = state_path(state)
  path.unlink(missing_ok=True)
  get_logger().info("structure_reset", path=str(path))
  err_console.print("[bold green]✓ Structure discarded[/bold green]")


@app.command()
def show(
  limit: Annotated[
    int, typer.Option("--limit", "-n", help="Maximum slots to display.")
  ] = settings.max_rendered_slots,
  as_json: JsonOption = False,
  state: StateOption = None,
):
  """
  Print the slot array.
  """
  store, _ = load_store(state_path(state))
  if not store.created:
    err_console.print("[yellow]No structure has been created.[/yellow]")
    raise typer.Exit(code=1)

  if as_json:
    typer.echo(json.dumps(store.to_json(), ensure_ascii=False))
    return

  out_console.print(slots_table(store, limit))
  details = [f"hash: {store.config.hash_method.value}"]
  if store.collision_strategy is not None:
    details.append(f"collisions: {store.collision_strategy.label}")
  if not store.is_sorted():
    details.append("unsorted")
  err_console.print(f"[dim]{' | '.join(details)}[/dim]")


if __name__ == "__main__":
  app()
