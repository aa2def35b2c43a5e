"""Rich renderables for stores, results and step traces."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from keysearch.core.trace import SearchResult, StepAction

if TYPE_CHECKING:
  from keysearch.core.store import KeyStore
  from keysearch.core.trace import OperationResult, Trace

_ACTION_STYLES = {
  StepAction.INSERTED: "green",
  StepAction.FOUND: "bold green",
  StepAction.COLLISION: "yellow",
  StepAction.EMPTY: "dim",
  StepAction.DISCARD_LEFT: "cyan",
  StepAction.DISCARD_RIGHT: "cyan",
  StepAction.NOT_FOUND: "red",
}


def slots_table(store: KeyStore, limit: int) -> Table:
  """Render the slot array, truncated after ``limit`` rows.

  Positions are shown 1-indexed, as in the hash formulas.
  """
  config = store.config
  title = (
    f"{config.data_type.value} keys, length {config.key_length}, "
    f"{store.count}/{store.capacity} used"
  )
  table = Table(title=title)
  table.add_column("Pos", justify="right")
  table.add_column("Key")

  shown = store.slots[:limit]
  for index, key in enumerate(shown):
    table.add_row(str(index + 1), key if key is not None else "")

  hidden = store.capacity - len(shown)
  if hidden > 0:
    table.add_row("...", f"{hidden:,} more positions", style="dim")
  return table


def steps_table(steps: Trace) -> Table:
  """Render a step trace in the order it was recorded."""
  table = Table(title="Trace")
  table.add_column("#", justify="right")
  table.add_column("Pos", justify="right")
  table.add_column("Key")
  table.add_column("Action")
  table.add_column("Range")
  table.add_column("Formula")

  for number, step in enumerate(steps, start=1):
    position = "" if step.position is None else str(step.position + 1)
    bounds = (
      f"[{step.low + 1}, {step.high + 1}]"
      if step.low is not None and step.high is not None
      else ""
    )
    table.add_row(
      str(number),
      position,
      step.key or "",
      step.action.value,
      bounds,
      step.formula or "",
      style=_ACTION_STYLES.get(step.action),
    )
  return table


def describe(
  result: OperationResult | SearchResult, key: str, verb: str = "Stored"
) -> str:
  """One-line rich-markup summary of an operation outcome."""
  if result.error:
    return f"[red]✗ {result.error}[/red]"

  hashed = f" (h = {result.hash_value})" if result.hash_value is not None else ""
  if isinstance(result, SearchResult):
    if result.found:
      return (
        f"[bold green]✓ Found {key} at position {result.position + 1}"
        f"{hashed}[/bold green]"
      )
    return f"[yellow]Key {key} not found{hashed}[/yellow]"
  return (
    f"[bold green]✓ {verb} {key} at position {result.position + 1}"
    f"{hashed}[/bold green]"
  )
