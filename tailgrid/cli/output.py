"""CLI output formatters for Rich tables and JSON.

Provides human-readable Rich output (default) and machine-parseable JSON
output (--json flag). All formatting goes through these functions so the
CLI commands stay clean.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tailgrid.ai.models import AIQueryResult
from tailgrid.cli.config import TailGridConfig
from tailgrid.engine import GridEngine
from tailgrid.engine.accessor import stringify
from tailgrid.engine.models import DataType

console = Console()

_SORT_MARKERS = {"asc": " ▲", "desc": " ▼"}

_RIGHT_ALIGNED = {DataType.NUMBER, DataType.CURRENCY}


def format_cell(value: Any) -> str:
    """Display form of a cell value; "—" for missing values."""
    if value is None:
        return "—"
    return stringify(value)


def _confidence_color(confidence: float, threshold: float) -> str:
    if confidence >= threshold:
        return "green"
    if confidence > 0:
        return "yellow"
    return "red"


def format_grid(engine: GridEngine, as_json: bool = False) -> str:
    """Format the engine's current page as a Rich table or JSON.

    Args:
        engine: Grid to render.
        as_json: If True, return JSON string instead of Rich table.

    Returns:
        Formatted string output.
    """
    info = engine.get_pagination_info()
    rows = engine.get_row_model()

    if as_json:
        return json.dumps(
            {
                "rows": [row.original for row in rows],
                "pagination": info.model_dump(),
                "sorting": [s.model_dump() for s in engine.get_sorting()],
                "filters": [f.model_dump(mode="json") for f in engine.get_column_filters()],
                "global_filter": engine.get_global_filter(),
            },
            indent=2,
            default=str,
        )

    if not rows:
        return "No rows match."

    title = f"Page {info.page_index + 1}/{max(info.page_count, 1)} ({info.total_rows} rows)"
    table = Table(title=title, show_lines=False)
    for col in engine.get_columns():
        marker = _SORT_MARKERS.get(col.is_sorted or "", "")
        justify = "right" if col.column_def.data_type in _RIGHT_ALIGNED else "left"
        table.add_column(f"{col.column_def.header}{marker}", justify=justify)

    for row in rows:
        table.add_row(*(escape(format_cell(cell.value)) for cell in row.get_visible_cells()))

    with console.capture() as capture:
        console.print(table)
    return capture.get()


def format_query_result(
    result: AIQueryResult,
    threshold: float,
    as_json: bool = False,
) -> str:
    """Format an AI query result as a Rich panel or JSON.

    Args:
        result: Result to display.
        threshold: Confidence needed to apply the result, for coloring.
        as_json: If True, return JSON string instead of Rich panel.

    Returns:
        Formatted string output.
    """
    if as_json:
        return json.dumps(result.model_dump(mode="json"), indent=2, default=str)

    color = _confidence_color(result.confidence, threshold)
    lines = [
        f"[bold]Query:[/bold]      {escape(result.query)}",
        f"[bold]Confidence:[/bold] [{color}]{result.confidence:.2f}[/{color}]",
    ]

    if result.filters:
        lines.append("[bold]Filters:[/bold]")
        for f in result.filters:
            lines.append(f"  - {escape(f.id)} {f.operator.value} {escape(json.dumps(f.value, default=str))}")
    if result.sorting:
        sort_text = ", ".join(f"{s.id} {'desc' if s.desc else 'asc'}" for s in result.sorting)
        lines.append(f"[bold]Sorting:[/bold]    {escape(sort_text)}")

    if result.error:
        lines.append("")
        lines.append(f"[bold red]Error:[/bold red] {result.error_code}: {escape(result.error)}")

    with console.capture() as capture:
        console.print(Panel("\n".join(lines), title="AI Query", border_style="cyan"))
    return capture.get()


def mask_secret(value: str | None) -> str:
    """Show only the last four characters of a secret."""
    if not value:
        return "—"
    return "***" + value[-4:] if len(value) > 8 else "***"


def format_config(cfg: TailGridConfig) -> str:
    """Format resolved configuration with secrets masked."""
    lines = [
        "[bold]AI:[/bold]",
        f"  provider: {cfg.ai.provider or '(env default)'}",
        f"  model: {cfg.ai.model or '(provider default)'}",
        f"  endpoint: {cfg.ai.endpoint or '(provider default)'}",
        f"  api_key: {mask_secret(cfg.ai.api_key)}",
        f"  timeout: {cfg.ai.timeout if cfg.ai.timeout is not None else '(provider default)'}",
        f"  structured: {cfg.ai.structured}",
        f"  confidence_threshold: {cfg.ai.confidence_threshold}",
        "",
        "[bold]Grid:[/bold]",
        f"  page_size: {cfg.grid.page_size}",
        f"  log_level: {cfg.grid.log_level}",
    ]
    with console.capture() as capture:
        console.print("\n".join(lines))
    return capture.get()
