"""TailGrid CLI — browse tabular files and query them in plain English.

Usage:
    tailgrid view data.csv --sort revenue:desc --filter state:equals:CA
    tailgrid ask data.json "customers in California with revenue over 10k"
    tailgrid config show
"""

import asyncio
import json
import logging
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tailgrid.ai import AIQueryPipeline, ProviderKind, provider_from_env
from tailgrid.ai import config as ai_config
from tailgrid.cli.config import TailGridConfig, find_config_path, load_config
from tailgrid.cli.data import DataLoadError, infer_columns, load_rows
from tailgrid.cli.output import format_config, format_grid, format_query_result
from tailgrid.engine import ColumnFilter, GridEngine, GridOptions, PaginationState, SortSpec
from tailgrid.errors import (
    GridReferenceError,
    ProviderConfigError,
    TailGridError,
    format_error,
)

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="tailgrid",
    help="In-memory data grid with natural-language queries",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
app.add_typer(config_app, name="config")

console = Console()

# --- Global state ---
_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to tailgrid.yaml config file"
    ),
):
    """TailGrid CLI — filter, sort and page through tabular data."""
    global _config_path
    _config_path = config


def _load_config_or_exit() -> TailGridConfig:
    try:
        cfg = load_config(config_path=_config_path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid config:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=cfg.grid.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return cfg


def _print_error(error: TailGridError) -> None:
    console.print(f"[red]{escape(format_error(error))}[/red]")


def _parse_sort(spec: str) -> SortSpec:
    """Parse "col" or "col:asc" / "col:desc"."""
    column_id, _, direction = spec.partition(":")
    direction = direction.lower() or "asc"
    if not column_id or direction not in ("asc", "desc"):
        raise typer.BadParameter(f"Expected column[:asc|desc], got '{spec}'")
    return SortSpec(id=column_id, desc=direction == "desc")


def _parse_filter_value(text: str) -> Any:
    """JSON-decode the value where possible (numbers, lists); else keep text."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _parse_filter(spec: str) -> ColumnFilter:
    """Parse "col:operator[:value]"; the value may contain further colons."""
    parts = spec.split(":", 2)
    if len(parts) < 2 or not parts[0]:
        raise typer.BadParameter(f"Expected column:operator[:value], got '{spec}'")
    value = _parse_filter_value(parts[2]) if len(parts) == 3 else None
    try:
        return ColumnFilter(id=parts[0], operator=parts[1], value=value)
    except ValidationError:
        raise typer.BadParameter(f"Unknown filter operator '{parts[1]}' in '{spec}'") from None


def _build_engine(file: str, page_size: int) -> GridEngine:
    """Load rows from `file` into a strict, paginated engine."""
    try:
        rows = load_rows(file)
    except DataLoadError as e:
        _print_error(TailGridError.from_code("E-4004", path=e.path, detail=e.detail))
        raise typer.Exit(1)

    engine = GridEngine(
        GridOptions(
            data=rows,
            columns=infer_columns(rows),
            enable_pagination=True,
            initial_pagination=PaginationState(page_index=0, page_size=page_size),
        ),
        strict=True,
    )
    _log.info("Loaded %d rows with %d columns from %s", len(rows), len(engine.get_column_ids()), file)
    return engine


def _emit(text: str, json_output: bool) -> None:
    """Print Rich output, or raw JSON without markup or wrapping."""
    if json_output:
        typer.echo(text)
    else:
        console.print(text)


def _show_page(engine: GridEngine, page: int, json_output: bool) -> None:
    engine.set_page_index(page - 1)
    _emit(format_grid(engine, as_json=json_output), json_output)


# --- View ---


@app.command()
def view(
    file: str = typer.Argument(help="CSV file or JSON array of objects"),
    sort: Optional[list[str]] = typer.Option(None, "--sort", help="Sort key column[:desc]; repeatable"),
    filters: Optional[list[str]] = typer.Option(
        None, "--filter", help="Column filter column:operator[:value]; repeatable"
    ),
    search: Optional[str] = typer.Option(None, "--search", help="Global search term"),
    page: int = typer.Option(1, "--page", min=1, help="Page number (1-based)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Rows per page"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Filter, sort and page through a data file."""
    cfg = _load_config_or_exit()
    sort_specs = [_parse_sort(s) for s in sort or []]
    column_filters = [_parse_filter(f) for f in filters or []]
    engine = _build_engine(file, page_size or cfg.grid.page_size)

    try:
        for column_filter in column_filters:
            engine.set_column_filter_with_operator(column_filter)
        if search:
            engine.set_global_filter(search)
        if sort_specs:
            for spec in sort_specs:
                if engine.get_column_by_id(spec.id) is None:
                    raise GridReferenceError.unknown_column(spec.id)
            engine.set_sorting(sort_specs)
    except GridReferenceError as e:
        _print_error(TailGridError.from_code(e.code, column=e.identifier))
        raise typer.Exit(1)

    _show_page(engine, page, json_output)


# --- Ask ---


def _provider_overrides(cfg: TailGridConfig, kind: str) -> dict[str, Any]:
    """Config-file values for the provider's constructor, by kind."""
    overrides: dict[str, Any] = {"endpoint": cfg.ai.endpoint, "timeout": cfg.ai.timeout}
    if kind in (ProviderKind.OPENAI.value, ProviderKind.ANTHROPIC.value):
        overrides["api_key"] = cfg.ai.api_key
    if kind != ProviderKind.CUSTOM.value:
        overrides["model"] = cfg.ai.model
        overrides["structured"] = cfg.ai.structured
    return overrides


@app.command()
def ask(
    file: str = typer.Argument(help="CSV file or JSON array of objects"),
    query: str = typer.Argument(help="Question about the data, in plain English"),
    provider: Optional[str] = typer.Option(
        None, "--provider", help="openai, anthropic, ollama or custom"
    ),
    model: Optional[str] = typer.Option(None, "--model", help="Model override"),
    min_confidence: Optional[float] = typer.Option(
        None, "--min-confidence", min=0.0, max=1.0, help="Apply results at or above this confidence"
    ),
    page: int = typer.Option(1, "--page", min=1, help="Page number (1-based)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Rows per page"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Translate a natural-language query into filters and sorting, then show the result."""
    cfg = _load_config_or_exit()
    engine = _build_engine(file, page_size or cfg.grid.page_size)

    kind = (provider or cfg.ai.provider or ai_config.get_provider_kind()).lower()
    overrides = _provider_overrides(cfg, kind)
    if model:
        overrides["model"] = model
    try:
        backend = provider_from_env(kind, **overrides)
    except ProviderConfigError as e:
        error = TailGridError.from_code(e.code)
        error.message = str(e)
        _print_error(error)
        raise typer.Exit(1)

    pipeline = AIQueryPipeline(
        backend,
        engine.get_state().columns,
        rows=engine.get_all_rows(),
        context=cfg.ai.context,
    )
    result = asyncio.run(pipeline.run(query))

    threshold = min_confidence if min_confidence is not None else cfg.ai.confidence_threshold
    applied = result.succeeded and pipeline.apply(engine, result, min_confidence=threshold)

    if json_output:
        engine.set_page_index(page - 1)
        payload = {
            "result": json.loads(format_query_result(result, threshold, as_json=True)),
            "applied": applied,
            "grid": json.loads(format_grid(engine, as_json=True)),
        }
        typer.echo(json.dumps(payload, indent=2))
        if not result.succeeded:
            raise typer.Exit(1)
        return

    console.print(format_query_result(result, threshold))
    if not result.succeeded:
        raise typer.Exit(1)
    if not applied:
        console.print(
            f"[yellow]Confidence {result.confidence:.2f} is below {threshold:.2f}; "
            "grid left unfiltered.[/yellow]"
        )
    _show_page(engine, page, json_output)


# --- Config commands ---


@config_app.command("show")
def config_show():
    """Display resolved configuration (secrets masked)."""
    cfg = _load_config_or_exit()
    path = find_config_path(_config_path)
    if path is None:
        console.print("[yellow]No config file found; showing defaults.[/yellow]")
        console.print("Searched: ./tailgrid.yaml, ~/.tailgrid/config.yaml")
    else:
        console.print(f"[dim]Config file: {path}[/dim]")
    console.print(format_config(cfg))


@config_app.command("validate")
def config_validate(
    config: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Validate a config file."""
    path = config or _config_path
    try:
        load_config(config_path=path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Config validation failed:[/red]\n{escape(str(e))}")
        raise typer.Exit(1)
    console.print("[green]Config is valid.[/green]")


if __name__ == "__main__":
    app()
