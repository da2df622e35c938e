"""Tests for CLI output formatters (Rich tables and JSON)."""

import json

from tailgrid.ai.models import AIQueryResult
from tailgrid.cli.config import AIConfig, TailGridConfig
from tailgrid.cli.output import (
    format_cell,
    format_config,
    format_grid,
    format_query_result,
    mask_secret,
)
from tailgrid.engine import ColumnFilter, GridEngine, GridOptions, PaginationState, SortSpec


def _paged_engine(rows, columns) -> GridEngine:
    return GridEngine(
        GridOptions(
            data=rows,
            columns=columns,
            enable_pagination=True,
            initial_pagination=PaginationState(page_size=3),
        )
    )


class TestFormatGrid:

    def test_json_shape(self, people_rows, people_columns):
        engine = _paged_engine(people_rows, people_columns)
        engine.set_column_filter_with_operator(ColumnFilter(id="state", operator="equals", value="CA"))
        engine.toggle_sort("age")

        data = json.loads(format_grid(engine, as_json=True))

        assert [r["name"] for r in data["rows"]] == ["Frank", "Alice", "Carol"]
        assert data["pagination"]["total_rows"] == 3
        assert data["pagination"]["page_count"] == 1
        assert data["sorting"] == [{"id": "age", "desc": False}]
        assert data["filters"] == [{"id": "state", "operator": "equals", "value": "CA"}]
        assert data["global_filter"] == ""

    def test_table(self, people_rows, people_columns):
        engine = _paged_engine(people_rows, people_columns)
        engine.toggle_sort("name")
        output = format_grid(engine)
        assert "Page 1/3 (7 rows)" in output
        assert "Name ▲" in output
        assert "Alice" in output
        assert "Dave" not in output

    def test_empty_view(self, people_rows, people_columns):
        engine = _paged_engine(people_rows, people_columns)
        engine.set_global_filter("zzz")
        assert format_grid(engine) == "No rows match."


class TestFormatQueryResult:

    def test_json(self):
        result = AIQueryResult(
            query="q",
            filters=[ColumnFilter(id="age", operator="gt", value=30)],
            sorting=[SortSpec(id="age", desc=True)],
            confidence=0.9,
        )
        data = json.loads(format_query_result(result, 0.7, as_json=True))
        assert data["filters"] == [{"id": "age", "operator": "gt", "value": 30}]
        assert data["confidence"] == 0.9
        assert data["error"] is None

    def test_panel(self):
        result = AIQueryResult(
            query="older than 30",
            filters=[ColumnFilter(id="age", operator="gt", value=30)],
            sorting=[SortSpec(id="age", desc=True)],
            confidence=0.9,
        )
        output = format_query_result(result, 0.7)
        assert "AI Query" in output
        assert "older than 30" in output
        assert "age gt 30" in output
        assert "age desc" in output

    def test_panel_with_error(self):
        result = AIQueryResult.failed("q", "No JSON found in response", "E-2001")
        output = format_query_result(result, 0.7)
        assert "E-2001" in output
        assert "0.00" in output


class TestConfigOutput:

    def test_mask_secret(self):
        assert mask_secret(None) == "—"
        assert mask_secret("short") == "***"
        assert mask_secret("sk-1234567890abcd") == "***abcd"

    def test_format_config_masks_key(self):
        cfg = TailGridConfig(ai=AIConfig(provider="openai", api_key="sk-1234567890abcd"))
        output = format_config(cfg)
        assert "provider: openai" in output
        assert "***abcd" in output
        assert "sk-1234567890abcd" not in output

    def test_format_cell(self):
        assert format_cell(None) == "—"
        assert format_cell(True) == "true"
        assert format_cell(3.0) == "3"
