"""Root-level pytest fixtures for all tests.

Provides shared fixtures:
- Sample people rows and matching column definitions
- A GridEngine preloaded with the sample data
- A scripted provider for AI pipeline tests
- Environment isolation for TAILGRID_* / provider variables
"""

import os

import pytest

from tailgrid.engine import ColumnDef, DataType, GridEngine, GridOptions

# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


# ============================================================================
# Skip Conditions
# ============================================================================

requires_openai_key = pytest.mark.skipif(
    not os.environ.get("OPENAI_API_KEY"),
    reason="OPENAI_API_KEY not set"
)


# ============================================================================
# Environment
# ============================================================================

_ENV_VARS = (
    "TAILGRID_AI_PROVIDER",
    "TAILGRID_AI_MODEL",
    "TAILGRID_AI_ENDPOINT",
    "TAILGRID_AI_TIMEOUT",
    "TAILGRID_AI_API_KEY",
    "TAILGRID_AI_CONFIDENCE_THRESHOLD",
    "TAILGRID_GRID_PAGE_SIZE",
    "TAILGRID_GRID_LOG_LEVEL",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "OLLAMA_HOST",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove provider and TAILGRID_* variables so tests see defaults."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Grid Fixtures
# ============================================================================


@pytest.fixture
def people_rows() -> list[dict]:
    """Seven people with mixed types and one missing age."""
    return [
        {"name": "Alice", "age": 30, "state": "CA", "revenue": 12000.0, "joined": "2023-01-15", "active": True},
        {"name": "bob", "age": 25, "state": "NY", "revenue": 8000.0, "joined": "2022-06-01", "active": False},
        {"name": "Carol", "age": None, "state": "CA", "revenue": 15000.0, "joined": "2024-03-10", "active": True},
        {"name": "Dave", "age": 41, "state": "TX", "revenue": 3000.0, "joined": "2021-11-20", "active": True},
        {"name": "Eve", "age": 35, "state": "WA", "revenue": None, "joined": "2023-08-05", "active": False},
        {"name": "Frank", "age": 25, "state": "CA", "revenue": 9500.0, "joined": "2020-02-29", "active": True},
        {"name": "Grace", "age": 52, "state": "OR", "revenue": 21000.0, "joined": "2019-07-04", "active": False},
    ]


@pytest.fixture
def people_columns() -> list[ColumnDef]:
    """Column definitions for people_rows."""
    return [
        ColumnDef(id="name", header="Name", accessor_key="name"),
        ColumnDef(id="age", header="Age", accessor_key="age", data_type=DataType.NUMBER),
        ColumnDef(id="state", header="State", accessor_key="state"),
        ColumnDef(
            id="revenue",
            header="Revenue",
            accessor_key="revenue",
            data_type=DataType.CURRENCY,
            width=120,
            min_width=80,
            max_width=300,
        ),
        ColumnDef(id="joined", header="Joined", accessor_key="joined", data_type=DataType.DATE),
        ColumnDef(id="active", header="Active", accessor_key="active", data_type=DataType.BOOLEAN),
    ]


@pytest.fixture
def engine(people_rows, people_columns) -> GridEngine:
    """Engine over the people data with selection enabled."""
    return GridEngine(
        GridOptions(
            data=people_rows,
            columns=people_columns,
            enable_row_selection=True,
        )
    )


# ============================================================================
# AI Fixtures
# ============================================================================


class ScriptedProvider:
    """Provider returning canned replies (or raising) in call order."""

    kind = "scripted"

    def __init__(self, *replies):
        self._replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    async def invoke(self, system: str, user: str) -> str:
        self.calls.append((system, user))
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def scripted_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider
