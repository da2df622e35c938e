"""Tests for column width clamping."""

import pytest

from tailgrid.engine.models import ColumnDef
from tailgrid.engine.sizing import clamp_size, get_size, initial_sizing, reset_size, set_size

BOUNDED = ColumnDef(id="rev", header="Revenue", width=120, min_width=80, max_width=300)
DEFAULTS = ColumnDef(id="name", header="Name")


class TestClampSize:

    @pytest.mark.parametrize("size,expected", [(10, 80), (1000, 300), (200, 200)])
    def test_declared_bounds(self, size, expected):
        assert clamp_size(BOUNDED, size) == expected

    @pytest.mark.parametrize("size,expected", [(0, 50), (-5, 50), (900, 500)])
    def test_default_bounds(self, size, expected):
        assert clamp_size(DEFAULTS, size) == expected


class TestSizingState:

    def test_initial_sizing_only_declared_widths(self):
        assert initial_sizing([BOUNDED, DEFAULTS]) == {"rev": 120}

    def test_set_size_stores_clamped(self):
        assert set_size({}, BOUNDED, 5000) == {"rev": 300}

    def test_reset_restores_declared_or_default(self):
        assert reset_size({"rev": 250}, BOUNDED) == {"rev": 120}
        assert reset_size({"name": 300}, DEFAULTS) == {"name": 150}

    def test_get_size_fallbacks(self):
        assert get_size({"rev": 99}, BOUNDED) == 99
        assert get_size({}, BOUNDED) == 120
        assert get_size({}, DEFAULTS) == 150
