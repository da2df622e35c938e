"""Tests for the grid reducer.

The reducer is pure: every test checks the returned state and, where it
matters, that the input state is left untouched.
"""

import pytest

from tailgrid.engine import GridAction, GridOptions, initial_state, reduce, replay
from tailgrid.engine.models import ColumnDef, ColumnFilter, DataType, PaginationState, SortSpec


def act(action_type: str, **payload) -> GridAction:
    return GridAction(type=action_type, payload=payload)


@pytest.fixture
def options(people_rows, people_columns) -> GridOptions:
    return GridOptions(
        data=people_rows,
        columns=people_columns,
        enable_pagination=True,
        enable_row_selection=True,
        initial_pagination=PaginationState(page_index=0, page_size=3),
    )


@pytest.fixture
def state(options):
    return initial_state(options)


class TestInitialState:

    def test_defaults_without_options(self):
        s = initial_state()
        assert s.data == []
        assert s.enable_sorting is True
        assert s.enable_pagination is False
        assert s.pagination.page_size == 10

    def test_seeds_declared_widths(self, state):
        assert state.column_sizing == {"revenue": 120}

    def test_single_mode_normalizes_initial_selection(self, people_rows, people_columns):
        s = initial_state(
            GridOptions(
                data=people_rows,
                columns=people_columns,
                enable_row_selection=True,
                enable_multi_row_selection=False,
                initial_row_selection={"0": True, "3": True},
            )
        )
        assert s.row_selection == {"3": True}

    def test_repeated_initial_sort_column_collapsed(self, people_rows, people_columns):
        s = initial_state(
            GridOptions(
                data=people_rows,
                columns=people_columns,
                initial_sorting=[SortSpec(id="age", desc=True), SortSpec(id="age")],
            )
        )
        assert s.sorting == [SortSpec(id="age", desc=True)]


class TestDispatchContract:

    def test_unknown_action_rejected(self, state):
        result = reduce(state, act("grid.explode"))
        assert result.applied is False
        assert result.error == "UNKNOWN_ACTION: grid.explode"
        assert result.state is state

    def test_missing_payload_key_rejected(self, state):
        result = reduce(state, act("sorting.toggle"))
        assert result.applied is False
        assert result.error.startswith("INVALID_PAYLOAD")

    def test_invalid_model_payload_rejected(self, state):
        result = reduce(state, act("filter.set_with_operator", filter={"id": "age", "operator": "near"}))
        assert result.applied is False
        assert result.error.startswith("INVALID_PAYLOAD")

    def test_input_state_unchanged(self, state):
        reduce(state, act("sorting.toggle", column_id="age"))
        assert state.sorting == []

    def test_replay_matches_sequential_reduce(self, options):
        actions = [
            act("sorting.toggle", column_id="age"),
            act("filter.set", column_id="state", value="CA"),
            act("page.set_size", page_size=2),
            act("nonsense"),
        ]
        state = initial_state(options)
        for action in actions:
            result = reduce(state, action)
            if result.applied:
                state = result.state
        assert replay(options, actions) == state


class TestSortingActions:

    def test_toggle_cycles(self, state):
        s1 = reduce(state, act("sorting.toggle", column_id="age")).state
        assert s1.sorting == [SortSpec(id="age", desc=False)]
        s2 = reduce(s1, act("sorting.toggle", column_id="age")).state
        assert s2.sorting == [SortSpec(id="age", desc=True)]
        s3 = reduce(s2, act("sorting.toggle", column_id="age")).state
        assert s3.sorting == []

    def test_single_toggle_replaces_other_keys(self, state):
        s = reduce(state, act("sorting.set", sorting=[{"id": "name", "desc": False}])).state
        s = reduce(s, act("sorting.toggle", column_id="age")).state
        assert s.sorting == [SortSpec(id="age")]

    def test_multi_toggle_appends_and_updates_in_place(self, state):
        s = reduce(state, act("sorting.toggle", column_id="name")).state
        s = reduce(s, act("sorting.toggle", column_id="age", multi=True)).state
        assert [x.id for x in s.sorting] == ["name", "age"]
        s = reduce(s, act("sorting.toggle", column_id="name", multi=True)).state
        assert s.sorting == [SortSpec(id="name", desc=True), SortSpec(id="age")]
        s = reduce(s, act("sorting.toggle", column_id="name", multi=True)).state
        assert s.sorting == [SortSpec(id="age")]

    def test_toggle_unknown_column(self, state):
        result = reduce(state, act("sorting.toggle", column_id="zip"))
        assert result.applied is False
        assert result.error_code == "E-1001"
        assert result.target_id == "zip"

    def test_toggle_column_with_sorting_disabled(self, people_rows):
        cols = [ColumnDef(id="a", header="A", accessor_key="a", enable_sorting=False)]
        s = initial_state(GridOptions(data=people_rows, columns=cols))
        result = reduce(s, act("sorting.toggle", column_id="a"))
        assert result.error_code == "E-1004"

    def test_column_flag_overrides_grid_flag(self):
        cols = [ColumnDef(id="a", header="A", accessor_key="a", enable_sorting=True)]
        s = initial_state(GridOptions(columns=cols, enable_sorting=False))
        assert reduce(s, act("sorting.toggle", column_id="a")).applied is True

    def test_clear(self, state):
        s = reduce(state, act("sorting.toggle", column_id="age")).state
        assert reduce(s, act("sorting.clear")).state.sorting == []

    def test_set_keeps_first_entry_per_column(self, state):
        result = reduce(
            state,
            act(
                "sorting.set",
                sorting=[
                    {"id": "age", "desc": False},
                    {"id": "name", "desc": False},
                    {"id": "age", "desc": True},
                ],
            ),
        )
        assert result.applied
        assert result.state.sorting == [SortSpec(id="age"), SortSpec(id="name")]


class TestFilterActions:

    def test_set_adds_contains_filter(self, state):
        s = reduce(state, act("filter.set", column_id="name", value="al")).state
        assert s.column_filters == [ColumnFilter(id="name", operator="contains", value="al")]

    def test_set_keeps_existing_operator(self, state):
        f = ColumnFilter(id="age", operator="gt", value=25)
        s = reduce(state, act("filter.set_with_operator", filter=f)).state
        s = reduce(s, act("filter.set", column_id="age", value=40)).state
        assert s.column_filters == [ColumnFilter(id="age", operator="gt", value=40)]

    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_value_removes(self, state, empty):
        s = reduce(state, act("filter.set", column_id="name", value="al")).state
        s = reduce(s, act("filter.set", column_id="name", value=empty)).state
        assert s.column_filters == []

    def test_set_with_operator_replaces_in_place(self, state):
        s = reduce(state, act("filter.set", column_id="name", value="a")).state
        s = reduce(s, act("filter.set", column_id="state", value="C")).state
        s = reduce(
            s, act("filter.set_with_operator", filter={"id": "name", "operator": "startsWith", "value": "A"})
        ).state
        assert [f.id for f in s.column_filters] == ["name", "state"]
        assert s.column_filters[0].operator.value == "startsWith"

    def test_unknown_column_rejected(self, state):
        result = reduce(state, act("filter.set", column_id="zip", value="1"))
        assert result.error_code == "E-1001"
        result = reduce(state, act("filter.remove", column_id="zip"))
        assert result.error_code == "E-1001"

    def test_clear_resets_global_and_column_filters(self, state):
        s = reduce(state, act("filter.set", column_id="name", value="a")).state
        s = reduce(s, act("filter.set_global", value="ca")).state
        s = reduce(s, act("filter.clear")).state
        assert s.column_filters == []
        assert s.global_filter == ""


class TestPageActions:

    def test_index_clamped_to_last_page(self, state):
        s = reduce(state, act("page.set_index", page_index=99)).state
        assert s.pagination.page_index == 2

    def test_negative_index_clamped_to_zero(self, state):
        s = reduce(state, act("page.set_index", page_index=-4)).state
        assert s.pagination.page_index == 0

    def test_set_size_resets_index(self, state):
        s = reduce(state, act("page.set_index", page_index=2)).state
        s = reduce(s, act("page.set_size", page_size=5)).state
        assert s.pagination == PaginationState(page_index=0, page_size=5)

    @pytest.mark.parametrize("bad", [0, -1, 2.5, True, "3"])
    def test_invalid_size_rejected(self, state, bad):
        result = reduce(state, act("page.set_size", page_size=bad))
        assert result.applied is False
        assert result.error_code == "E-1003"


class TestSelectionActions:

    def test_toggle_row(self, state):
        s = reduce(state, act("selection.toggle_row", row_id="1")).state
        assert s.row_selection == {"1": True}

    def test_toggle_unknown_row(self, state):
        result = reduce(state, act("selection.toggle_row", row_id="99"))
        assert result.error_code == "E-1002"
        assert result.target_id == "99"

    def test_disabled_selection_rejected(self, people_rows, people_columns):
        s = initial_state(GridOptions(data=people_rows, columns=people_columns))
        for action in (
            act("selection.toggle_row", row_id="0"),
            act("selection.toggle_all"),
            act("selection.set", selection={"0": True}),
        ):
            assert reduce(s, action).error_code == "E-1005"

    def test_toggle_all_uses_filtered_rows(self, state):
        s = reduce(state, act("filter.set", column_id="state", value="CA")).state
        s = reduce(s, act("selection.toggle_all")).state
        assert s.row_selection == {"0": True, "2": True, "5": True}

    def test_toggle_all_needs_multi_mode(self, people_rows, people_columns):
        s = initial_state(
            GridOptions(
                data=people_rows,
                columns=people_columns,
                enable_row_selection=True,
                enable_multi_row_selection=False,
            )
        )
        assert reduce(s, act("selection.toggle_all")).applied is False


class TestSizingActions:

    def test_set_clamps(self, state):
        s = reduce(state, act("sizing.set", column_id="revenue", size=9999)).state
        assert s.column_sizing["revenue"] == 300

    def test_reset(self, state):
        s = reduce(state, act("sizing.set", column_id="name", size=222)).state
        s = reduce(s, act("sizing.reset", column_id="name")).state
        assert s.column_sizing["name"] == 150

    def test_resizing_column(self, state):
        s = reduce(state, act("sizing.set_resizing", column_id="age")).state
        assert s.resizing_column_id == "age"
        s = reduce(s, act("sizing.set_resizing", column_id=None)).state
        assert s.resizing_column_id is None


class TestDataActions:

    def test_update_row_replaces_without_mutating(self, state, people_rows):
        s = reduce(state, act("data.update_row", row_id="0", updates={"age": 31})).state
        assert s.data[0]["age"] == 31
        assert people_rows[0]["age"] == 30
        assert s.data[1] is state.data[1]

    def test_set_cell_writes_accessor_key(self, state):
        s = reduce(state, act("data.set_cell", row_id="1", column_id="state", value="NJ")).state
        assert s.data[1]["state"] == "NJ"

    def test_set_cell_on_computed_column(self):
        cols = [ColumnDef(id="calc", header="Calc", accessor_fn=lambda r: 1)]
        s = initial_state(GridOptions(data=[{"a": 1}], columns=cols))
        result = reduce(s, act("data.set_cell", row_id="0", column_id="calc", value=2))
        assert result.error_code == "E-1006"

    def test_add_and_remove_row(self, state):
        s = reduce(state, act("data.add_row", row={"name": "Zoe"})).state
        assert len(s.data) == 8
        s = reduce(s, act("selection.toggle_row", row_id="7")).state
        s = reduce(s, act("data.remove_row", row_id="7")).state
        assert len(s.data) == 7
        assert "7" not in s.row_selection

    def test_remove_unknown_row(self, state):
        assert reduce(state, act("data.remove_row", row_id="x")).error_code == "E-1002"


class TestColumnAndOptionActions:

    def test_columns_set_keeps_surviving_sizes(self, state):
        s = reduce(state, act("sizing.set", column_id="name", size=200)).state
        s = reduce(s, act("sizing.set_resizing", column_id="age")).state
        cols = [
            ColumnDef(id="name", header="Name", accessor_key="name"),
            ColumnDef(id="city", header="City", accessor_key="city", width=90),
        ]
        s = reduce(s, act("columns.set", columns=cols)).state
        assert s.column_sizing == {"name": 200, "city": 90}
        assert s.resizing_column_id is None

    def test_options_set_resets_unspecified_flags(self, state):
        s = reduce(state, act("options.set", enable_sorting=False)).state
        assert s.enable_sorting is False
        assert s.enable_pagination is False
        assert s.enable_row_selection is False

    def test_switch_to_single_mode_trims_selection(self, state):
        s = reduce(state, act("selection.set", selection={"0": True, "4": True})).state
        s = reduce(
            s,
            act("options.set", enable_row_selection=True, enable_multi_row_selection=False),
        ).state
        assert s.row_selection == {"4": True}

    def test_number_column_type_kept(self, state):
        assert state.column("age").data_type is DataType.NUMBER
