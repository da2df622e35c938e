"""Row selection bookkeeping.

Selection is a mapping of row id to True; absence means unselected. All
functions return new mappings. "Select all" operates on the ids visible in
the current filtered+sorted view only, so the selection state of rows hidden
by a filter is left untouched.
"""

from __future__ import annotations

from typing import Iterable, Mapping


def normalize_selection(selection: Mapping[str, bool], multi: bool = True) -> dict[str, bool]:
    """Drop False entries; in single-select mode keep only the last selected id."""
    selected = {row_id: True for row_id, flag in selection.items() if flag}
    if not multi and len(selected) > 1:
        last = list(selected)[-1]
        return {last: True}
    return selected


def toggle_row(selection: Mapping[str, bool], row_id: str, multi: bool) -> dict[str, bool]:
    """Flip one row's membership.

    Multi-select flips only `row_id`. Single-select replaces the selection
    with `{row_id: True}`, or clears it when `row_id` was the selected row.
    """
    is_selected = bool(selection.get(row_id))
    if not multi:
        return {} if is_selected else {row_id: True}

    updated = dict(selection)
    if is_selected:
        updated.pop(row_id, None)
    else:
        updated[row_id] = True
    return updated


def all_selected(selection: Mapping[str, bool], visible_ids: Iterable[str]) -> bool:
    """True when there is at least one visible row and every visible row is selected."""
    ids = list(visible_ids)
    return bool(ids) and all(selection.get(row_id) for row_id in ids)


def some_selected(selection: Mapping[str, bool], visible_ids: Iterable[str]) -> bool:
    """True when some, but not all, visible rows are selected."""
    ids = list(visible_ids)
    count = sum(1 for row_id in ids if selection.get(row_id))
    return 0 < count < len(ids)


def toggle_all(selection: Mapping[str, bool], visible_ids: Iterable[str]) -> dict[str, bool]:
    """Select every visible row, or deselect them all if already selected."""
    ids = list(visible_ids)
    updated = dict(selection)
    if all_selected(selection, ids):
        for row_id in ids:
            updated.pop(row_id, None)
    else:
        for row_id in ids:
            updated[row_id] = True
    return updated
