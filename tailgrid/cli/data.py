"""Row loading and column inference for the CLI.

Rows come from a JSON array of objects or a CSV file with a header row.
CSV cells are coerced to bool, int or float where they read as one; empty
cells become None. Column data types are inferred from the non-empty values.
"""

import csv
import json
import re
from pathlib import Path
from typing import Any

from tailgrid.engine.accessor import is_empty
from tailgrid.engine.models import ColumnDef, DataType

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$")


class DataLoadError(Exception):
    """Rows could not be read from a file."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail


def _coerce_cell(text: str) -> Any:
    value = text.strip()
    if value == "":
        return None
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def load_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read rows from a .json or .csv file.

    Raises:
        DataLoadError: Missing file, unsupported extension, or bad content.
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(str(path), "file not found")

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DataLoadError(str(path), f"invalid JSON ({e.msg})") from e
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise DataLoadError(str(path), "expected a JSON array of objects")
        return data

    if suffix == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            return [
                {key: _coerce_cell(value or "") for key, value in row.items() if key is not None}
                for row in reader
            ]

    raise DataLoadError(str(path), f"unsupported file type '{suffix or path.name}'")


def _infer_type(values: list[Any]) -> DataType:
    present = [v for v in values if not is_empty(v)]
    if not present:
        return DataType.STRING
    if all(isinstance(v, bool) for v in present):
        return DataType.BOOLEAN
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in present):
        return DataType.NUMBER
    if all(isinstance(v, str) and _ISO_DATE.match(v) for v in present):
        return DataType.DATE
    return DataType.STRING


def _header(key: str) -> str:
    return key.replace("_", " ").strip().title() or key


def infer_columns(rows: list[dict[str, Any]]) -> list[ColumnDef]:
    """One column per key, in first-seen order, with an inferred data type."""
    keys: list[str] = []
    for row in rows:
        for key in row:
            if key not in keys:
                keys.append(key)

    return [
        ColumnDef(
            id=key,
            header=_header(key),
            accessor_key=key,
            data_type=_infer_type([row.get(key) for row in rows]),
        )
        for key in keys
    ]
