"""
Strict extraction of fit-ready numeric data from an edited table.

A table is a sequence of rows (mappings from column key to a loosely-typed
cell value) plus an ordered column schema. One column is Y, every other
column is an X. A row is kept only when Y and all X cells parse; there is
no imputation and no partial row.

Clean design: nothing here logs user-facing messages. Every diagnostic is
returned in ``warnings`` and fatal problems come back as a ``Failure``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, Union

import numpy as np
from numpy.typing import NDArray

from .numeric import parse_number

logger = logging.getLogger(__name__)

FloatArray = NDArray[np.float64]

# Failure kinds, in the order they can occur during a call
KIND_VALIDATION = "validation"
KIND_DATA = "data"
KIND_DEGENERATE = "degenerate"
KIND_CONFIG = "config"

_X_NAME_RE = re.compile(r"^x\d*$", re.IGNORECASE)


class Column(NamedTuple):
    key: str
    label: str = ""


@dataclass(frozen=True, slots=True)
class Failure:
    """Structured failure returned across the engine boundary."""
    kind: str
    error: str
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": False,
            "kind": self.kind,
            "error": self.error,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True, eq=False)
class ExtractedData:
    """
    Clean numeric view of a table.

    Attributes
    ----------
    y : ndarray of float
        Dependent values, one per accepted row.
    x : tuple of ndarray
        One array per X column, aligned with ``y``.
    x_keys : tuple of str
        Schema keys of the X columns, in table order.
    y_key : str
        Schema key of the Y column.
    rows_index_map : tuple of int
        Original row index of every accepted row.
    warnings : tuple of str
        Non-fatal diagnostics collected during extraction.
    """
    y: FloatArray
    x: tuple[FloatArray, ...]
    x_keys: tuple[str, ...]
    y_key: str
    rows_index_map: tuple[int, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return True

    @property
    def n(self) -> int:
        return len(self.y)

    @property
    def is_multivariable(self) -> bool:
        return len(self.x) > 1

    @classmethod
    def from_arrays(cls, x: Any, y: Any, x_keys: Optional[Sequence[str]] = None,
                    y_key: str = "Y") -> "ExtractedData":
        """Wrap already-clean arrays. ``x`` is one array or a sequence of arrays."""
        y_arr = np.asarray(y, dtype=np.float64).ravel()
        x_arr = np.asarray(x, dtype=np.float64)
        columns = (x_arr,) if x_arr.ndim == 1 else tuple(x_arr)
        if x_keys is None:
            x_keys = ("X",) if len(columns) == 1 else tuple(f"X{i + 1}" for i in range(len(columns)))
        return cls(
            y=y_arr,
            x=tuple(np.asarray(c, dtype=np.float64) for c in columns),
            x_keys=tuple(x_keys),
            y_key=y_key,
            rows_index_map=tuple(range(len(y_arr))),
        )


ExtractionOutcome = Union[ExtractedData, Failure]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _column_key(column: Any) -> Any:
    if isinstance(column, Mapping):
        return column.get("key")
    return getattr(column, "key", None)


def _cell(row: Mapping[str, Any], key: str, raw_key: str) -> Any:
    if key in row:
        return row[key]
    return row.get(raw_key)


def _cell_text(value: Any) -> str:
    try:
        return str(value)
    except ValueError:
        return f"<{type(value).__name__}>"


def _row_payload(row: Mapping[Any, Any]) -> str:
    payload = {_cell_text(k): v for k, v in row.items()}
    try:
        return json.dumps(payload, default=str, ensure_ascii=False)
    except ValueError:
        return json.dumps({k: _cell_text(v) for k, v in payload.items()}, ensure_ascii=False)


def detect_columns(columns: Sequence[Any]) -> tuple[Optional[int], list[int], list[str], list[str]]:
    """Resolve column roles.

    Returns ``(y_index, x_indices, keys, warnings)``. Keys are trimmed.
    The first key equal to ``y`` (any case) is Y, otherwise the first
    column; all others are X, in table order.
    """
    warnings: list[str] = []
    keys = [str(_column_key(c)).strip() for c in columns]
    lower = [k.lower() for k in keys]

    if "y" in lower:
        y_index = lower.index("y")
    else:
        y_index = 0
        warnings.append("No explicit 'Y' column found; using first column as Y")

    x_indices = [i for i in range(len(keys)) if i != y_index]
    for i in x_indices:
        if not _X_NAME_RE.match(keys[i]):
            warnings.append(f"Column '{keys[i]}' is not a standard X column name.")
    return y_index, x_indices, keys, warnings


def _validate_schema(rows: Any, columns: Any) -> Optional[str]:
    if not _is_sequence(rows) or not _is_sequence(columns):
        return "rows and columns must be arrays"
    if len(columns) == 0:
        return "columns must not be empty"
    seen: set[str] = set()
    for i, column in enumerate(columns):
        key = _column_key(column)
        if not isinstance(key, str) or not key.strip():
            return f"Column {i} has no usable key"
        key = key.strip()
        if key in seen:
            return f"Duplicate column key '{key}'"
        seen.add(key)
    return None


def extract_data(rows: Sequence[Mapping[str, Any]], columns: Sequence[Any]) -> ExtractionOutcome:
    """
    Validate a table and return aligned numeric vectors.

    Parameters
    ----------
    rows : sequence of mapping
        Table rows, column key -> cell value (str, number or None).
    columns : sequence of Column or mapping
        Ordered schema entries carrying a ``key``.

    Returns
    -------
    ExtractedData or Failure
        ``Failure.kind`` is ``validation`` for a malformed schema and
        ``data`` when no X column or no valid row remains.
    """
    problem = _validate_schema(rows, columns)
    if problem is not None:
        return Failure(KIND_VALIDATION, problem)

    y_index, x_indices, keys, warnings = detect_columns(columns)
    raw_keys = [str(_column_key(c)) for c in columns]

    if not x_indices:
        return Failure(KIND_DATA, "No X columns detected", tuple(warnings))

    y_key = keys[y_index]
    x_keys = [keys[i] for i in x_indices]

    y_values: list[float] = []
    x_values: list[list[float]] = [[] for _ in x_indices]
    index_map: list[int] = []

    for idx, row in enumerate(rows):
        if not isinstance(row, Mapping):
            warnings.append(f"Skipping row {idx}: not a mapping of column values")
            continue

        y_raw = _cell(row, y_key, raw_keys[y_index])
        y_val = parse_number(y_raw)
        if y_val is None:
            warnings.append(f"Skipping row {idx}: invalid Y value '{_cell_text(y_raw)}'")
            continue

        parsed = [parse_number(_cell(row, keys[i], raw_keys[i])) for i in x_indices]
        if any(v is None for v in parsed):
            warnings.append(
                f"Skipping row {idx}: one or more X values are invalid ({_row_payload(row)})"
            )
            continue

        y_values.append(y_val)
        for column, value in zip(x_values, parsed):
            column.append(value)
        index_map.append(idx)

    if not y_values:
        return Failure(KIND_DATA, "No valid numeric rows found after parsing", tuple(warnings))

    n = len(y_values)
    if any(len(column) != n for column in x_values):
        return Failure(KIND_DATA, "X-column length mismatch", tuple(warnings))

    logger.debug("Extracted %d of %d rows (Y=%s, X=%s)", n, len(rows), y_key, x_keys)

    return ExtractedData(
        y=np.asarray(y_values, dtype=np.float64),
        x=tuple(np.asarray(column, dtype=np.float64) for column in x_values),
        x_keys=tuple(x_keys),
        y_key=y_key,
        rows_index_map=tuple(index_map),
        warnings=tuple(warnings),
    )
