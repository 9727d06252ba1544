"""Tests for strict table extraction."""

import numpy as np
import pytest

from curvelab.extraction import Column, ExtractedData, Failure, extract_data


def cols(*keys):
    return [{"key": k, "label": k} for k in keys]


@pytest.fixture
def messy_table():
    """Table with one bad Y, one bad X, a decimal comma and a missing cell."""
    rows = [
        {"Y": "1", "X": "0"},
        {"Y": "abc", "X": "1"},
        {"Y": "3", "X": ""},
        {"Y": "5,5", "X": "3"},
        {"Y": 7, "X": 4.0},
        {"Y": None, "X": "5"},
        {"X": "6"},
    ]
    return rows, cols("Y", "X")


def test_explicit_y_with_two_x_columns():
    rows = [{"Y": "1", "X": "2", "X2": "3"}, {"Y": "4", "X": "5", "X2": "6"}]
    data = extract_data(rows, cols("Y", "X", "X2"))

    assert data.ok
    assert data.is_multivariable
    assert data.x_keys == ("X", "X2")
    assert data.y_key == "Y"
    np.testing.assert_array_equal(data.y, [1.0, 4.0])
    np.testing.assert_array_equal(data.x[0], [2.0, 5.0])
    np.testing.assert_array_equal(data.x[1], [3.0, 6.0])
    assert data.warnings == ()


def test_y_detected_anywhere_case_insensitive():
    rows = [{"X": "1", "y": "2"}]
    data = extract_data(rows, cols("X", "y"))

    assert data.y_key == "y"
    assert data.x_keys == ("X",)
    assert not data.is_multivariable


def test_first_column_is_y_without_explicit_header():
    rows = [{"A": "1", "X": "2"}]
    data = extract_data(rows, cols("A", "X"))

    assert data.ok
    assert data.y_key == "A"
    assert data.x_keys == ("X",)
    assert "No explicit 'Y' column found; using first column as Y" in data.warnings


def test_nonstandard_x_name_only_warns():
    rows = [{"Y": "1", "temp": "2"}]
    data = extract_data(rows, cols("Y", "temp"))

    assert data.ok
    assert "Column 'temp' is not a standard X column name." in data.warnings


@pytest.mark.parametrize("key", ["X", "x", "X1", "x12"])
def test_standard_x_names_do_not_warn(key):
    data = extract_data([{"Y": "1", key: "2"}], cols("Y", key))
    assert data.warnings == ()


def test_keys_are_trimmed():
    rows = [{" Y ": "1", "X ": "2"}]
    data = extract_data(rows, cols(" Y ", "X "))

    assert data.ok
    assert data.y_key == "Y"
    assert data.x_keys == ("X",)
    np.testing.assert_array_equal(data.y, [1.0])


def test_column_namedtuples_accepted():
    data = extract_data([{"Y": "1", "X": "2"}], [Column("Y"), Column("X", "time")])
    assert data.ok


def test_strict_row_filtering(messy_table):
    rows, columns = messy_table
    data = extract_data(rows, columns)

    assert data.ok
    np.testing.assert_array_equal(data.y, [1.0, 5.5, 7.0])
    np.testing.assert_array_equal(data.x[0], [0.0, 3.0, 4.0])
    assert data.rows_index_map == (0, 3, 4)

    assert "Skipping row 1: invalid Y value 'abc'" in data.warnings
    assert any(w.startswith("Skipping row 2: one or more X values are invalid") for w in data.warnings)
    assert "Skipping row 5: invalid Y value 'None'" in data.warnings
    assert any(w.startswith("Skipping row 6") for w in data.warnings)


def test_invalid_x_warning_carries_row_payload():
    data = extract_data([{"Y": "1", "X": "2"}, {"Y": "3", "X": "oops"}], cols("Y", "X"))
    warning = [w for w in data.warnings if w.startswith("Skipping row 1")][0]
    assert '"X": "oops"' in warning


def test_row_dropped_when_any_x_invalid():
    rows = [
        {"Y": "1", "X1": "1", "X2": "2"},
        {"Y": "2", "X1": "2", "X2": "n/a"},
        {"Y": "3", "X1": "3", "X2": "4"},
    ]
    data = extract_data(rows, cols("Y", "X1", "X2"))

    assert data.rows_index_map == (0, 2)
    assert len(data.x[0]) == len(data.x[1]) == len(data.y) == 2


def test_non_mapping_row_skipped():
    data = extract_data([{"Y": "1", "X": "2"}, None, ["3", "4"]], cols("Y", "X"))

    assert data.rows_index_map == (0,)
    assert any(w.startswith("Skipping row 1") for w in data.warnings)
    assert any(w.startswith("Skipping row 2") for w in data.warnings)


def test_length_and_finiteness_invariants(messy_table):
    rows, columns = messy_table
    rows = rows + [{"Y": str(i), "X": f"{i},25"} for i in range(20)]
    data = extract_data(rows, columns)

    assert len(data.y) == len(data.rows_index_map)
    for column in data.x:
        assert len(column) == len(data.y)
        assert np.all(np.isfinite(column))
    assert np.all(np.isfinite(data.y))


def test_extraction_is_deterministic(messy_table):
    rows, columns = messy_table
    first = extract_data(rows, columns)
    second = extract_data(rows, columns)

    np.testing.assert_array_equal(first.y, second.y)
    np.testing.assert_array_equal(first.x[0], second.x[0])
    assert first.rows_index_map == second.rows_index_map
    assert first.warnings == second.warnings


@pytest.mark.parametrize("rows, columns", [
    ("not rows", cols("Y", "X")),
    ([], {"key": "Y"}),
    (None, None),
    ({"Y": "1"}, cols("Y", "X")),
])
def test_non_sequence_inputs(rows, columns):
    result = extract_data(rows, columns)

    assert isinstance(result, Failure)
    assert not result.ok
    assert result.kind == "validation"
    assert result.error == "rows and columns must be arrays"


@pytest.mark.parametrize("columns, message", [
    ([], "columns must not be empty"),
    ([{"key": "Y"}, {"key": "  "}], "Column 1 has no usable key"),
    ([{"key": "Y"}, {"label": "X"}], "Column 1 has no usable key"),
    ([{"key": "X"}, {"key": " X "}], "Duplicate column key 'X'"),
])
def test_schema_validation(columns, message):
    result = extract_data([], columns)

    assert result.kind == "validation"
    assert result.error == message


def test_single_column_has_no_x():
    result = extract_data([{"Y": "1"}], cols("Y"))

    assert result.kind == "data"
    assert result.error == "No X columns detected"


@pytest.mark.parametrize("rows", [
    [],
    [{"Y": "a", "X": "1"}, {"Y": "2", "X": ""}],
])
def test_no_valid_rows(rows):
    result = extract_data(rows, cols("Y", "X"))

    assert result.kind == "data"
    assert result.error == "No valid numeric rows found after parsing"


def test_failure_keeps_warnings():
    result = extract_data([{"Y": "a", "X": "1"}], cols("Y", "X"))
    assert "Skipping row 0: invalid Y value 'a'" in result.warnings
    assert result.to_dict()["ok"] is False


def test_from_arrays():
    data = ExtractedData.from_arrays([[1, 2, 3], [4, 5, 7]], [1, 2, 3])

    assert data.x_keys == ("X1", "X2")
    assert data.is_multivariable
    assert data.rows_index_map == (0, 1, 2)
    assert data.n == 3

    single = ExtractedData.from_arrays([1, 2, 3], [1, 2, 3])
    assert single.x_keys == ("X",)
    assert not single.is_multivariable


def test_oversized_int_cell_skips_row():
    rows = [{"Y": 10 ** 5000, "X": 1}, {"Y": 1, "X": 2}, {"Y": 2, "X": 3}]
    data = extract_data(rows, cols("Y", "X"))

    assert data.ok
    assert data.rows_index_map == (1, 2)
    assert "Skipping row 0: invalid Y value '<int>'" in data.warnings


def test_invalid_x_payload_with_non_string_keys():
    rows = [{"Y": "1", "X": "bad", ("a", "b"): 1}, {"Y": 1, "X": 2}, {"Y": 2, "X": 3}]
    data = extract_data(rows, cols("Y", "X"))

    assert data.rows_index_map == (1, 2)
    warning = [w for w in data.warnings if w.startswith("Skipping row 0")][0]
    assert "('a', 'b')" in warning


def test_invalid_x_payload_with_oversized_int():
    rows = [{"Y": "1", "X": "bad", "Z": 10 ** 5000}, {"Y": 1, "X": 2, "Z": 0}]
    data = extract_data(rows, cols("Y", "X"))

    warning = [w for w in data.warnings if w.startswith("Skipping row 0")][0]
    assert '"Z": "<int>"' in warning
