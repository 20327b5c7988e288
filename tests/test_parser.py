# tests/test_parser.py
import csv
from pathlib import Path

import numpy as np
import pytest

from csv_to_mtx.errors import DuplicateZoneError, UnknownZoneError, UnrecognizedShapeError, ValueParseError
from csv_to_mtx.parser import Shape, parse, read_matrix_csv
from csv_to_mtx.zones import ZoneSet, infer_zones, resolve

SAMPLES = Path(__file__).resolve().parents[1] / "samples"

EXPECTED = np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6], [0.7, 0.8, 0.9]], dtype=np.float32)


def test_three_columns_is_column_shape():
    assert read_matrix_csv("1,2,0.5\n").shape is Shape.COLUMN


def test_more_columns_is_square_shape():
    assert read_matrix_csv(",1,2,3\n1,0,0,0\n").shape is Shape.SQUARE


@pytest.mark.parametrize("text", ["1,2\n3,4\n", "1\n", ""])
def test_too_few_columns_rejected(text):
    with pytest.raises(UnrecognizedShapeError):
        read_matrix_csv(text)


def test_irregular_row_rejected():
    with pytest.raises(UnrecognizedShapeError) as e:
        read_matrix_csv("1,1,0.5\n1,2,0.5,9\n")
    assert e.value.row == 2


def test_forced_column_needs_three_columns():
    with pytest.raises(UnrecognizedShapeError):
        read_matrix_csv(",1,2,3\n1,0,0,0\n", Shape.COLUMN)


def test_square_and_column_samples_agree():
    square = (SAMPLES / "square_small.csv").read_text(encoding="utf-8")
    column = (SAMPLES / "column_small.csv").read_text(encoding="utf-8")

    from_square = parse(square, resolve(None, square))
    from_column = parse(column, resolve(None, column))

    assert from_square == from_column
    assert np.array_equal(from_square.values, EXPECTED)


def test_column_last_write_wins():
    m = parse("1,1,0.1\n1,1,0.9", ZoneSet([1]))
    assert m.values[0, 0] == np.float32(0.9)


def test_column_duplicates_keep_last_among_many():
    text = "1,2,5\n2,1,1\n1,2,6\n2,2,3\n1,2,7\n"
    m = parse(text, ZoneSet([1, 2]))
    assert m.value(1, 2) == 7.0
    assert m.value(2, 1) == 1.0
    assert m.value(2, 2) == 3.0


def test_column_missing_pairs_are_zero():
    m = parse("1,2,4\n3,1,5\n2,2,6\n", ZoneSet([1, 2, 3]))
    assert m.value(2, 3) == 0.0
    assert m.value(1, 2) == 4.0
    assert m.values.sum() == pytest.approx(15.0)


def test_column_header_skipped():
    m = parse("from,to,trips\n1,2,3.5\n", ZoneSet([1, 2]))
    assert m.value(1, 2) == 3.5


def test_column_bad_value_names_row():
    with pytest.raises(ValueParseError) as e:
        parse("origin,destination,value\n1,2,3\n2,1,lots\n", ZoneSet([1, 2]))
    assert e.value.row == 3
    assert e.value.text == "lots"


def test_column_empty_value_rejected():
    with pytest.raises(ValueParseError) as e:
        parse("1,2,\n", ZoneSet([1, 2]))
    assert e.value.row == 1


def test_column_bad_zone_after_first_row():
    with pytest.raises(ValueParseError) as e:
        parse("1,2,3\nA,1,2\n", ZoneSet([1, 2]))
    assert e.value.row == 2


def test_column_unknown_zone():
    with pytest.raises(UnknownZoneError) as e:
        parse("1,2,0.5\n9,1,0.5\n", resolve("1\n2\n3\n", ""))
    assert e.value.zone == 9
    assert e.value.row == 2


def test_square_with_explicit_zone_order():
    square = (SAMPLES / "square_small.csv").read_text(encoding="utf-8")
    zones = resolve((SAMPLES / "zones_small.csv").read_text(encoding="utf-8"), square)

    m = parse(square, zones)

    assert list(m.zones) == [3, 1, 2]
    assert m.values[0].tolist() == pytest.approx([0.9, 0.7, 0.8])
    assert m.value(1, 2) == pytest.approx(0.2)


def test_square_subset_of_zones_leaves_zeros():
    m = parse(",2,1,0\n2,1,2,3\n1,4,5,6\n", ZoneSet([0, 1, 2, 3]), Shape.SQUARE)
    assert m.value(2, 1) == 2.0
    assert m.value(1, 0) == 6.0
    assert m.values[3].tolist() == [0.0, 0.0, 0.0, 0.0]


def test_square_unknown_header_zone():
    with pytest.raises(UnknownZoneError) as e:
        parse(",1,2,7\n1,0,0,0\n", ZoneSet([1, 2, 3]))
    assert e.value.zone == 7
    assert e.value.row == 1


def test_square_bad_cell_names_row():
    with pytest.raises(ValueParseError) as e:
        parse(",1,2,3\n1,0,0,0\n2,0,x,0\n3,0,0,0\n", ZoneSet([1, 2, 3]))
    assert e.value.row == 3


def test_square_duplicate_header_zone():
    with pytest.raises(DuplicateZoneError) as e:
        read_matrix_csv(",1,2,1\n1,0,0,0\n")
    assert e.value.zone == 1


def test_blank_lines_count_toward_row_numbers():
    with pytest.raises(ValueParseError) as e:
        parse("1,1,1\n\n1,2,oops\n", ZoneSet([1, 2]))
    assert e.value.row == 3


def test_bom_and_whitespace_ignored():
    table = read_matrix_csv("\ufeff 1 , 2 , 0.25 \r\n")
    zones = infer_zones(table)
    assert list(zones) == [1, 2]
    assert parse("\ufeff 1 , 2 , 0.25 \r\n", zones).value(1, 2) == 0.25


@pytest.mark.parametrize("first_row", ["1.5,2,0.3", "1e0,2,0.3", "1,2.0,0.3"])
def test_numeric_first_row_is_data_not_header(first_row):
    with pytest.raises(ValueParseError) as e:
        read_matrix_csv(first_row + "\n1,2,0.7\n")
    assert e.value.row == 1
    assert e.value.expected == "zone id"


def test_value_beyond_float32_rejected():
    with pytest.raises(ValueParseError) as e:
        parse("1,1,1\n1,2,1e39\n", ZoneSet([1, 2]))
    assert e.value.row == 2
    assert e.value.text == "1e39"


def test_infinite_value_kept():
    m = parse("1,1,inf\n", ZoneSet([1]))
    assert np.isinf(m.values[0, 0])


def test_oversized_field_reported_as_shape_error():
    old = csv.field_size_limit(10)
    try:
        with pytest.raises(UnrecognizedShapeError) as e:
            read_matrix_csv("1,1,0.5\n1,2," + "9" * 20 + "\n")
    finally:
        csv.field_size_limit(old)
    assert e.value.row == 2
