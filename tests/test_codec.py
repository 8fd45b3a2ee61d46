"""
Unit tests for repo_insights.codec (JSON and CSV dataset formats).
"""
import json

import pytest
from conftest import make_record

from repo_insights.codec import CSV_HEADER, CsvCodec, JsonCodec, get_codec
from repo_insights.errors import MalformedDataError, UnsupportedFormatError


# ---------------------------------------------------------------------------
# Format selection
# ---------------------------------------------------------------------------


def test_get_codec_known_formats():
    assert isinstance(get_codec("json"), JsonCodec)
    assert isinstance(get_codec("csv"), CsvCodec)


def test_get_codec_is_case_insensitive():
    assert isinstance(get_codec("CSV"), CsvCodec)


@pytest.mark.parametrize("fmt", ["yaml", "", None])
def test_get_codec_rejects_unknown_formats(fmt):
    with pytest.raises(UnsupportedFormatError):
        get_codec(fmt)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def test_json_encode_is_pretty_printed_in_column_order():
    text = JsonCodec().encode([make_record("2024-01-01")])
    assert text.startswith('[\n  {\n    "date": "2024-01-01",\n    "stargazers": 10,')
    keys = list(json.loads(text)[0].keys())
    assert keys == CSV_HEADER.split(",")


def test_json_empty_content_is_empty_array():
    codec = JsonCodec()
    assert codec.empty_content() == "[]"
    assert codec.decode(codec.empty_content()) == []


def test_json_round_trip():
    codec = JsonCodec()
    records = [make_record("2024-01-02", stargazers=3), make_record("2024-01-01")]
    assert codec.decode(codec.encode(records)) == records


def test_json_decode_coerces_numeric_strings():
    entry = make_record("2024-01-01").to_dict()
    entry["stargazers"] = "42"
    [record] = JsonCodec().decode(json.dumps([entry]))
    assert record.stargazers == 42


def test_json_decode_missing_key_is_malformed():
    entry = make_record("2024-01-01").to_dict()
    del entry["clones_uniques"]
    with pytest.raises(MalformedDataError, match="clones_uniques"):
        JsonCodec().decode(json.dumps([entry]))


@pytest.mark.parametrize("text", ["not json", '{"date": "2024-01-01"}', "[1, 2]"])
def test_json_decode_rejects_wrong_shapes(text):
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(text)


def test_json_decode_rejects_non_numeric_values():
    entry = make_record("2024-01-01").to_dict()
    entry["commits"] = "many"
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(json.dumps([entry]))


def test_json_decode_rejects_invalid_dates():
    entry = make_record("2024-01-01").to_dict()
    entry["date"] = "2024-02-30"
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(json.dumps([entry]))


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def test_csv_header_is_fixed():
    assert CSV_HEADER == (
        "date,stargazers,commits,contributors,traffic_views,"
        "traffic_uniques,clones_count,clones_uniques"
    )


def test_csv_encode_rows_in_dataset_order():
    text = CsvCodec().encode([make_record("2024-01-02"), make_record("2024-01-01", stargazers=9)])
    assert text.split("\n") == [
        CSV_HEADER,
        "2024-01-02,10,5,2,7,4,2,1",
        "2024-01-01,9,5,2,7,4,2,1",
    ]


def test_csv_empty_content_is_header_only():
    codec = CsvCodec()
    assert codec.empty_content() == CSV_HEADER + "\n"
    assert codec.decode(codec.empty_content()) == []


def test_csv_decode_strips_blank_lines():
    text = f"{CSV_HEADER}\n\n2024-01-01,10,5,2,7,4,2,1\n   \n"
    assert CsvCodec().decode(text) == [make_record("2024-01-01")]


def test_csv_round_trip():
    codec = CsvCodec()
    records = [make_record("2024-01-01"), make_record("2024-01-02", clones_count=0)]
    assert codec.decode(codec.encode(records)) == records


def test_csv_decode_wrong_header_is_malformed():
    with pytest.raises(MalformedDataError, match="header"):
        CsvCodec().decode("day,stars\n2024-01-01,1\n")


def test_csv_decode_short_row_is_malformed():
    with pytest.raises(MalformedDataError, match="fields"):
        CsvCodec().decode(f"{CSV_HEADER}\n2024-01-01,10,5\n")


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def _json_entry(stargazers_token):
    entry = json.dumps(make_record("2024-01-01").to_dict())
    return "[" + entry.replace('"stargazers": 10', f'"stargazers": {stargazers_token}') + "]"


@pytest.mark.parametrize("token", ["Infinity", "-Infinity", "NaN", "1e999"])
def test_json_decode_non_finite_numbers_are_malformed(token):
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(_json_entry(token))


@pytest.mark.parametrize("token", ["1.9", '"1.9"', "true"])
def test_json_decode_rejects_non_integral_counts(token):
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(_json_entry(token))


def test_json_decode_accepts_integral_floats():
    [record] = JsonCodec().decode(_json_entry("12.0"))
    assert record.stargazers == 12


def test_json_and_csv_agree_on_fractional_counts():
    with pytest.raises(MalformedDataError):
        CsvCodec().decode(f"{CSV_HEADER}\n2024-01-01,1.9,5,2,7,4,2,1\n")
    with pytest.raises(MalformedDataError):
        JsonCodec().decode(_json_entry("1.9"))
