#!/usr/bin/env python3
"""
Serialization of insight datasets.

Two formats are supported: a pretty-printed JSON array of records and a
header-plus-rows CSV table. Both operate on a list of InsightRecord objects,
so the rest of the application never touches the serialized text.
"""

import csv
import json
from typing import List

from .errors import MalformedDataError, UnsupportedFormatError
from .models import COLUMNS, InsightRecord

CSV_HEADER = ",".join(COLUMNS)


def _as_count(value) -> int:
    """Coerce a stored value to int, refusing anything that is not a whole number."""
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _record_from_mapping(entry: dict, position: int) -> InsightRecord:
    if not isinstance(entry, dict):
        raise MalformedDataError(f"Entry {position} is not an object")
    missing = [name for name in COLUMNS if name not in entry]
    if missing:
        raise MalformedDataError(f"Entry {position} is missing keys: {', '.join(missing)}")
    try:
        values = {name: _as_count(entry[name]) for name in COLUMNS[1:]}
        return InsightRecord(date=str(entry["date"]), **values)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedDataError(f"Entry {position} is invalid: {e}") from e


class JsonCodec:
    """Top-level JSON array of record objects, indented by two spaces."""

    name = "json"
    extension = "json"

    def decode(self, text: str) -> List[InsightRecord]:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedDataError(f"Stats file is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise MalformedDataError("Stats file must contain a JSON array")

        return [_record_from_mapping(entry, i) for i, entry in enumerate(data)]

    def encode(self, records: List[InsightRecord]) -> str:
        return json.dumps([record.to_dict() for record in records], indent=2)

    def empty_content(self) -> str:
        return self.encode([])


class CsvCodec:
    """Fixed header line followed by one unquoted row per record."""

    name = "csv"
    extension = "csv"

    def decode(self, text: str) -> List[InsightRecord]:
        lines = [line for line in text.split("\n") if line.strip() != ""]
        if not lines:
            return []

        if lines[0].strip() != CSV_HEADER:
            raise MalformedDataError(f"Unexpected CSV header: {lines[0]!r}")

        records = []
        for position, row in enumerate(csv.reader(lines[1:]), start=1):
            if len(row) != len(COLUMNS):
                raise MalformedDataError(
                    f"Row {position} has {len(row)} fields, expected {len(COLUMNS)}"
                )
            records.append(_record_from_mapping(dict(zip(COLUMNS, row)), position))
        return records

    def encode(self, records: List[InsightRecord]) -> str:
        lines = [CSV_HEADER]
        lines.extend(",".join(record.to_row()) for record in records)
        return "\n".join(lines)

    def empty_content(self) -> str:
        return f"{CSV_HEADER}\n"


CODECS = {
    "json": JsonCodec,
    "csv": CsvCodec,
}


def get_codec(fmt: str):
    """Return the codec for a format name ('json' or 'csv', case-insensitive)."""
    codec_class = CODECS.get((fmt or "").strip().lower())
    if codec_class is None:
        raise UnsupportedFormatError(
            f'Unsupported format {fmt!r}. Please choose either "json" or "csv".'
        )
    return codec_class()
