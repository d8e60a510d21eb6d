"""JSON array and NDJSON writers for converted records."""

from __future__ import annotations

import json
from typing import IO, Iterable, List, Sequence

from .models import ConversionOptions, Record


def complete_record(record: Record, headers: Sequence[str], options: ConversionOptions) -> Record:
    """Return the record in header order with every header present."""
    full: Record = {}
    for header in headers:
        if header in record:
            full[header] = record[header]
        else:
            full[header] = options.empty_value(header)
    return full


def dumps_document(records: Iterable[Record], headers: Sequence[str], options: ConversionOptions) -> str:
    """Render records as one JSON array. pretty=0 is minified, otherwise indented."""
    rows: List[Record] = [complete_record(r, headers, options) for r in records]
    if options.pretty > 0:
        return json.dumps(rows, indent=options.pretty, ensure_ascii=False, allow_nan=False) + "\n"
    return json.dumps(rows, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def dumps_ndjson_line(record: Record, headers: Sequence[str], options: ConversionOptions) -> str:
    full = complete_record(record, headers, options)
    return json.dumps(full, separators=(",", ":"), ensure_ascii=False, allow_nan=False) + "\n"


def write_document(
    records: Iterable[Record], headers: Sequence[str], out: IO[str], options: ConversionOptions
) -> None:
    """Buffers every record: the array brackets need the whole set."""
    out.write(dumps_document(records, headers, options))


def write_ndjson(
    records: Iterable[Record], headers: Sequence[str], out: IO[str], options: ConversionOptions
) -> None:
    """Fully streaming: one compact object per line, written as produced."""
    for record in records:
        out.write(dumps_ndjson_line(record, headers, options))
