"""
Single-file conversion: raw bytes -> headers + records -> JSON output.

Pipeline: decode -> split lines -> find header -> detect delimiter
-> normalize headers -> per data line (parse -> coerce -> assemble) -> serialize.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .coerce import coerce_value
from .decoding import decode_bytes, strip_bom_char
from .models import ConversionOptions, ConversionResult, RawDocument, Record
from .parsing import detect_delimiter, find_header_index, normalize_headers, parse_row, split_lines
from .rules import DEFAULT_DELIMITER
from .serialize import write_document, write_ndjson

logger = logging.getLogger(__name__)


def assemble_record(headers: Sequence[str], cells: Sequence[str], options: ConversionOptions) -> Record:
    """One value per header; missing cells are blank, extra cells are dropped."""
    record: Record = {}
    for idx, header in enumerate(headers):
        raw = cells[idx] if idx < len(cells) else ""
        record[header] = coerce_value(header, raw, options)
    return record


class RecordReader:
    """
    Lazy record source for one decoded document.

    Header and delimiter are resolved on construction; data lines are parsed
    only while iterating, so streaming output never holds every record.
    """

    def __init__(self, document: RawDocument, options: ConversionOptions):
        self.document = document
        self.options = options
        self.produced = 0
        self.skipped = 0

        lines = split_lines(document.text)
        header_idx = find_header_index(lines)
        if header_idx is None:
            self.headers: List[str] = []
            self.delimiter = options.delimiter or DEFAULT_DELIMITER
            self._body: List[str] = []
            return

        header_line = strip_bom_char(lines[header_idx])
        self.delimiter = detect_delimiter(header_line, options.delimiter)
        self.headers = normalize_headers(parse_row(header_line, self.delimiter))
        self._body = lines[header_idx + 1:]

    def __iter__(self) -> Iterator[Record]:
        limit = self.options.limit
        for line in self._body:
            if limit and self.produced >= limit:
                break
            if line == "":
                continue
            cells = parse_row(strip_bom_char(line), self.delimiter)
            if all(cell == "" for cell in cells):
                self.skipped += 1
                continue
            self.produced += 1
            yield assemble_record(self.headers, cells, self.options)

    def result(self, records: List[Record]) -> ConversionResult:
        return ConversionResult(
            headers=self.headers,
            records=records,
            delimiter=self.delimiter,
            encoding=self.document.detected_encoding,
            codec=self.document.codec,
            lossy=self.document.lossy,
            skipped=self.skipped,
        )


def convert_document(document: RawDocument, options: ConversionOptions) -> ConversionResult:
    reader = RecordReader(document, options)
    records = list(reader)
    return reader.result(records)


def convert_bytes(raw: bytes, options: Optional[ConversionOptions] = None) -> ConversionResult:
    options = options or ConversionOptions()
    return convert_document(decode_bytes(raw, detect_charset=options.detect_charset), options)


def convert_text(text: str, options: Optional[ConversionOptions] = None) -> ConversionResult:
    options = options or ConversionOptions()
    return convert_document(RawDocument(text=strip_bom_char(text)), options)


def convert_file(
    input_path: Path, output_path: Optional[Path], options: ConversionOptions
) -> int:
    """
    Convert one CSV file and write it to ``output_path`` (stdout when None).

    Returns the number of records written. Errors propagate to the caller.
    """
    document = decode_bytes(Path(input_path).read_bytes(), detect_charset=options.detect_charset)
    reader = RecordReader(document, options)

    if output_path is None:
        _write(reader, sys.stdout, options)
    else:
        with open(output_path, "w", encoding="utf-8", newline="\n") as out:
            _write(reader, out, options)

    logger.info(
        "✔ %s → %s  (%d rows, %d cols, delim=%r)",
        Path(input_path).name,
        output_path or "(stdout)",
        reader.produced,
        len(reader.headers),
        reader.delimiter,
    )
    return reader.produced


def _write(reader: RecordReader, out, options: ConversionOptions) -> None:
    if options.ndjson:
        write_ndjson(reader, reader.headers, out, options)
    else:
        write_document(list(reader), reader.headers, out, options)
