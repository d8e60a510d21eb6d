from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from .convert import convert_file
from .models import ConversionOptions, parse_field_list
from .rules import DEFAULT_PRETTY, JSON_SUFFIX
from .walker import convert_directory

ESCAPE_SEQUENCES = {
    "\\t": "\t",
    "tab": "\t",
}


class InputPathError(click.ClickException):
    """Missing or unusable input path; exits 1 before any conversion."""


def resolve_delimiter(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return ESCAPE_SEQUENCES.get(value.lower(), value)


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger("csvjson")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False


def default_output_file(input_file: Path) -> Path:
    """``people.csv`` -> ``people.json`` next to the input."""
    return input_file.with_suffix(JSON_SUFFIX)


@click.command(name="csvjson", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("input_arg", metavar="INPUT", required=False)
@click.option("--input", "-i", "input_opt", default=None, help="CSV file or directory to convert.")
@click.option("--output", "-o", default=None, help="Output file (file mode) or output root directory (directory mode).")
@click.option("--ndjson", is_flag=True, help="Emit newline-delimited JSON (stdout unless -o is given).")
@click.option("--delimiter", default=None, help='Force the column separator (auto-detected otherwise). Use "\\t" for tab.')
@click.option("--pretty", type=int, default=DEFAULT_PRETTY, is_flag=False, flag_value=DEFAULT_PRETTY, show_default=True,
              help="Indentation for JSON array output. 0 minifies.")
@click.option("--infer-types", is_flag=True, help="Convert numbers, booleans and null (default: plain text).")
@click.option("--array-fields", default=None, help="Comma list of array columns (case-insensitive).")
@click.option("--array-sep", default=None, help="Split array fields naively on this separator instead of the City/State-aware tokenizer.")
@click.option("--limit", type=int, default=None, help="Process at most N rows per file (debug). 0 means no limit.")
@click.option("--empty-cells", type=click.Choice(["typed", "array"]), default="typed", show_default=True,
              help='Blank cells: "typed" gives "" or [] for array fields, "array" gives [] everywhere.')
@click.option("--detect-charset", is_flag=True, help="Guess the codec of non-UTF-8 input without a BOM.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug output.")
@click.option("--quiet", "-q", is_flag=True, help="Only report warnings and errors.")
def cli(input_arg, input_opt, output, ndjson, delimiter, pretty, infer_types, array_fields,
        array_sep, limit, empty_cells, detect_charset, verbose, quiet):
    """
    Convert CSV to JSON, one file or a whole directory tree.

    \b
    Examples:
      csvjson people.csv                  # writes people.json
      csvjson people.csv --ndjson         # NDJSON on stdout
      csvjson exports/ -o exports-json    # mirrors the tree
    """
    configure_logging(verbose, quiet)

    raw_input = input_opt or input_arg
    if not raw_input:
        raise InputPathError("provide --input <file> or a directory.")
    input_path = Path(raw_input)
    if not input_path.exists():
        raise InputPathError(f"path not found: {raw_input}")

    try:
        options = ConversionOptions(
            delimiter=resolve_delimiter(delimiter),
            ndjson=ndjson,
            pretty=pretty,
            infer_types=infer_types,
            array_fields=parse_field_list(array_fields),
            array_separator=resolve_delimiter(array_sep),
            limit=limit,
            empty_cells=empty_cells,
            detect_charset=detect_charset,
        )
    except ValidationError as exc:
        raise click.ClickException(f"invalid options: {exc}") from exc

    if input_path.is_dir():
        convert_directory(input_path, Path(output) if output else None, options)
    elif input_path.is_file():
        if output:
            output_path: Optional[Path] = Path(output)
        elif ndjson:
            output_path = None
        else:
            output_path = default_output_file(input_path)
        try:
            convert_file(input_path, output_path, options)
        except Exception as exc:
            raise click.ClickException(f"Conversion failed: {exc}") from exc
    else:
        raise InputPathError("input path must be a file or directory.")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
