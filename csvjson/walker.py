"""Recursive directory conversion with per-file isolation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from .convert import convert_file
from .models import ConversionOptions
from .rules import CSV_SUFFIX, JSON_SUFFIX, NDJSON_SUFFIX, OUTPUT_DIR_SUFFIX

logger = logging.getLogger(__name__)


@dataclass
class WalkSummary:
    output_root: Path
    converted: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)


def default_output_root(input_dir: Path) -> Path:
    """``data/csv`` -> ``data/csv-json`` (a sibling of the input directory)."""
    input_dir = Path(input_dir).resolve()
    return input_dir.parent / (input_dir.name + OUTPUT_DIR_SUFFIX)


def iter_csv_files(root: Path) -> Iterator[Path]:
    """Yield every ``.csv`` file below root, in filesystem enumeration order."""
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            if Path(name).suffix.lower() == CSV_SUFFIX:
                yield Path(dirpath) / name


def output_path_for(relative: Path, output_root: Path, ndjson: bool) -> Path:
    suffix = NDJSON_SUFFIX if ndjson else JSON_SUFFIX
    return output_root / relative.with_suffix(suffix)


def convert_directory(
    input_dir: Path, output_root: Optional[Path], options: ConversionOptions
) -> WalkSummary:
    """
    Convert every CSV under input_dir, mirroring the tree under output_root.

    A failure on one file is logged and recorded; the walk continues.
    """
    input_dir = Path(input_dir).resolve()
    output_root = Path(output_root).resolve() if output_root else default_output_root(input_dir)
    output_root.mkdir(parents=True, exist_ok=True)

    summary = WalkSummary(output_root=output_root)
    for csv_path in iter_csv_files(input_dir):
        relative = csv_path.relative_to(input_dir)
        target = output_path_for(relative, output_root, options.ndjson)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            convert_file(csv_path, target, options)
        except Exception as exc:  # one bad file must not stop the walk
            logger.error("✖ Failed %s: %s", relative, exc)
            summary.failed.append(relative)
            continue
        summary.converted.append(relative)

    logger.info(
        "Done. Converted %d file(s). Output root: %s", len(summary.converted), output_root
    )
    return summary
