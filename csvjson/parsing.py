"""
Line splitting, field tokenization, delimiter detection and header normalization.

Quoted fields never span lines: text is split into lines first and each line
is tokenized on its own.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .rules import BOM_CHAR, CANDIDATE_DELIMITERS, DEFAULT_DELIMITER

logger = logging.getLogger(__name__)

QUOTE = '"'


def split_lines(text: str) -> List[str]:
    """Normalize CRLF/CR to LF and split. A final newline leaves a trailing ''."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def find_header_index(lines: Sequence[str]) -> Optional[int]:
    for idx, line in enumerate(lines):
        if line.strip():
            return idx
    return None


# --- Field tokenizer state machine ---

class State(Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    # A quote was seen inside a quoted field: either an escaped "" or the close
    QUOTE_PENDING = "quote_pending"


class CharClass(Enum):
    DELIMITER = "delimiter"
    QUOTE = "quote"
    OTHER = "other"


class Action(Enum):
    APPEND = "append"
    APPEND_QUOTE = "append_quote"
    EMIT = "emit"
    SKIP = "skip"


_TRANSITIONS: Dict[Tuple[State, CharClass], Tuple[State, Action]] = {
    (State.UNQUOTED, CharClass.DELIMITER): (State.UNQUOTED, Action.EMIT),
    (State.UNQUOTED, CharClass.QUOTE): (State.QUOTED, Action.SKIP),
    (State.UNQUOTED, CharClass.OTHER): (State.UNQUOTED, Action.APPEND),
    (State.QUOTED, CharClass.DELIMITER): (State.QUOTED, Action.APPEND),
    (State.QUOTED, CharClass.QUOTE): (State.QUOTE_PENDING, Action.SKIP),
    (State.QUOTED, CharClass.OTHER): (State.QUOTED, Action.APPEND),
    (State.QUOTE_PENDING, CharClass.DELIMITER): (State.UNQUOTED, Action.EMIT),
    (State.QUOTE_PENDING, CharClass.QUOTE): (State.QUOTED, Action.APPEND_QUOTE),
    (State.QUOTE_PENDING, CharClass.OTHER): (State.UNQUOTED, Action.APPEND),
}


def classify(ch: str, delimiter: str) -> CharClass:
    if ch == delimiter:
        return CharClass.DELIMITER
    if ch == QUOTE:
        return CharClass.QUOTE
    return CharClass.OTHER


def step(state: State, char_class: CharClass) -> Tuple[State, Action]:
    return _TRANSITIONS[(state, char_class)]


def parse_row(line: str, delimiter: str) -> List[str]:
    """
    Split one line into raw fields.

    Opening quotes are structural and not kept; "" inside a quoted field is a
    literal quote. The end of the line closes the last field even if a quote
    is still open.
    """
    fields: List[str] = []
    buf: List[str] = []
    state = State.UNQUOTED

    for ch in line:
        state, action = step(state, classify(ch, delimiter))
        if action is Action.APPEND:
            buf.append(ch)
        elif action is Action.APPEND_QUOTE:
            buf.append(QUOTE)
        elif action is Action.EMIT:
            fields.append("".join(buf))
            buf = []

    fields.append("".join(buf))
    return fields


# --- Delimiter detection ---

def detect_delimiter(header_line: str, explicit: Optional[str] = None) -> str:
    """Most frequent candidate in the header line; ties go to the earlier candidate."""
    if explicit:
        return explicit

    best, best_count = DEFAULT_DELIMITER, 0
    for candidate in CANDIDATE_DELIMITERS:
        count = header_line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count

    logger.debug("Detected delimiter %r (%d occurrences in header)", best, best_count)
    return best


# --- Header normalization ---

def normalize_headers(cells: Sequence[str]) -> List[str]:
    """
    Trim header cells, name blanks "Column N" and suffix duplicates " (N)".

    The first occurrence keeps its name, the second becomes "name (2)" and so
    on. A suffixed name that collides with a header already taken keeps
    counting until it is unique.
    """
    headers: List[str] = []
    taken: Set[str] = set()
    counts: Dict[str, int] = {}

    for position, cell in enumerate(cells, start=1):
        name = cell.removeprefix(BOM_CHAR).strip() or f"Column {position}"

        count = counts.get(name, 0) + 1
        candidate = name if count == 1 else f"{name} ({count})"
        while candidate in taken:
            count += 1
            candidate = f"{name} ({count})"
        counts[name] = count

        if candidate != name:
            logger.debug("Renamed duplicate header %r to %r", name, candidate)
        taken.add(candidate)
        headers.append(candidate)

    return headers
