"""
Per-cell value coercion.

Responsibilities:
- unwrap one layer of straight or typographic quotes
- split array fields into a list of strings
- optional scalar type inference (int, float, bool, null)
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

from .models import ConversionOptions, Scalar, Value
from .rules import MAX_SAFE_INTEGER, MAX_SAFE_INTEGER_DIGITS

OPEN_QUOTES = ('"', "“")
CLOSE_QUOTES = ('"', "”")

_INT_RE = re.compile(r"^-?[0-9]+$")
_FLOAT_RE = re.compile(r"^-?[0-9]*\.[0-9]+$")
_BOOL_RE = re.compile(r"^(true|false)$", re.IGNORECASE)
_NULL_RE = re.compile(r"^null$", re.IGNORECASE)


def unwrap_quotes(value: Optional[str]) -> str:
    """Strip exactly one pair of wrapping quotes and collapse escaped quotes."""
    if value is None:
        return ""
    v = value.strip()
    if len(v) >= 2 and (v[0], v[-1]) in (('"', '"'), ("“", "”")):
        v = v[1:-1]
    v = v.replace('\\"', '"').replace('""', '"')
    return v.strip()


def is_city_state_comma(s: str, pos: int) -> bool:
    """True for the comma in "City, ST": space, two capitals, then no alphanumeric."""
    if pos < 0 or pos >= len(s) or s[pos] != ",":
        return False
    after = s[pos + 1:pos + 5]
    if len(after) < 3 or after[0] != " ":
        return False
    if not all("A" <= ch <= "Z" for ch in after[1:3]):
        return False
    return len(after) == 3 or not after[3].isalnum()


def split_array(value: str) -> List[str]:
    """
    Tokenize a multi-value cell on commas outside quotes, keeping "City, ST" intact.

    >>> split_array("Store A - Springfield, OH, Store B - Reno, NV")
    ['Store A - Springfield, OH', 'Store B - Reno, NV']
    """
    tokens: List[str] = []
    buf: List[str] = []
    in_quotes = False

    for pos, ch in enumerate(value):
        if in_quotes:
            if ch in CLOSE_QUOTES:
                in_quotes = False
            buf.append(ch)
        elif ch in OPEN_QUOTES:
            in_quotes = True
            buf.append(ch)
        elif ch == "," and not is_city_state_comma(value, pos):
            tokens.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    tokens.append("".join(buf))

    return [t for t in (unwrap_quotes(t) for t in tokens) if t]


def split_array_naive(value: str, separator: str) -> List[str]:
    return [t for t in (unwrap_quotes(t) for t in value.split(separator)) if t]


def infer_scalar(value: str) -> Scalar:
    """First matching rule wins: int, float, bool, null, else the string itself."""
    if _INT_RE.match(value) and len(value.lstrip("-").lstrip("0")) <= MAX_SAFE_INTEGER_DIGITS:
        number = int(value)
        if abs(number) <= MAX_SAFE_INTEGER:
            return number
    if _FLOAT_RE.match(value):
        number = float(value)
        if math.isfinite(number):
            return number
    if _BOOL_RE.match(value):
        return value.lower() == "true"
    if _NULL_RE.match(value):
        return None
    return value


def coerce_value(header: str, raw: Optional[str], options: ConversionOptions) -> Value:
    base = unwrap_quotes(raw)
    if base == "":
        return options.empty_value(header)

    if options.is_array_field(header):
        if options.array_separator:
            return split_array_naive(base, options.array_separator)
        return split_array(base)

    if options.infer_types:
        return infer_scalar(base)
    return base
