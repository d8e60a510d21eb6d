from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import DEFAULT_ARRAY_FIELDS, DEFAULT_PRETTY

Scalar = Union[str, int, float, bool, None]
Value = Union[Scalar, List[str]]
Record = Dict[str, Value]

EmptyCellPolicy = Literal["typed", "array"]


def parse_field_list(raw: Optional[str]) -> FrozenSet[str]:
    """Comma list of header names -> lower-cased set; blank means the built-in list."""
    names = [part.strip().lower() for part in (raw or "").split(",")]
    names = [n for n in names if n]
    if not names:
        return frozenset(n.lower() for n in DEFAULT_ARRAY_FIELDS)
    return frozenset(names)


class ConversionOptions(BaseModel):
    """Immutable settings shared by every file of one invocation."""

    model_config = ConfigDict(frozen=True)

    delimiter: Optional[str] = Field(default=None, min_length=1, max_length=1)
    ndjson: bool = False
    pretty: int = Field(default=DEFAULT_PRETTY, ge=0)
    infer_types: bool = False
    array_fields: FrozenSet[str] = Field(default_factory=lambda: parse_field_list(None))
    array_separator: Optional[str] = Field(default=None, min_length=1)
    limit: Optional[int] = Field(default=None, ge=0)
    empty_cells: EmptyCellPolicy = "typed"
    detect_charset: bool = False

    @field_validator("array_fields", mode="before")
    @classmethod
    def _lower_array_fields(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_field_list(value)
        if value is None:
            return parse_field_list(None)
        return frozenset(str(v).strip().lower() for v in value if str(v).strip())

    @field_validator("limit")
    @classmethod
    def _zero_limit_means_unlimited(cls, value: Optional[int]) -> Optional[int]:
        return value or None

    def is_array_field(self, header: str) -> bool:
        return header.lower() in self.array_fields

    def empty_value(self, header: str) -> Value:
        if self.empty_cells == "array" or self.is_array_field(header):
            return []
        return ""


class Encoding(str, Enum):
    UTF8 = "utf8"
    UTF8_BOM = "utf8-bom"
    UTF16_LE = "utf16le"
    UTF16_BE = "utf16be"


class RawDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    detected_encoding: Encoding = Encoding.UTF8
    codec: str = "utf-8"
    lossy: bool = False


class ConversionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    headers: List[str] = Field(default_factory=list)
    records: List[Record] = Field(default_factory=list)
    delimiter: str = ","
    encoding: Encoding = Encoding.UTF8
    codec: str = "utf-8"
    lossy: bool = False
    skipped: int = 0


class ConversionReport(BaseModel):
    sha256: str
    encoding: Encoding
    codec: str
    lossy: bool = False
    rows: int = 0
    columns: int = 0
    skipped: int = 0


class ConvertResponse(BaseModel):
    headers: List[str]
    delimiter: str
    rows: List[Record] = Field(default_factory=list)
    report: ConversionReport


class HealthResponse(BaseModel):
    ok: bool = True
