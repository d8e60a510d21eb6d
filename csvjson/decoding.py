"""
Byte decoding for CSV input.

Rules:
- A leading byte order mark selects the codec and is stripped.
- Without a mark, bytes are decoded as UTF-8 with replacement characters.
- Optionally, non-UTF-8 input without a mark is handed to charset-normalizer.
- A BOM that survives as the first character of the text is removed.
"""

from __future__ import annotations

import logging

from charset_normalizer import from_bytes

from .models import Encoding, RawDocument
from .rules import BOM_CHAR, UTF8_BOM, UTF16_BE_BOM, UTF16_LE_BOM

logger = logging.getLogger(__name__)


def strip_bom_char(text: str) -> str:
    return text[1:] if text.startswith(BOM_CHAR) else text


def _decode(raw: bytes, codec: str) -> tuple[str, bool]:
    try:
        return raw.decode(codec), False
    except UnicodeDecodeError:
        # Last resort: decode with replacement so the pipeline can continue
        return raw.decode(codec, errors="replace"), True


def _guess_codec(raw: bytes) -> str | None:
    match = from_bytes(raw).best()
    if match is None:
        return None
    return match.encoding


def decode_bytes(raw: bytes, detect_charset: bool = False) -> RawDocument:
    """Turn raw file bytes into a RawDocument. Never raises on bad input."""
    if raw.startswith(UTF8_BOM):
        encoding, codec, payload = Encoding.UTF8_BOM, "utf-8", raw[len(UTF8_BOM):]
    elif raw.startswith(UTF16_LE_BOM):
        encoding, codec, payload = Encoding.UTF16_LE, "utf-16-le", raw[len(UTF16_LE_BOM):]
    elif raw.startswith(UTF16_BE_BOM):
        encoding, codec, payload = Encoding.UTF16_BE, "utf-16-be", raw[len(UTF16_BE_BOM):]
    else:
        encoding, codec, payload = Encoding.UTF8, "utf-8", raw

    if encoding is Encoding.UTF8 and detect_charset:
        try:
            payload.decode("utf-8")
        except UnicodeDecodeError:
            guessed = _guess_codec(payload)
            logger.debug("Input is not valid UTF-8; charset-normalizer guessed %s", guessed)
            if guessed:
                codec = guessed

    text, lossy = _decode(payload, codec)
    if lossy:
        logger.debug("Decoding with %s introduced replacement characters", codec)

    return RawDocument(
        text=strip_bom_char(text),
        detected_encoding=encoding,
        codec=codec,
        lossy=lossy,
    )
