"""Text helpers for payloads sent over the XML protocol."""

from __future__ import annotations

import base64

from charset_normalizer import from_bytes
from charset_normalizer.utils import is_multi_byte_encoding

# Detection only runs on bytes that are not UTF-8; wide encodings turn
# ASCII pairs into unrelated code points.
_EXCLUDED_ENCODINGS = ["utf_16", "utf_16_be", "utf_16_le", "utf_32", "utf_32_be", "utf_32_le", "utf_7"]


def _to_bytes(data: bytes | str) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    raise TypeError("Unsupported payload type. Use bytes or str.")


def normalize_text(data: bytes | str) -> str:
    """Return ``data`` as UTF-8 text.

    ASCII and UTF-8 input is decoded directly. Anything else goes through
    encoding detection limited to single-byte code pages, with Latin-1
    as the last resort.
    """
    if isinstance(data, str):
        return data

    raw = _to_bytes(data)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw, cp_exclusion=_EXCLUDED_ENCODINGS).best()
    if best is None or is_multi_byte_encoding(best.encoding):
        return raw.decode("latin-1")
    return str(best)


def encode_payload(data: bytes | str) -> str:
    return normalize_text(base64.b64encode(_to_bytes(data)))
