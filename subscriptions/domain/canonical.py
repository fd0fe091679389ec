"""
Canonical serialization of signed payloads.

The licensing service signs the compact JSON encoding of each payload
sub-object. Verification must run over the same bytes, so the
sub-object is re-encoded exactly as it was received: original key
order, no whitespace, UTF-8 text, and the HTML-safe escapes the
service's encoder applies.
"""
import json
from typing import Any

_HTML_SAFE_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def canonical_bytes(payload: Any) -> bytes:
    """
    Encode a parsed JSON value to its canonical byte form.

    Args:
        payload: Value decoded with `json.loads` (key order preserved)

    Returns:
        Canonical UTF-8 bytes

    Raises:
        ValueError: If the value holds NaN/Infinity
        TypeError: If the value is not JSON-serializable
    """
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    for char, escaped in _HTML_SAFE_ESCAPES:
        text = text.replace(char, escaped)
    return text.encode("utf-8")
