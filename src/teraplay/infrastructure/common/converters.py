"""Type conversion utilities."""

from __future__ import annotations

import re

_SIZE_RE = re.compile(r"([\d.]+)\s*([KMGT]?B)")

_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


def to_int(raw: str | int | float | None) -> int | None:
    """Convert string or number to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - 12.7 → 12
        - "123" → 123
        - "1,234" → 1234
        - "" → None
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return int(raw)

    if isinstance(raw, str):
        txt = "".join(ch for ch in raw if ch.isdigit())
        if not txt:
            return None
        return int(txt)

    return None


def to_size_bytes(raw: object) -> int:
    """Parse a byte size from an API field.

    Supports raw byte counts (``1234``, ``"1,234"``) and human strings
    (``"4.5 GB"``, ``"500 MB"``).  Returns 0 when unknown.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return max(to_int(raw) or 0, 0)
    if not isinstance(raw, str):
        return 0

    text = raw.strip()
    if not text:
        return 0
    if text.replace(",", "").isdigit():
        return to_int(text) or 0

    match = _SIZE_RE.match(text.upper())
    if not match:
        return 0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0
    return int(value * _MULTIPLIERS.get(match.group(2), 1))
