"""Human-readable formatting for resolved descriptors."""

from __future__ import annotations

import math

from teraplay.domain.entities.share import ResolvedDescriptor

_SIZE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB", "GB", "TB")


def format_file_size(size: int) -> str:
    """Format a byte count: ``0 Bytes``, ``1.5 KB``, ``2 GB``.

    Two decimals at most, trailing zeros dropped.
    """
    if size <= 0:
        return "0 Bytes"
    index = 0
    while size >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(size / 1024**index, 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def format_duration(seconds: float | None) -> str:
    """Format a duration as ``MM:SS``, or ``HH:MM:SS`` past one hour.

    ``None``, NaN and infinite durations (live streams) render as ``00:00``.
    """
    if seconds is None or math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return "00:00"
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def describe_descriptor(
    descriptor: ResolvedDescriptor, duration: float | None = None
) -> str:
    """One-line status text shown under the title."""
    if descriptor.is_external:
        return "Open in browser"
    head = "Ready to stream" if duration is None else f"Duration: {format_duration(duration)}"
    if descriptor.size:
        return f"{head} • {format_file_size(descriptor.size)}"
    return head
