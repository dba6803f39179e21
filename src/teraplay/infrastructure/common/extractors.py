"""Normalisation of heterogeneous file-record payloads.

Terabox pages and downloader APIs describe the same file in many
historical shapes: a flat record, a record nested in ``file_list`` /
``list`` (sometimes itself wrapped as ``{"list": [...]}``), or a record
under ``data`` / ``response``.  These helpers find the record and pull
the common descriptor fields out of it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from teraplay.infrastructure.common.converters import to_size_bytes

DOWNLOAD_KEYS: tuple[str, ...] = (
    "dlink",
    "download_url",
    "download_link",
    "direct_link",
    "downloadLink",
    "fast_download_link",
)
TITLE_KEYS: tuple[str, ...] = ("server_filename", "file_name", "filename", "title", "name")
SIZE_KEYS: tuple[str, ...] = ("size", "file_size", "sizebytes", "size_bytes")

_LIST_KEYS: tuple[str, ...] = ("file_list", "list", "files")
_WRAPPER_KEYS: tuple[str, ...] = ("data", "response", "result")

_MAX_DEPTH = 4


@dataclass(frozen=True)
class FileRecord:
    download_url: str
    title: str | None = None
    size: int = 0
    thumbnail: str | None = None


def first_str(record: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    """Return the first non-empty string value among *keys*."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _thumbnail(record: dict[str, Any]) -> str | None:
    thumbs = record.get("thumbs")
    if isinstance(thumbs, dict):
        for key in ("url4", "url3", "url2", "url1"):
            value = thumbs.get(key)
            if isinstance(value, str) and value:
                return value
    value = record.get("thumbnail") or record.get("thumb")
    return value if isinstance(value, str) and value else None


def _resolution_url(record: dict[str, Any]) -> str | None:
    # {"resolutions": {"Fast Download": "https://...", "HD Video": "..."}}
    resolutions = record.get("resolutions")
    if isinstance(resolutions, dict):
        for value in resolutions.values():
            if isinstance(value, str) and value.startswith("http"):
                return value
    return None


def _first_from_list(value: Any) -> dict[str, Any] | None:
    if isinstance(value, dict) and isinstance(value.get("list"), list):
        value = value["list"]
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return None


def find_file_record(data: Any, depth: int = 0) -> dict[str, Any] | None:
    """Locate the dict describing the shared file inside *data*.

    A dict carrying one of ``DOWNLOAD_KEYS`` wins; otherwise list keys
    and wrapper keys are searched, bounded to a few levels.
    """
    if depth > _MAX_DEPTH:
        return None
    if isinstance(data, list):
        data = _first_from_list(data)
    if not isinstance(data, dict):
        return None

    if first_str(data, DOWNLOAD_KEYS) or _resolution_url(data):
        return data

    for key in _LIST_KEYS:
        nested = _first_from_list(data.get(key))
        if nested is not None:
            found = find_file_record(nested, depth + 1)
            if found is not None:
                return found

    for key in _WRAPPER_KEYS:
        if key in data:
            found = find_file_record(data[key], depth + 1)
            if found is not None:
                return found

    return None


def extract_file_record(data: Any) -> FileRecord | None:
    """Extract a ``FileRecord`` from any known payload shape."""
    record = find_file_record(data)
    if record is None:
        return None
    url = first_str(record, DOWNLOAD_KEYS) or _resolution_url(record)
    if not url:
        return None

    size = 0
    for key in SIZE_KEYS:
        if key in record:
            size = to_size_bytes(record[key])
            if size:
                break

    return FileRecord(
        download_url=url,
        title=first_str(record, TITLE_KEYS),
        size=size,
        thumbnail=_thumbnail(record),
    )
