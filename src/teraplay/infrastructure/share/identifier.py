"""Share identifier extraction from Terabox-style URLs.

Patterns are tried in order and the first captured group wins.  List-page
forms (``/wap/share/filelist?surl=``, ``/sharing/link?surl=``) come before
the bare ``surl=`` query so a more specific match is never shadowed by a
generic one.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_ID = r"([A-Za-z0-9_-]+)"


class IdentifierPattern(NamedTuple):
    name: str
    regex: re.Pattern[str]


IDENTIFIER_PATTERNS: tuple[IdentifierPattern, ...] = (
    IdentifierPattern(
        "wap_filelist_surl",
        re.compile(r"/wap/share/filelist\?(?:[^#]*?&)??surl=" + _ID),
    ),
    IdentifierPattern(
        "sharing_link_surl",
        re.compile(r"/sharing/link\?(?:[^#]*?&)??surl=" + _ID),
    ),
    IdentifierPattern("share_path", re.compile(r"/s/" + _ID)),
    IdentifierPattern("surl_query", re.compile(r"[?&]surl=" + _ID)),
    IdentifierPattern("file_path", re.compile(r"/file/" + _ID)),
    IdentifierPattern("fid_query", re.compile(r"[?&]fid=" + _ID)),
)


def match_share_identifier(url: str) -> tuple[str, str] | None:
    """Return ``(pattern_name, identifier)`` for the first matching pattern."""
    if not url:
        return None
    for pattern in IDENTIFIER_PATTERNS:
        m = pattern.regex.search(url)
        if m and m.group(1):
            return pattern.name, m.group(1)
    return None


def extract_share_identifier(url: str) -> str | None:
    """Extract the share identifier from *url*, ``None`` when absent."""
    matched = match_share_identifier(url)
    return matched[1] if matched else None


def share_surl(identifier: str) -> str:
    """Short ``surl`` form of an identifier.

    ``/s/1abc`` links carry a leading ``1`` that the ``surl=`` query
    form omits.
    """
    if len(identifier) > 1 and identifier.startswith("1"):
        return identifier[1:]
    return identifier
