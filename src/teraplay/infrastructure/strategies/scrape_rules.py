"""Named extraction rules for Terabox share page HTML.

Rules are applied in priority order across every inline ``<script>``
block: all scripts are scanned with rule 1 before rule 2 is tried, and
so on.  JSON-blob rules yield *authoritative* matches when the embedded
file record names a download field; bare URL rules yield candidates
that must pass the verifier before use.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

import structlog

from teraplay.infrastructure.common.extractors import extract_file_record
from teraplay.infrastructure.common.html_selectors import script_texts

log = structlog.get_logger(__name__)

RuleKind = Literal["json_blob", "url"]


@dataclass(frozen=True)
class ScrapeRule:
    name: str
    pattern: re.Pattern[str]
    kind: RuleKind


@dataclass(frozen=True)
class ScrapeMatch:
    rule: str
    url: str
    authoritative: bool
    title: str | None = None
    size: int = 0
    thumbnail: str | None = None


SCRAPE_RULES: tuple[ScrapeRule, ...] = (
    ScrapeRule(
        "window_yundata",
        re.compile(r"window\.yunData\s*=\s*(\{.+?\});", re.DOTALL),
        "json_blob",
    ),
    ScrapeRule(
        "var_yundata",
        re.compile(r"var\s+yunData\s*=\s*(\{.+?\});", re.DOTALL),
        "json_blob",
    ),
    ScrapeRule(
        "locals_mset",
        re.compile(r"locals\.mset\((\{.+?\})\);", re.DOTALL),
        "json_blob",
    ),
    ScrapeRule("dlink_field", re.compile(r'"dlink"\s*:\s*"([^"]+)"'), "url"),
    ScrapeRule(
        "download_url_field",
        re.compile(r'"download_url"\s*:\s*"([^"]+)"'),
        "url",
    ),
)


def _unescape_json_string(raw: str) -> str:
    """Decode JSON string escapes (``\\/``, ``\\u0026``) in a regex capture."""
    try:
        return json.loads(f'"{raw}"')
    except ValueError:
        return raw.replace("\\/", "/")


def _json_candidates(pattern: re.Pattern[str], text: str) -> Iterator[str]:
    """Yield captured JSON blobs, widening the lazy match until it parses."""
    for m in pattern.finditer(text):
        start = m.start(1)
        end = m.end(1)
        # Lazy capture stops at the first "};" which may be nested; widen
        # to later terminators until the blob is valid JSON.
        while end != -1:
            yield text[start:end]
            next_end = text.find("};", end)
            end = next_end + 1 if next_end != -1 else -1


def apply_rule(rule: ScrapeRule, script: str) -> ScrapeMatch | None:
    """Apply one rule to one script block."""
    if rule.kind == "url":
        m = rule.pattern.search(script)
        if not m:
            return None
        url = _unescape_json_string(m.group(1))
        if not url.startswith(("http://", "https://")):
            return None
        return ScrapeMatch(rule=rule.name, url=url, authoritative=False)

    for blob in _json_candidates(rule.pattern, script):
        try:
            data = json.loads(blob)
        except ValueError:
            continue
        record = extract_file_record(data)
        if record is None:
            return None
        return ScrapeMatch(
            rule=rule.name,
            url=record.download_url,
            authoritative=True,
            title=record.title,
            size=record.size,
            thumbnail=record.thumbnail,
        )
    return None


def iter_scrape_matches(
    html: str,
    rules: tuple[ScrapeRule, ...] = SCRAPE_RULES,
) -> Iterator[ScrapeMatch]:
    """Yield matches from *html* in rule-priority order.

    Duplicate URLs found by lower-priority rules are skipped.
    """
    scripts = script_texts(html)
    seen: set[str] = set()
    for rule in rules:
        for script in scripts:
            match = apply_rule(rule, script)
            if match is None or match.url in seen:
                continue
            seen.add(match.url)
            log.debug("scrape_rule_matched", rule=rule.name, url=match.url[:120])
            yield match
