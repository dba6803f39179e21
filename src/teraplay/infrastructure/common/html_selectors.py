"""BeautifulSoup helpers for share page HTML."""

from __future__ import annotations

from bs4 import BeautifulSoup


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree.

    Uses the ``lxml`` parser for speed (lxml is a project dependency).
    """
    return BeautifulSoup(html, "lxml")


def script_texts(html: str) -> list[str]:
    """Return the text of every inline ``<script>`` block, in document order.

    Scripts with a ``src`` attribute and empty blocks are skipped.
    """
    soup = parse_html(html)
    texts: list[str] = []
    for script in soup.find_all("script"):
        if script.get("src"):
            continue
        content = script.string if script.string is not None else script.get_text()
        if content and content.strip():
            texts.append(content)
    return texts
