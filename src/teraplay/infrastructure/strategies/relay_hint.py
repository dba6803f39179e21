"""Optional "last known working relay" hint.

Only reorders relay attempts on later calls; resolution is correct
with an empty or freshly reset hint.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")


class RelayHint:
    """Remembers the name of the relay that last produced a result."""

    def __init__(self) -> None:
        self._last_working: str | None = None

    @property
    def last_working(self) -> str | None:
        return self._last_working

    def remember(self, relay_name: str) -> None:
        self._last_working = relay_name

    def reset(self) -> None:
        self._last_working = None

    def order(self, relays: Sequence[T], key: Callable[[T], str]) -> list[T]:
        """Return *relays* with the last working one moved to the front.

        Relative order of the others is preserved.
        """
        items = list(relays)
        if self._last_working is None:
            return items
        preferred = [r for r in items if key(r) == self._last_working]
        rest = [r for r in items if key(r) != self._last_working]
        return preferred + rest
