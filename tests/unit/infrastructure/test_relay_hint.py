"""Tests for RelayHint."""

from __future__ import annotations

from teraplay.infrastructure.config.schema import RelayEndpoint
from teraplay.infrastructure.strategies.relay_hint import RelayHint

_RELAYS = [
    RelayEndpoint(name="allorigins", prefix="https://a.test/?url="),
    RelayEndpoint(name="corsproxy", prefix="https://b.test/?url="),
    RelayEndpoint(name="codetabs", prefix="https://c.test/?quest="),
]


def _names(relays: list[RelayEndpoint]) -> list[str]:
    return [r.name for r in relays]


class TestRelayHint:
    def test_empty_hint_keeps_order(self) -> None:
        hint = RelayHint()
        assert hint.last_working is None
        assert _names(hint.order(_RELAYS, key=lambda r: r.name)) == [
            "allorigins",
            "corsproxy",
            "codetabs",
        ]

    def test_remembered_relay_moves_first(self) -> None:
        hint = RelayHint()
        hint.remember("codetabs")
        assert _names(hint.order(_RELAYS, key=lambda r: r.name)) == [
            "codetabs",
            "allorigins",
            "corsproxy",
        ]

    def test_unknown_relay_name_keeps_order(self) -> None:
        hint = RelayHint()
        hint.remember("gone")
        assert _names(hint.order(_RELAYS, key=lambda r: r.name)) == _names(_RELAYS)

    def test_reset(self) -> None:
        hint = RelayHint()
        hint.remember("corsproxy")
        hint.reset()
        assert hint.last_working is None
        assert _names(hint.order(_RELAYS, key=lambda r: r.name))[0] == "allorigins"

    def test_order_does_not_mutate_input(self) -> None:
        hint = RelayHint()
        hint.remember("codetabs")
        relays = list(_RELAYS)
        hint.order(relays, key=lambda r: r.name)
        assert relays == _RELAYS
