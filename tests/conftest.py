"""Shared test fixtures for the teraplay test suite."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from teraplay.domain.entities.share import (
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    SourceVariant,
    StrategyFailure,
    StrategyOutcome,
)

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def share() -> ShareReference:
    """Primary-domain share link with an identifier."""
    return ShareReference(
        raw_url="https://terabox.com/s/1abc123def",
        normalized_url="https://terabox.com/s/1abc123def",
        variant=SourceVariant.PRIMARY,
        identifier="1abc123def",
    )


@pytest.fixture()
def share_without_identifier() -> ShareReference:
    return ShareReference(
        raw_url="https://www.terabox.com/japanese/video",
        normalized_url="https://www.terabox.com/japanese/video",
        variant=SourceVariant.PRIMARY,
        identifier=None,
    )


@pytest.fixture()
def descriptor() -> ResolvedDescriptor:
    return ResolvedDescriptor(
        url="https://d.terabox.com/file/video.mp4",
        title="holiday.mp4",
        size=1536,
        thumbnail="https://thumb.terabox.com/holiday.jpg",
        strategy="mirrored_api",
    )


@pytest.fixture()
def fixtures_dir() -> Path:
    """Path to HTML fixtures directory."""
    return Path(__file__).parent / "fixtures" / "html"


# ---------------------------------------------------------------------------
# Fake strategies
# ---------------------------------------------------------------------------


@dataclass
class FakeStrategy:
    """Strategy returning a canned outcome and counting its invocations."""

    name: str
    outcome: StrategyOutcome | None = None
    raises: BaseException | None = None
    calls: list[ShareReference] = field(default_factory=list)

    async def attempt(self, share: ShareReference) -> StrategyOutcome:
        self.calls.append(share)
        if self.raises is not None:
            raise self.raises
        if self.outcome is None:
            return StrategyFailure(
                strategy=self.name,
                kind=FailureKind.SHAPE_MISMATCH,
                reason=f"{self.name} found nothing",
            )
        return self.outcome


@pytest.fixture()
def failing_strategy() -> Callable[..., FakeStrategy]:
    """Factory: ``failing_strategy("name", kind, status_code=404)``."""

    def _make(
        name: str,
        kind: FailureKind = FailureKind.SHAPE_MISMATCH,
        *,
        status_code: int | None = None,
    ) -> FakeStrategy:
        return FakeStrategy(
            name=name,
            outcome=StrategyFailure(
                strategy=name,
                kind=kind,
                reason=f"{name} failed",
                status_code=status_code,
            ),
        )

    return _make


@pytest.fixture()
def succeeding_strategy() -> Callable[..., FakeStrategy]:
    """Factory: ``succeeding_strategy("name", url=...)``."""

    def _make(name: str, url: str = "https://cdn.example.com/video.mp4") -> FakeStrategy:
        return FakeStrategy(name=name, outcome=ResolvedDescriptor(url=url, strategy=name))

    return _make


@pytest.fixture()
def raising_strategy() -> Callable[[str, BaseException], FakeStrategy]:
    def _make(name: str, exc: BaseException) -> FakeStrategy:
        return FakeStrategy(name=name, raises=exc)

    return _make
