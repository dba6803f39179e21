"""Domain entities for share link resolution.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_TITLE = "Terabox Video"


class SourceVariant(str, Enum):
    """Family of endpoint templates a share link belongs to."""

    PRIMARY = "primary"  # terabox.com, terabox.app, teraboxapp.com
    MIRROR_1024TERA = "1024tera"  # divergent short-url API shape
    MIRROR = "mirror"  # mirrobox, nephobox, 4funbox, ...


class FailureKind(str, Enum):
    """Why a single strategy attempt failed."""

    INPUT_REJECTED = "input_rejected"
    IDENTIFIER_MISSING = "identifier_missing"
    NETWORK_FAILURE = "network_failure"
    UPSTREAM_REJECTED = "upstream_rejected"
    SHAPE_MISMATCH = "shape_mismatch"
    VERIFICATION_FAILED = "verification_failed"


@dataclass(frozen=True)
class ShareReference:
    """A classified share link.

    ``normalized_url`` always carries a scheme.  ``identifier`` is the
    share token extracted from the path or query, ``None`` when no
    pattern matched.
    """

    raw_url: str
    normalized_url: str
    variant: SourceVariant = SourceVariant.PRIMARY
    identifier: str | None = None


@dataclass(frozen=True)
class ResolvedDescriptor:
    """Result of a successful resolution, handed to the playback surface."""

    url: str
    title: str = DEFAULT_TITLE
    size: int = 0  # bytes, 0 when unknown
    is_external: bool = False  # page to open, not a streamable resource
    thumbnail: str | None = None
    strategy: str = ""


@dataclass(frozen=True)
class StrategyFailure:
    """Failure of one strategy attempt, kept for diagnostics."""

    strategy: str
    kind: FailureKind
    reason: str
    endpoint: str | None = None
    status_code: int | None = None

    def describe(self) -> str:
        parts = [f"{self.strategy}: {self.reason}"]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.endpoint:
            parts.append(f"endpoint={self.endpoint[:120]}")
        return " ".join(parts)


StrategyOutcome = ResolvedDescriptor | StrategyFailure


@dataclass(frozen=True)
class VerifiedCandidate:
    """Positive answer of the candidate verifier."""

    url: str
    status_code: int
    content_length: int = 0
    content_type: str = ""


@dataclass
class AttemptLog:
    """Ordered outcomes of one resolution call.

    Scoped to a single ``resolve()`` call and discarded afterwards.
    """

    outcomes: list[StrategyOutcome] = field(default_factory=list)

    def record(self, outcome: StrategyOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def failures(self) -> list[StrategyFailure]:
        return [o for o in self.outcomes if isinstance(o, StrategyFailure)]

    @property
    def last_failure(self) -> StrategyFailure | None:
        failures = self.failures
        return failures[-1] if failures else None

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[StrategyOutcome]:
        return iter(self.outcomes)
