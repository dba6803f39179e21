from .share import (
    DEFAULT_TITLE,
    AttemptLog,
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    SourceVariant,
    StrategyFailure,
    StrategyOutcome,
    VerifiedCandidate,
)

__all__ = [
    "DEFAULT_TITLE",
    "AttemptLog",
    "FailureKind",
    "ResolvedDescriptor",
    "ShareReference",
    "SourceVariant",
    "StrategyFailure",
    "StrategyOutcome",
    "VerifiedCandidate",
]
