"""Port for a single share resolution strategy."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from teraplay.domain.entities.share import (
    ResolvedDescriptor,
    ShareReference,
    StrategyFailure,
)


@runtime_checkable
class ResolutionStrategyPort(Protocol):
    """Resolves a share reference to a playable descriptor via one technique.

    Implementations never raise: every transport error, bad status,
    unexpected response shape or verifier rejection is returned as a
    ``StrategyFailure``.  A strategy does not know its position in the
    chain or whether alternatives exist.
    """

    @property
    def name(self) -> str:
        """Strategy name used in diagnostics (e.g. 'mirrored_api')."""
        ...

    async def attempt(
        self, share: ShareReference
    ) -> ResolvedDescriptor | StrategyFailure:
        """Try to resolve *share*; return a descriptor or a failure."""
        ...
