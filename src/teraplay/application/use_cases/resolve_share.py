"""Resolve use case: classify a raw link, then run the strategy chain."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from teraplay.domain.entities.share import ResolvedDescriptor, ShareReference
from teraplay.domain.exceptions import ResolutionExhaustedError

log = structlog.get_logger(__name__)

BuildReferenceFn = Callable[[str], ShareReference]
ResolveFn = Callable[[ShareReference], Awaitable[ResolvedDescriptor]]


class ResolveShareUseCase:
    """Turns a raw share link into a ``ResolvedDescriptor``.

    Classification and the ordered strategy chain are injected, so the
    use case itself holds no endpoint knowledge.

    Raises:
        ShareLinkRejectedError: The classifier declined the input.
        ResolutionExhaustedError: Every strategy failed.
    """

    def __init__(
        self,
        *,
        build_reference: BuildReferenceFn,
        resolve_fn: ResolveFn,
    ) -> None:
        self._build_reference = build_reference
        self._resolve_fn = resolve_fn

    def classify(self, raw_url: str) -> ShareReference:
        """Classify *raw_url* without touching the network."""
        return self._build_reference(raw_url)

    async def execute(self, raw_url: str) -> ResolvedDescriptor:
        share = self.classify(raw_url)
        log.info(
            "resolve_share_requested",
            url=share.normalized_url[:120],
            variant=share.variant.value,
            identifier=share.identifier,
        )
        try:
            descriptor = await self._resolve_fn(share)
        except ResolutionExhaustedError as exc:
            log.warning(
                "resolve_share_failed",
                url=share.normalized_url[:120],
                attempts=len(exc.attempts),
            )
            raise

        log.info(
            "resolve_share_completed",
            strategy=descriptor.strategy,
            is_external=descriptor.is_external,
            size=descriptor.size,
        )
        return descriptor
