"""Orchestrator that runs resolution strategies in order for a share link."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import httpx
import structlog

from teraplay.domain.entities.share import (
    AttemptLog,
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    SourceVariant,
    StrategyFailure,
)
from teraplay.domain.exceptions import ResolutionExhaustedError
from teraplay.domain.ports.strategy import ResolutionStrategyPort

log = structlog.get_logger(__name__)


class StrategyOrchestrator:
    """Runs the strategy list of a share's variant, first success wins.

    Strategies run strictly one after another.  Failures are collected
    in a per-call ``AttemptLog``; when the list is exhausted a single
    ``ResolutionExhaustedError`` carrying the last underlying reason is
    raised.  This is the only component that knows strategy order.
    """

    def __init__(
        self,
        chains: Mapping[SourceVariant, Sequence[ResolutionStrategyPort]] | None = None,
        *,
        default_chain: Sequence[ResolutionStrategyPort] | None = None,
        strategy_timeout: float = 45.0,
    ) -> None:
        self._chains: dict[SourceVariant, list[ResolutionStrategyPort]] = {}
        self._default_chain = list(default_chain or [])
        self._strategy_timeout = strategy_timeout
        for variant, strategies in (chains or {}).items():
            self.register(variant, strategies)

    def register(
        self,
        variant: SourceVariant,
        strategies: Sequence[ResolutionStrategyPort],
    ) -> None:
        """Register (or replace) the ordered strategy list for *variant*."""
        self._chains[variant] = list(strategies)
        log.debug(
            "strategy_chain_registered",
            variant=variant.value,
            strategies=[s.name for s in strategies],
        )

    @property
    def supported_variants(self) -> list[SourceVariant]:
        return list(self._chains.keys())

    def strategies_for(self, variant: SourceVariant) -> list[ResolutionStrategyPort]:
        """Return the ordered strategy list for *variant* (copy)."""
        return list(self._chains.get(variant, self._default_chain))

    async def resolve(self, share: ShareReference) -> ResolvedDescriptor:
        """Resolve *share* with the first strategy that succeeds.

        Raises ``ResolutionExhaustedError`` when every strategy failed.
        """
        attempts = AttemptLog()
        strategies = self.strategies_for(share.variant)

        log.info(
            "resolve_started",
            url=share.normalized_url[:120],
            variant=share.variant.value,
            identifier=share.identifier,
            strategies=[s.name for s in strategies],
        )

        for strategy in strategies:
            outcome = await self._try_strategy(strategy, share)
            attempts.record(outcome)
            if isinstance(outcome, ResolvedDescriptor):
                log.info(
                    "resolve_success",
                    strategy=strategy.name,
                    attempt=len(attempts),
                    is_external=outcome.is_external,
                )
                return outcome

        error = ResolutionExhaustedError(
            raw_url=share.raw_url,
            identifier=share.identifier,
            attempts=attempts.failures,
        )
        log.warning(
            "resolve_exhausted",
            url=share.normalized_url[:120],
            identifier=share.identifier,
            attempts=len(attempts),
            last_reason=error.last_failure.describe() if error.last_failure else None,
        )
        raise error

    async def _try_strategy(
        self,
        strategy: ResolutionStrategyPort,
        share: ShareReference,
    ) -> ResolvedDescriptor | StrategyFailure:
        """Run one strategy, converting anything that escapes into a failure."""
        try:
            async with asyncio.timeout(self._strategy_timeout):
                outcome = await strategy.attempt(share)
        except TimeoutError:
            log.warning("strategy_timeout", strategy=strategy.name)
            return StrategyFailure(
                strategy=strategy.name,
                kind=FailureKind.NETWORK_FAILURE,
                reason=f"no result within {self._strategy_timeout:g}s",
            )
        except httpx.HTTPError as exc:
            log.warning("strategy_http_error", strategy=strategy.name, error=str(exc))
            return StrategyFailure(
                strategy=strategy.name,
                kind=FailureKind.NETWORK_FAILURE,
                reason=str(exc) or type(exc).__name__,
            )
        except Exception as exc:
            log.exception("strategy_error", strategy=strategy.name)
            return StrategyFailure(
                strategy=strategy.name,
                kind=FailureKind.SHAPE_MISMATCH,
                reason=f"{type(exc).__name__}: {exc}",
            )

        if isinstance(outcome, StrategyFailure):
            log.warning(
                "strategy_failed",
                strategy=strategy.name,
                kind=outcome.kind.value,
                reason=outcome.reason,
                status=outcome.status_code,
            )
        return outcome
