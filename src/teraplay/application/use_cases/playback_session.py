"""Latest-wins delivery of resolution results to a playback surface."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import suppress

import structlog

from teraplay.domain.entities.share import ResolvedDescriptor
from teraplay.domain.exceptions import TeraplayError, user_message
from teraplay.domain.ports.playback import PlaybackSurfacePort

log = structlog.get_logger(__name__)


class PlaybackSession:
    """Feeds one playback surface from successive ``submit()`` calls.

    Every submit bumps a generation counter and cancels the previous
    in-flight task.  A result (or error) is delivered only while its
    generation is still the current one, so a slow earlier resolution
    can never overwrite a later one, even if it ignores cancellation.
    """

    def __init__(
        self,
        resolve: Callable[[str], Awaitable[ResolvedDescriptor]],
        surface: PlaybackSurfacePort,
    ) -> None:
        self._resolve = resolve
        self._surface = surface
        self._generation = 0
        self._task: asyncio.Task[ResolvedDescriptor | None] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_task(self) -> asyncio.Task[ResolvedDescriptor | None] | None:
        return self._task

    def submit(self, raw_url: str) -> asyncio.Task[ResolvedDescriptor | None]:
        """Start resolving *raw_url*, superseding any earlier submission.

        Must be called from within a running event loop.
        """
        previous = self._task
        if previous is not None and not previous.done():
            previous.cancel()
            log.debug("playback_superseded", generation=self._generation)

        self._generation += 1
        self._task = asyncio.create_task(self._run(raw_url, self._generation))
        return self._task

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(
        self, raw_url: str, generation: int
    ) -> ResolvedDescriptor | None:
        try:
            descriptor = await self._resolve(raw_url)
        except TeraplayError as exc:
            if self._is_current(generation):
                self._surface.show_error(user_message(exc))
            return None
        except asyncio.CancelledError:
            log.debug("playback_cancelled", generation=generation)
            raise
        except Exception as exc:
            log.exception("playback_resolve_error", generation=generation)
            if self._is_current(generation):
                self._surface.show_error(user_message(TeraplayError(str(exc))))
            return None

        if not self._is_current(generation):
            log.info(
                "playback_result_discarded",
                generation=generation,
                current=self._generation,
            )
            return None

        self._surface.load(descriptor)
        log.info(
            "playback_loaded",
            generation=generation,
            strategy=descriptor.strategy,
            is_external=descriptor.is_external,
        )
        return descriptor

    async def wait(self) -> ResolvedDescriptor | None:
        """Await the latest submission; ``None`` if it failed or was cancelled."""
        task = self._task
        if task is None:
            return None
        with suppress(asyncio.CancelledError):
            return await task
        return None

    async def aclose(self) -> None:
        """Cancel the in-flight submission, if any."""
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._task = None
