"""Port for the surface that plays (or links to) a resolved resource."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from teraplay.domain.entities.share import ResolvedDescriptor


@runtime_checkable
class PlaybackSurfacePort(Protocol):
    """Receives resolved descriptors and failure messages.

    ``descriptor.is_external`` tells the surface to present an outbound
    link instead of attempting inline playback.
    """

    def load(self, descriptor: ResolvedDescriptor) -> None: ...

    def show_error(self, message: str) -> None: ...
