from .playback_session import PlaybackSession
from .resolve_share import ResolveShareUseCase

__all__ = ["PlaybackSession", "ResolveShareUseCase"]
