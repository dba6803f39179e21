from .playback import PlaybackSurfacePort
from .strategy import ResolutionStrategyPort

__all__ = [
    "PlaybackSurfacePort",
    "ResolutionStrategyPort",
]
