from __future__ import annotations

from .load import load_config
from .schema import AppConfig, DownloaderApi, EnvOverrides, RelayEndpoint, ResolverConfig

__all__ = [
    "AppConfig",
    "DownloaderApi",
    "EnvOverrides",
    "RelayEndpoint",
    "ResolverConfig",
    "load_config",
]
