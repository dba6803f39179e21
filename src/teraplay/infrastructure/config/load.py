from __future__ import annotations

from collections.abc import Iterator
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: tuple[str, ...] = ("http", "logging", "resolver")
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Scalar resolver knobs reachable through a flat ``resolver_<name>`` key
# (ENV vars, CLI flags).  Lists stay YAML-only.
_RESOLVER_SCALARS: tuple[str, ...] = (
    "cors_relay_prefix",
    "share_page_template",
    "strategy_timeout_seconds",
    "allow_external_fallback",
    "enforce_content_type",
)

_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "verify_timeout_seconds": ("http", "verify_timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    **{f"resolver_{name}": ("resolver", name) for name in _RESOLVER_SCALARS},
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Merge *layer* into *target* in place; nested mappings merge, anything else replaces."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value


def _sectioned(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer into the sectioned shape ``AppConfig`` validates.

    Accepts sectioned blocks (``resolver: {...}``) and flat keys
    (``resolver_allow_external_fallback``); flat keys win inside a layer.
    """
    out: dict[str, Any] = {
        key: data[key] for key in _TOP_LEVEL if key in data
    }
    for section in _SECTIONS:
        block = data.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat_key, (section, key) in _FLAT_KEYS.items():
        if flat_key in data:
            out.setdefault(section, {})[key] = data[flat_key]
    return out


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, cli_overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    """Yield raw layers lowest precedence first."""
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _yaml_layer(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated ``AppConfig``.

    Precedence: defaults < YAML file < TERAPLAY_* env vars < cli overrides.
    A ``.env`` file is loaded into the environment first (existing
    variables win) so it counts as part of the env layer.  Reads the
    given files only; never creates anything on disk.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _merge_into(merged, _sectioned(layer))

    return AppConfig.model_validate(merged)
