"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from teraplay.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "teraplay-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 10.0,
            "user_agent": "TestAgent/1.0",
        },
        "logging": {"level": "DEBUG", "format": "console"},
        "resolver": {
            "cors_relay_prefix": "https://relay.test/",
            "raw_relays": [{"name": "only", "prefix": "https://only.test/?url="}],
            "allow_external_fallback": True,
        },
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "teraplay"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 15.0
        assert config.verify_timeout_seconds == 8.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev → console

    def test_default_resolver_endpoints(self) -> None:
        resolver = load_config().resolver
        assert [r.name for r in resolver.raw_relays] == ["allorigins", "corsproxy", "codetabs"]
        assert [a.method for a in resolver.downloader_apis] == ["POST", "GET"]
        assert len(resolver.direct_url_templates) == 2
        assert resolver.allow_external_fallback is False
        assert resolver.strategy_timeout_seconds == 45.0

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "teraplay-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 10.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"

    def test_yaml_resolver_lists_replace_defaults(self, yaml_config: Path) -> None:
        resolver = load_config(config_path=yaml_config).resolver
        assert resolver.cors_relay_prefix == "https://relay.test/"
        assert [r.name for r in resolver.raw_relays] == ["only"]
        assert resolver.allow_external_fallback is True
        # untouched resolver keys keep their defaults
        assert len(resolver.downloader_apis) == 2

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_invalid_template_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            yaml.dump({"resolver": {"direct_url_templates": ["https://d.test/fixed"]}}),
            encoding="utf-8",
        )
        with pytest.raises(ValidationError):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TERAPLAY_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("TERAPLAY_HTTP_TIMEOUT_SECONDS", "60.0")
        monkeypatch.setenv("TERAPLAY_RESOLVER_ALLOW_EXTERNAL_FALLBACK", "false")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.http_timeout_seconds == 60.0
        assert config.resolver.allow_external_fallback is False
        # YAML values not overridden by ENV stay
        assert config.app_name == "teraplay-test"

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERAPLAY_ENVIRONMENT", "prod")
        monkeypatch.setenv("TERAPLAY_RESOLVER_STRATEGY_TIMEOUT_SECONDS", "12")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"  # prod → json
        assert config.resolver.strategy_timeout_seconds == 12.0

    def test_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TERAPLAY_APP_NAME", raising=False)
        dotenv = tmp_path / ".env"
        dotenv.write_text("TERAPLAY_APP_NAME=from-dotenv\n", encoding="utf-8")

        try:
            config = load_config(dotenv_path=dotenv)
        finally:
            os.environ.pop("TERAPLAY_APP_NAME", None)

        assert config.app_name == "from-dotenv"

    def test_missing_dotenv_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TERAPLAY_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR"},
        )
        assert config.log_level == "ERROR"

    def test_cli_overrides_with_sectioned_format(self, yaml_config: Path) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"http": {"timeout_seconds": 5.0}},
        )
        assert config.http_timeout_seconds == 5.0

    def test_cli_flat_resolver_key(self) -> None:
        config = load_config(cli_overrides={"resolver_allow_external_fallback": True})
        assert config.resolver.allow_external_fallback is True

    def test_sectioned_dump_round_trips_resolver(self) -> None:
        config = load_config()
        dumped = config.to_sectioned_dict()
        assert dumped["http"]["verify_timeout_seconds"] == 8.0
        assert dumped["resolver"]["share_page_template"] == config.resolver.share_page_template
