from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO

import structlog
import uvicorn

from teraplay.application.use_cases import PlaybackSession, ResolveShareUseCase
from teraplay.domain.entities.share import ResolvedDescriptor
from teraplay.infrastructure.common.formatting import describe_descriptor
from teraplay.infrastructure.config import AppConfig, load_config
from teraplay.infrastructure.logging.setup import configure_logging
from teraplay.infrastructure.share import build_share_reference
from teraplay.infrastructure.strategies import RelayHint, build_orchestrator
from teraplay.interfaces.app import create_app
from teraplay.interfaces.composition import create_http_client

log = structlog.get_logger(__name__)


class ConsolePlaybackSurface:
    """Playback surface that prints the descriptor instead of playing it."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self.loaded: ResolvedDescriptor | None = None
        self.error: str | None = None

    def load(self, descriptor: ResolvedDescriptor) -> None:
        self.loaded = descriptor
        self.error = None
        print(descriptor.title, file=self._out)
        print(describe_descriptor(descriptor), file=self._out)
        print(descriptor.url, file=self._out)

    def show_error(self, message: str) -> None:
        self.error = message
        print(f"Error: {message}", file=self._err)


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="teraplay")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )
    _add_config_flags(serve)

    resolve = sub.add_parser(
        "resolve",
        help="Resolve share links; only the last one is played.",
    )
    resolve.add_argument("urls", nargs="+", metavar="URL")
    resolve.add_argument(
        "--allow-external",
        action="store_true",
        help="Fall back to the share page as an external link.",
    )
    _add_config_flags(resolve)

    return parser.parse_args(list(argv) if argv is not None else None)


def _load(args: argparse.Namespace) -> AppConfig:
    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if getattr(args, "allow_external", False):
        cli_overrides["resolver_allow_external_fallback"] = True

    return load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=cli_overrides,
    )


async def run_resolve(
    config: AppConfig,
    urls: list[str],
    surface: ConsolePlaybackSurface,
) -> int:
    """Submit *urls* back to back; the last submission wins."""
    async with create_http_client(config) as http_client:
        orchestrator = build_orchestrator(
            http_client,
            config.resolver,
            http_timeout=config.http_timeout_seconds,
            verify_timeout=config.verify_timeout_seconds,
            html_hint=RelayHint(),
            api_hint=RelayHint(),
        )
        use_case = ResolveShareUseCase(
            build_reference=build_share_reference,
            resolve_fn=orchestrator.resolve,
        )
        session = PlaybackSession(use_case.execute, surface)
        for url in urls:
            session.submit(url)
        descriptor = await session.wait()

    return 0 if descriptor is not None else 1


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, then either serves the API or resolves links.
    """
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    config = _load(args)

    if args.command == "resolve":
        # stdout carries the resolved descriptor
        configure_logging(config, info_stream=sys.stderr)
        return asyncio.run(run_resolve(config, args.urls, ConsolePlaybackSurface()))

    log_config = configure_logging(config)

    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "8080"))
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
