"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "teraplay",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "verify_timeout_seconds": 8.0,
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/131.0.0.0 Safari/537.36"
        ),
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "resolver": {
        "cors_relay_prefix": "https://cors-anywhere.herokuapp.com/",
        "raw_relays": [
            {"name": "allorigins", "prefix": "https://api.allorigins.win/raw?url="},
            {"name": "corsproxy", "prefix": "https://corsproxy.io/?url="},
            {"name": "codetabs", "prefix": "https://api.codetabs.com/v1/proxy?quest="},
        ],
        "downloader_apis": [
            {
                "name": "teradownloader",
                "endpoint": "https://teradownloader.com/api/application/teraboxdl",
                "method": "POST",
            },
            {
                "name": "terabox_dl",
                "endpoint": "https://terabox-dl.qtcloud.workers.dev/api/get-info?url={url}",
                "method": "GET",
            },
        ],
        "direct_url_templates": [
            "https://d.terabox.com/file/d/{identifier}",
            "https://d.terabox.com/file/d/{surl}",
        ],
        "share_page_template": "https://www.terabox.com/sharing/link?surl={surl}",
        "strategy_timeout_seconds": 45.0,
        "allow_external_fallback": False,
        "enforce_content_type": True,
    },
}
