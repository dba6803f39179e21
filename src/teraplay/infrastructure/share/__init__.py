"""Share link classification and identifier extraction."""

from __future__ import annotations

from .classifier import (
    ClassificationResult,
    build_share_reference,
    classify_share_url,
    is_supported_share_url,
    normalize_url,
)
from .identifier import (
    IDENTIFIER_PATTERNS,
    extract_share_identifier,
    match_share_identifier,
    share_surl,
)

__all__ = [
    "IDENTIFIER_PATTERNS",
    "ClassificationResult",
    "build_share_reference",
    "classify_share_url",
    "extract_share_identifier",
    "is_supported_share_url",
    "match_share_identifier",
    "normalize_url",
    "share_surl",
]
