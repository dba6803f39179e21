"""Tests for share resolution domain entities."""

from __future__ import annotations

import dataclasses

import pytest

from teraplay.domain.entities.share import (
    DEFAULT_TITLE,
    AttemptLog,
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    SourceVariant,
    StrategyFailure,
)


class TestShareReference:
    def test_defaults(self) -> None:
        ref = ShareReference(raw_url="terabox.com/s/1x", normalized_url="https://terabox.com/s/1x")
        assert ref.variant == SourceVariant.PRIMARY
        assert ref.identifier is None

    def test_is_frozen(self, share: ShareReference) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            share.identifier = "other"  # type: ignore[misc]


class TestResolvedDescriptor:
    def test_defaults(self) -> None:
        d = ResolvedDescriptor(url="https://cdn.example.com/v.mp4")
        assert d.title == DEFAULT_TITLE == "Terabox Video"
        assert d.size == 0
        assert d.is_external is False
        assert d.thumbnail is None


class TestStrategyFailure:
    def test_describe_includes_status_and_endpoint(self) -> None:
        failure = StrategyFailure(
            strategy="mirrored_api",
            kind=FailureKind.UPSTREAM_REJECTED,
            reason="HTTP error! status: 403",
            endpoint="https://relay.example/https://www.terabox.com/api/url/info",
            status_code=403,
        )
        text = failure.describe()
        assert text.startswith("mirrored_api: HTTP error! status: 403")
        assert "status=403" in text
        assert "endpoint=https://relay.example/" in text

    def test_describe_minimal(self) -> None:
        failure = StrategyFailure(
            strategy="direct_url",
            kind=FailureKind.IDENTIFIER_MISSING,
            reason="Could not extract file ID from URL",
        )
        assert failure.describe() == "direct_url: Could not extract file ID from URL"


class TestAttemptLog:
    def test_empty(self) -> None:
        log = AttemptLog()
        assert len(log) == 0
        assert log.failures == []
        assert log.last_failure is None

    def test_records_in_order(self) -> None:
        first = StrategyFailure(strategy="a", kind=FailureKind.NETWORK_FAILURE, reason="x")
        second = StrategyFailure(strategy="b", kind=FailureKind.SHAPE_MISMATCH, reason="y")
        success = ResolvedDescriptor(url="https://cdn.example.com/v.mp4", strategy="c")

        log = AttemptLog()
        log.record(first)
        log.record(second)
        log.record(success)

        assert len(log) == 3
        assert list(log) == [first, second, success]
        assert log.failures == [first, second]
        assert log.last_failure is second


class TestEnums:
    def test_variant_values(self) -> None:
        assert SourceVariant("1024tera") is SourceVariant.MIRROR_1024TERA
        assert SourceVariant.MIRROR.value == "mirror"

    def test_failure_kind_is_str(self) -> None:
        assert FailureKind.VERIFICATION_FAILED == "verification_failed"
