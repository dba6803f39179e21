"""Share resolution exceptions."""

from __future__ import annotations

from teraplay.domain.entities.share import FailureKind, StrategyFailure

_MSG_UNSUPPORTED = (
    "Please enter a valid Terabox URL, e.g. https://terabox.com/s/1abc123def"
)
_MSG_NETWORK = (
    "Network error: Unable to access Terabox. "
    "Please try again or use a different URL."
)
_MSG_NOT_FOUND = (
    "Video not found. Please check if the URL is correct "
    "and the file is still available."
)
_MSG_PRIVATE = (
    "This video appears to be private or requires authentication. "
    "Please try a public URL."
)
_MSG_EXTRACTION = "Failed to extract video URL. Please try again."


class TeraplayError(Exception):
    """Base class for all resolution errors."""


class ShareLinkRejectedError(TeraplayError):
    """Raised when the URL classifier declines the input string."""

    def __init__(self, raw_url: str) -> None:
        super().__init__(f"Unsupported share link: {raw_url!r}")
        self.raw_url = raw_url


class ResolutionExhaustedError(TeraplayError):
    """Raised when every configured strategy failed for one share link."""

    def __init__(
        self,
        raw_url: str,
        identifier: str | None,
        attempts: list[StrategyFailure],
    ) -> None:
        self.raw_url = raw_url
        self.identifier = identifier
        self.attempts = list(attempts)
        last = self.last_failure
        reason = last.describe() if last else "no strategies configured"
        super().__init__(
            f"All extraction strategies failed for {raw_url!r} "
            f"(identifier={identifier!r}): {reason}"
        )

    @property
    def last_failure(self) -> StrategyFailure | None:
        return self.attempts[-1] if self.attempts else None


def user_message(error: TeraplayError) -> str:
    """Map an error to a single human-readable message.

    Per-strategy detail stays in the logs; only the category of the
    last underlying failure decides the wording.
    """
    if isinstance(error, ShareLinkRejectedError):
        return _MSG_UNSUPPORTED
    if not isinstance(error, ResolutionExhaustedError):
        return _MSG_EXTRACTION

    last = error.last_failure
    if last is None:
        return _MSG_EXTRACTION
    if last.status_code == 404:
        return _MSG_NOT_FOUND
    if last.status_code in (401, 403):
        return _MSG_PRIVATE
    if last.kind == FailureKind.NETWORK_FAILURE:
        return _MSG_NETWORK
    if last.kind == FailureKind.VERIFICATION_FAILED:
        return _MSG_NOT_FOUND
    return _MSG_EXTRACTION
