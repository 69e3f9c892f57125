"""Exception taxonomy for the curation engine."""

from __future__ import annotations

from typing import Any, Optional, Sequence


class CurationError(Exception):
    """Base class for every failure raised by the curation engine."""
    pass


class ProviderError(CurationError):
    """A catalog provider call failed (network, auth, rate limit, malformed payload).

    ``partial`` holds whatever the failing stage had already accumulated so the
    caller can decide whether to keep or discard it.
    """

    def __init__(self, action: str, cause: Optional[BaseException] = None,
                 partial: Optional[Sequence[Any]] = None):
        message = f"Catalog call failed during {action}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.action = action
        self.cause = cause
        self.partial = list(partial) if partial is not None else []


class InvalidArgument(CurationError, ValueError):
    """Out-of-range creativity level, non-positive target, unknown seed kind, ..."""
    pass


class InfeasiblePool(CurationError):
    """Selection could not reach the duration window within its attempt bound."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class ExpansionExhausted(CurationError):
    """Artist-graph expansion ran out of unused base artists before its target count."""

    def __init__(self, message: str, partial: Optional[Sequence[Any]] = None):
        super().__init__(message)
        self.partial = list(partial) if partial is not None else []


class PartialSubmissionFailure(CurationError):
    """The playlist exists but one or more append batches were rejected."""

    def __init__(self, submission):
        failed = sorted(submission.failed_batches)
        super().__init__(
            f"{len(failed)} of {len(submission.batches)} batches failed for playlist "
            f"{submission.playlist_id}: {failed}"
        )
        self.submission = submission


__all__ = [
    "CurationError",
    "ExpansionExhausted",
    "InfeasiblePool",
    "InvalidArgument",
    "PartialSubmissionFailure",
    "ProviderError",
]
