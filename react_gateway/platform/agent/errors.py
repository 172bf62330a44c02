"""Provider failure classification.

Classifiers map an exception raised by a provider call to an ``ErrorKind``.
Structured signals (litellm exception types, HTTP status codes, provider error
codes) are consulted first; matching on error message text is only a fallback
for providers that surface nothing better.
"""

from collections.abc import Iterator, Sequence
from enum import StrEnum
from typing import Any, Protocol

from litellm.exceptions import ContentPolicyViolationError, RateLimitError


class ErrorKind(StrEnum):
    """How a failed provider call should be handled."""

    CONTENT_SAFETY_REJECTION = "content_safety_rejection"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class CompletionError(RuntimeError):
    """A provider failure that could not be recovered locally.

    The original exception is available as ``__cause__``.

    Attributes:
        kind: Classification of the final failure
        attempts: Number of provider attempts made
    """

    def __init__(self, message: str, kind: ErrorKind, attempts: int):
        super().__init__(message)
        self.kind = kind
        self.attempts = attempts


class ErrorClassifier(Protocol):
    """Protocol for failure classifiers.

    Returns None when the classifier has no opinion, so that classifiers can
    be chained.
    """

    def classify(self, error: BaseException) -> ErrorKind | None: ...


RATE_LIMIT_STATUS_CODES = frozenset({429})

CONTENT_SAFETY_CODES = frozenset({"datainspectionfailed", "content_filter", "content_policy_violation"})
RATE_LIMIT_CODES = frozenset({"throttling", "rate_limit_exceeded", "too_many_requests"})

CONTENT_SAFETY_MARKERS = (
    "datainspectionfailed",
    "inappropriate content",
    "content_filter",
    "content policy",
)
RATE_LIMIT_MARKERS = (
    "request rate increased too quickly",
    "throttling",
    "rate limit",
    "429",
    "too many requests",
)


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield the error followed by its causes/contexts, without cycles."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code(error: BaseException) -> int | None:
    for attr in ("status_code", "status", "http_status"):
        code = getattr(error, attr, None)
        if code is not None:
            try:
                return int(code)
            except (ValueError, TypeError):
                pass

    response = getattr(error, "response", None)
    if response is not None:
        for attr in ("status_code", "status"):
            code = getattr(response, attr, None)
            if code is not None:
                try:
                    return int(code)
                except (ValueError, TypeError):
                    pass
    return None


def _error_codes(error: BaseException) -> Iterator[str]:
    code = getattr(error, "code", None)
    if isinstance(code, str):
        yield code.lower()

    # OpenAI-compatible bodies nest the code under "error"; DashScope puts it at the top.
    body: Any = getattr(error, "body", None)
    if not isinstance(body, dict):
        return
    nested = body.get("error")
    for candidate in (body.get("code"), nested.get("code") if isinstance(nested, dict) else None):
        if isinstance(candidate, str):
            yield candidate.lower()


class StructuredErrorClassifier:
    """Classifies from exception types, status codes and provider error codes."""

    def classify(self, error: BaseException) -> ErrorKind | None:
        for current in _error_chain(error):
            if isinstance(current, ContentPolicyViolationError):
                return ErrorKind.CONTENT_SAFETY_REJECTION
            if isinstance(current, RateLimitError):
                return ErrorKind.RATE_LIMITED

            codes = set(_error_codes(current))
            if codes & CONTENT_SAFETY_CODES:
                return ErrorKind.CONTENT_SAFETY_REJECTION
            if codes & RATE_LIMIT_CODES:
                return ErrorKind.RATE_LIMITED

            if _status_code(current) in RATE_LIMIT_STATUS_CODES:
                return ErrorKind.RATE_LIMITED
        return None


class MessageErrorClassifier:
    """Fallback classifier matching known provider wording in error messages."""

    def __init__(
        self,
        content_safety_markers: Sequence[str] = CONTENT_SAFETY_MARKERS,
        rate_limit_markers: Sequence[str] = RATE_LIMIT_MARKERS,
    ):
        self._content_safety_markers = tuple(m.lower() for m in content_safety_markers)
        self._rate_limit_markers = tuple(m.lower() for m in rate_limit_markers)

    def classify(self, error: BaseException) -> ErrorKind | None:
        text = " | ".join(str(current) for current in _error_chain(error)).lower()
        if any(marker in text for marker in self._content_safety_markers):
            return ErrorKind.CONTENT_SAFETY_REJECTION
        if any(marker in text for marker in self._rate_limit_markers):
            return ErrorKind.RATE_LIMITED
        return None


class ChainedErrorClassifier:
    """Consults classifiers in order; the first opinion wins, OTHER otherwise."""

    def __init__(self, classifiers: Sequence[ErrorClassifier]):
        self._classifiers = tuple(classifiers)

    def classify(self, error: BaseException) -> ErrorKind:
        for classifier in self._classifiers:
            kind = classifier.classify(error)
            if kind is not None:
                return kind
        return ErrorKind.OTHER


default_classifier = ChainedErrorClassifier([StructuredErrorClassifier(), MessageErrorClassifier()])


def classify_error(error: BaseException) -> ErrorKind:
    """Classify a provider failure with the default classifier chain."""
    return default_classifier.classify(error)
