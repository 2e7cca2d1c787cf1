"""Failure taxonomy for recipe extraction."""

import asyncio
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

import httpx

from recipe_harvester.app.services.url_parsing.models import FetchAttempt


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    ALL_PROXIES_FAILED = "all_proxies_failed"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    NO_STRUCTURED_DATA = "no_structured_data"
    TITLE_NOT_FOUND = "title_not_found"
    INGREDIENTS_NOT_FOUND = "ingredients_not_found"
    INSTRUCTIONS_NOT_FOUND = "instructions_not_found"
    INCOMPLETE_RESULT = "incomplete_result"
    UNKNOWN = "unknown"


_MANUAL_ENTRY = "Try entering the recipe manually or use a different URL."

# kind -> (message, suggestion, retryable)
ERROR_DETAILS = {
    ErrorKind.INVALID_INPUT: (
        "The recipe URL is missing or malformed.",
        "Enter a full http:// or https:// link to a recipe page.",
        False,
    ),
    ErrorKind.ALL_PROXIES_FAILED: (
        "Unable to access the recipe page. The website may be blocking automated requests.",
        "Check your internet connection and try again later.",
        True,
    ),
    ErrorKind.TIMEOUT: (
        "Request timed out while fetching the recipe page.",
        "Please try again.",
        True,
    ),
    ErrorKind.RATE_LIMITED: (
        "Too many requests to the recipe website.",
        "Please wait a moment and try again.",
        True,
    ),
    ErrorKind.NO_STRUCTURED_DATA: (
        "This website doesn't appear to have structured recipe data that we can import.",
        _MANUAL_ENTRY,
        False,
    ),
    ErrorKind.TITLE_NOT_FOUND: (
        "This doesn't appear to be a valid recipe page: no recipe title was found.",
        _MANUAL_ENTRY,
        False,
    ),
    ErrorKind.INGREDIENTS_NOT_FOUND: (
        "Recipe ingredients were not found on this page.",
        _MANUAL_ENTRY,
        False,
    ),
    ErrorKind.INSTRUCTIONS_NOT_FOUND: (
        "Recipe instructions were not found on this page.",
        _MANUAL_ENTRY,
        False,
    ),
    ErrorKind.INCOMPLETE_RESULT: (
        "The recipe page is missing required information.",
        "Try importing from a different page or add the missing information manually.",
        False,
    ),
    ErrorKind.UNKNOWN: (
        "Unable to import recipe from this URL.",
        _MANUAL_ENTRY,
        False,
    ),
}

# Lower-cased phrases used to classify errors that carry no kind of their own.
# Order matters: the first matching phrase wins.
KNOWN_ERROR_PHRASES = [
    ("all proxy services failed", ErrorKind.ALL_PROXIES_FAILED),
    ("timed out", ErrorKind.TIMEOUT),
    ("timeout", ErrorKind.TIMEOUT),
    ("rate limit", ErrorKind.RATE_LIMITED),
    ("no recipe data found", ErrorKind.NO_STRUCTURED_DATA),
    ("recipe title not found", ErrorKind.TITLE_NOT_FOUND),
    ("recipe ingredients not found", ErrorKind.INGREDIENTS_NOT_FOUND),
    ("recipe instructions not found", ErrorKind.INSTRUCTIONS_NOT_FOUND),
    ("incomplete recipe data", ErrorKind.INCOMPLETE_RESULT),
]


class FetchError(Exception):
    """Raised by the proxy fetcher when no route produced usable content."""

    def __init__(self, kind: ErrorKind, message: str, attempts: Sequence[FetchAttempt] = ()):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.attempts = list(attempts)


class ExtractionError(Exception):
    """A classified extraction failure surfaced to callers."""

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        detail: Union[str, List[dict], None] = None,
        attempts: Iterable[FetchAttempt] = (),
    ):
        default_message, suggestion, retryable = ERROR_DETAILS[kind]
        self.kind = kind
        self.message = message or default_message
        self.suggestion = suggestion
        self.retryable = retryable
        self.detail = detail
        self.attempts = list(attempts)
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error_code": self.kind.value,
            "message": self.message,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "details": self.detail,
        }


def classify_error(exc: BaseException) -> ExtractionError:
    """Map any failure raised during extraction onto the error taxonomy."""
    if isinstance(exc, ExtractionError):
        return exc
    if isinstance(exc, FetchError):
        return ExtractionError(exc.kind, detail=exc.message, attempts=exc.attempts)
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return ExtractionError(ErrorKind.TIMEOUT, detail=str(exc) or type(exc).__name__)

    text = str(exc)
    lowered = text.lower()
    for phrase, kind in KNOWN_ERROR_PHRASES:
        if phrase in lowered:
            return ExtractionError(kind, detail=text)
    return ExtractionError(ErrorKind.UNKNOWN, detail=text or type(exc).__name__)
