"""DateFetcher — GET the configured endpoint and turn the body into a FetchResult.

The endpoint is expected to answer with a single RFC 3339 internet
date-time (``2025-06-01T12:00:00Z``, ``2025-06-01T12:00:00+09:00``),
possibly wrapped in whitespace, newlines or control characters.

:meth:`DateFetcher.fetch` blocks on the network; the engine runs it in a
worker thread.  Nothing in this module retries.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime, timezone

import requests

from countdown.core.http import get_bytes, summarize_error, validate_fetch_url
from countdown.core.models.state import FetchResult, FetchSuccess, NetworkFailure, ParseFailure
from countdown.logging import ContextualLogger, get_logger

_log = get_logger(__name__)

_NEWLINES = frozenset("\n\r\v\f\x1c\x1d\x1e\x85\u2028\u2029")

# Full date, "T", full time without fraction, then a mandatory offset.
_INTERNET_DATETIME = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})T(?P<time>[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?P<offset>Z|[+-][0-9]{2}:[0-9]{2})"
)


def normalize_text(text: str) -> str:
    """Drop newlines and control characters, then trim whitespace.

    Characters are removed rather than replaced, so a newline in the middle
    of the value joins the two halves.
    """
    kept = []
    for ch in text:
        if ch in _NEWLINES:
            continue
        if unicodedata.category(ch) in ("Cc", "Cf"):
            continue
        kept.append(ch)
    return "".join(kept).strip()


def parse_internet_datetime(text: str) -> datetime:
    """Parse an RFC 3339 date-time with a required zone designator.

    Returns:
        An aware :class:`datetime` converted to UTC.

    Raises:
        ValueError: If *text* lacks a designator, has fractional seconds, or
            names an impossible date/time.
    """
    match = _INTERNET_DATETIME.fullmatch(text)
    if match is None:
        raise ValueError(f"Not an RFC 3339 date-time: {text!r}")
    offset = match.group("offset")
    if offset == "Z":
        offset = "+00:00"
    parsed = datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}{offset}")
    return parsed.astimezone(timezone.utc)


def decode_body(body: bytes) -> FetchResult:
    """Turn a raw response body into a :data:`FetchResult` (no network)."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        return NetworkFailure(reason=summarize_error(exc))

    normalized = normalize_text(text)
    try:
        instant = parse_internet_datetime(normalized)
    except ValueError:
        return ParseFailure(raw_text=normalized)
    return FetchSuccess(target_instant=instant, raw_text=normalized)


class DateFetcher:
    """Fetches the countdown target from a single URL.

    Args:
        url: Endpoint to GET.  Validated immediately.
        timeout: Per-request timeout in seconds; ``None`` keeps the
            transport default.

    Raises:
        ConfigurationError: If *url* is malformed or not http(s).
    """

    def __init__(self, url: str, timeout: float | None = None) -> None:
        self._url = validate_fetch_url(url)
        self._timeout = timeout
        self._log = ContextualLogger(_log, url=self._url)

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> FetchResult:
        """GET the URL and return the parsed result.  Never raises."""
        self._log.debug("Fetching target date")
        try:
            body = get_bytes(self._url, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            reason = summarize_error(exc)
            self._log.warning("Fetch failed: %s", reason)
            return NetworkFailure(reason=reason)

        result = decode_body(body)
        if isinstance(result, ParseFailure):
            self._log.warning("Failed to parse cleaned date string %r", result.raw_text)
        elif isinstance(result, NetworkFailure):
            self._log.warning("Fetch failed: %s", result.reason)
        else:
            self._log.info("Cleaned date string %r", result.raw_text)
        return result
