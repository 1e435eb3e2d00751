"""HTTP helpers for the date fetcher.

URL validation reuses ``requests``' own URL preparation so that anything
accepted here is something :func:`requests.get` can actually send.  Error
summaries turn raw ``requests`` exceptions into short, log-friendly text.
"""

from __future__ import annotations

import requests

from countdown.core.errors import ConfigurationError

_ALLOWED_SCHEMES = ("http", "https")


def validate_fetch_url(url: str) -> str:
    """Return the stripped *url* or raise :class:`ConfigurationError`.

    The URL must be absolute, use ``http`` or ``https`` and name a host.
    """
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError("Fetch URL must not be empty")
    candidate = url.strip()

    prepared = requests.models.PreparedRequest()
    try:
        prepared.prepare_url(candidate, None)
    except requests.exceptions.RequestException as exc:
        raise ConfigurationError(f"Malformed fetch URL {candidate!r}: {exc}") from exc

    scheme = candidate.split(":", 1)[0].lower()
    if scheme not in _ALLOWED_SCHEMES:
        raise ConfigurationError(
            f"Unsupported URL scheme {scheme!r} (expected http or https)"
        )
    return candidate


def summarize_error(err: Exception, max_len: int = 60) -> str:
    """Return a concise human-readable summary for a network exception."""
    if isinstance(err, requests.exceptions.ConnectTimeout):
        msg = "Connect timeout"
    elif isinstance(err, requests.exceptions.ReadTimeout):
        msg = "Read timeout"
    elif isinstance(err, requests.exceptions.Timeout):
        msg = "Timeout"
    elif isinstance(err, requests.exceptions.SSLError):
        msg = "TLS/SSL error"
    elif isinstance(err, requests.exceptions.TooManyRedirects):
        msg = "Too many redirects"
    elif isinstance(err, requests.exceptions.HTTPError):
        resp = getattr(err, "response", None)
        if resp is not None:
            reason = getattr(resp, "reason", "") or ""
            msg = f"HTTP {resp.status_code} {reason}".strip()
        else:
            msg = "HTTP error"
    elif isinstance(err, requests.exceptions.ConnectionError):
        raw = str(err)
        if "Name or service not known" in raw or "Temporary failure" in raw:
            msg = "DNS failure"
        elif "Connection refused" in raw:
            msg = "Connection refused"
        elif "Failed to establish" in raw or "NewConnectionError" in raw:
            msg = "Connection failed"
        else:
            msg = "Connection error"
    elif isinstance(err, UnicodeDecodeError):
        msg = "Body is not valid UTF-8"
    else:
        msg = str(err) or err.__class__.__name__

    if len(msg) > max_len:
        msg = msg[: max_len - 3] + "..."
    return msg


def get_bytes(url: str, *, timeout: float | None = None) -> bytes:
    """GET *url* and return the raw response body.

    No headers beyond the ``requests`` defaults are sent.  HTTP error
    statuses raise :class:`requests.exceptions.HTTPError`.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content
