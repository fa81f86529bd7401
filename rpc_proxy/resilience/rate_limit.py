"""Rate-limit classification for failed upstream responses.

An upstream failure counts as a rate limit when its HTTP status is one of the
configured codes (429 by default), or when the JSON error object in its body
carries a message containing one of the configured markers. Providers differ
in how they signal throttling: some answer 429, others answer a generic error
status with a message such as "compute units per second capacity exceeded".
"""

from __future__ import annotations

import json
from typing import Any, Iterable

DEFAULT_STATUS_CODES = frozenset({429})
DEFAULT_MARKERS = ("exceeded", "rate limit", "too many requests")


def extract_error_message(body: Any) -> str:
    """Return ``body["error"]["message"]`` when present, else an empty string.

    ``body`` may be raw bytes/str (decoded as JSON) or an already parsed value.
    """
    if isinstance(body, (bytes, bytearray, str)):
        try:
            body = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return ""

    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if not isinstance(error, dict):
        return ""
    message = error.get("message")
    return message if isinstance(message, str) else ""


class RateLimitClassifier:
    """Predicate deciding whether a failed upstream response is a rate limit.

    Parameters
    ----------
    status_codes:
        HTTP statuses that always mean "rate limited".
    markers:
        Substrings searched for in the upstream error message.
    case_sensitive:
        Whether marker matching is case-sensitive (default True).
    """

    def __init__(
        self,
        status_codes: Iterable[int] = DEFAULT_STATUS_CODES,
        markers: Iterable[str] = DEFAULT_MARKERS,
        case_sensitive: bool = True,
    ) -> None:
        self._status_codes = frozenset(status_codes)
        self._case_sensitive = case_sensitive
        self._markers = tuple(
            m if case_sensitive else m.lower() for m in markers if m
        )

    def is_rate_limited(self, status_code: int, body: Any) -> bool:
        """Classify one failed response by status and error message."""
        if status_code in self._status_codes:
            return True

        message = extract_error_message(body)
        if not message:
            return False
        if not self._case_sensitive:
            message = message.lower()
        return any(marker in message for marker in self._markers)
