"""
Bearer token cache for the Airwallex API.

Airwallex issues short-lived bearer tokens from its login endpoint. The
TokenCache owns the single cached token for one set of credentials and
refreshes it on demand.

Concurrency:
    Readers take a lock-free fast path: the current entry is an immutable
    CachedToken, so reading the reference never observes a half-written
    value. On a miss, a single lock wraps re-check, fetch and store so
    concurrent callers against an expired cache trigger exactly one login.

Usage:
    from payments.adapters import AirwallexClient, TokenCache

    client = AirwallexClient(client_id="...", api_key="...")
    cache = TokenCache(fetch=client.login)
    token = cache.get_token()
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from django.utils import timezone

from payments.exceptions import ExpiryFormatError

if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

# Airwallex emits "+0000"; fromisoformat() wants "+00:00"
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_expiry(raw_expiry: str) -> datetime:
    """
    Parse an Airwallex ``expires_at`` timestamp.

    Args:
        raw_expiry: Timestamp such as "2024-01-01T00:30:00+0000"

    Returns:
        Timezone-aware datetime

    Raises:
        ExpiryFormatError: Value is not an ISO 8601 timestamp with an offset

    Example:
        >>> parse_expiry("2024-01-01T00:00:00+0000") == parse_expiry(
        ...     "2024-01-01T00:00:00+00:00"
        ... )
        True
    """
    value = raw_expiry.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    value = _COMPACT_OFFSET.sub(r"\1:\2", value)

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ExpiryFormatError(
            f"Failed to parse expires_at {raw_expiry!r}",
            details={"expires_at": raw_expiry},
        ) from e

    if parsed.tzinfo is None:
        raise ExpiryFormatError(
            f"expires_at {raw_expiry!r} has no UTC offset",
            details={"expires_at": raw_expiry},
        )

    return parsed


@dataclass(frozen=True)
class CachedToken:
    """
    A bearer token and its expiry.

    Attributes:
        token: Bearer token string
        raw_expiry: expires_at exactly as Airwallex sent it
        expires_at: Parsed expiry, derived from raw_expiry at fetch time
    """

    token: str
    raw_expiry: str
    expires_at: datetime

    @classmethod
    def from_login(cls, token: str, raw_expiry: str) -> CachedToken:
        """Build an entry from a login response, parsing the expiry."""
        return cls(token=token, raw_expiry=raw_expiry, expires_at=parse_expiry(raw_expiry))

    def is_valid(self, now: datetime) -> bool:
        """Return True while now is strictly before the expiry."""
        return now < self.expires_at


class TokenCache:
    """
    Thread-safe cache holding a single Airwallex bearer token.

    Args:
        fetch: Callable performing the login round trip. Returns
            (token, raw_expiry) and raises AirwallexAuthError on failure.
        clock: Returns the current aware datetime (default: timezone.now)

    The cache is the sole writer of its entry; entries are replaced
    wholesale, never mutated.
    """

    def __init__(
        self,
        fetch: Callable[[], tuple[str, str]],
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._fetch = fetch
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: CachedToken | None = None

    @property
    def entry(self) -> CachedToken | None:
        """The current cached entry, if any."""
        return self._entry

    def get_token(self) -> str:
        """
        Return a valid bearer token, logging in if needed.

        Returns:
            Bearer token string

        Raises:
            AirwallexAuthError: Login failed or returned an unusable token
            ExpiryFormatError: expires_at could not be parsed
        """
        entry = self._entry
        if entry is not None and entry.is_valid(self._clock()):
            return entry.token

        with self._lock:
            # Another thread may have refreshed while we waited
            entry = self._entry
            if entry is not None and entry.is_valid(self._clock()):
                return entry.token

            logger.info(
                "Refreshing Airwallex access token",
                extra={"had_token": entry is not None},
            )
            token, raw_expiry = self._fetch()
            entry = CachedToken.from_login(token, raw_expiry)
            self._entry = entry

            logger.info(
                "Airwallex access token refreshed",
                extra={"expires_at": entry.expires_at.isoformat()},
            )
            return entry.token

    def invalidate(self, token: str) -> bool:
        """
        Discard the cached token if it is the one that was rejected.

        A rejection reported for a token that has since been replaced
        leaves the newer entry alone.

        Args:
            token: The bearer token the gateway rejected

        Returns:
            True if the cached entry was discarded
        """
        with self._lock:
            if self._entry is None or self._entry.token != token:
                return False
            self._entry = None
            return True


__all__ = [
    "CachedToken",
    "TokenCache",
    "parse_expiry",
]
