"""
Tests for the Airwallex token cache.

Tests cover:
- expires_at parsing, including compact UTC offsets
- Cache hits and refresh on expiry
- Invalidation
- Exactly one login under concurrent callers
- Error propagation from the fetcher
"""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from payments.adapters import CachedToken, TokenCache, parse_expiry
from payments.exceptions import AirwallexAuthError, ExpiryFormatError


class CountingFetcher:
    """Login stand-in that hands out numbered tokens."""

    def __init__(self, expires_at="2024-01-01T00:30:00+0000", delay=0.0):
        self.calls = 0
        self.expires_at = expires_at
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
            call_number = self.calls
        if self.delay:
            time.sleep(self.delay)
        return f"tok_{call_number}", self.expires_at


# =============================================================================
# parse_expiry Tests
# =============================================================================


class TestParseExpiry:
    """Tests for parse_expiry()."""

    def test_compact_offset_equals_colon_offset(self):
        """+0000 and +00:00 should denote the same instant."""
        assert parse_expiry("2024-01-01T00:00:00+0000") == parse_expiry(
            "2024-01-01T00:00:00+00:00"
        )

    def test_zulu_suffix(self):
        """A trailing Z should be read as UTC."""
        assert parse_expiry("2024-01-01T00:00:00Z") == datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    def test_non_utc_compact_offset(self):
        """Compact non-zero offsets should be honoured."""
        parsed = parse_expiry("2024-01-01T08:00:00+0800")

        assert parsed == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        """Fractional seconds should parse."""
        parsed = parse_expiry("2024-01-01T00:00:00.123+0000")

        assert parsed.microsecond == 123000

    @pytest.mark.parametrize(
        "raw",
        ["", "tomorrow", "2024-13-01T00:00:00+0000", "2024-01-01 25:00"],
    )
    def test_malformed_value(self, raw):
        """Malformed timestamps should raise ExpiryFormatError."""
        with pytest.raises(ExpiryFormatError):
            parse_expiry(raw)

    def test_missing_offset(self):
        """Naive timestamps should be rejected."""
        with pytest.raises(ExpiryFormatError, match="no UTC offset"):
            parse_expiry("2024-01-01T00:00:00")

    def test_expiry_format_error_is_auth_error(self):
        """Parse failures surface as authentication failures."""
        with pytest.raises(AirwallexAuthError):
            parse_expiry("not-a-date")


# =============================================================================
# CachedToken Tests
# =============================================================================


class TestCachedToken:
    """Tests for CachedToken."""

    def test_from_login_keeps_raw_expiry(self):
        """Should keep the raw value and the parsed expiry together."""
        entry = CachedToken.from_login("tok", "2024-01-01T00:30:00+0000")

        assert entry.raw_expiry == "2024-01-01T00:30:00+0000"
        assert entry.expires_at == datetime(2024, 1, 1, 0, 30, tzinfo=timezone.utc)

    def test_valid_strictly_before_expiry(self):
        """A token is unusable at the exact expiry instant."""
        entry = CachedToken.from_login("tok", "2024-01-01T00:30:00+0000")

        assert entry.is_valid(entry.expires_at - timedelta(seconds=1))
        assert not entry.is_valid(entry.expires_at)

    def test_immutable(self):
        """Entries are replaced, never mutated."""
        entry = CachedToken.from_login("tok", "2024-01-01T00:30:00+0000")

        with pytest.raises(AttributeError):
            entry.token = "other"


# =============================================================================
# TokenCache Tests
# =============================================================================


class TestTokenCache:
    """Tests for TokenCache.get_token()."""

    @freeze_time("2024-01-01 00:00:00")
    def test_first_call_logs_in(self):
        """An empty cache should fetch once."""
        fetcher = CountingFetcher()
        cache = TokenCache(fetch=fetcher)

        assert cache.get_token() == "tok_1"
        assert fetcher.calls == 1
        assert cache.entry.token == "tok_1"

    @freeze_time("2024-01-01 00:00:00")
    def test_cache_hit_makes_no_fetch(self):
        """A valid cached token should be reused."""
        fetcher = CountingFetcher()
        cache = TokenCache(fetch=fetcher)
        cache.get_token()

        for _ in range(5):
            assert cache.get_token() == "tok_1"

        assert fetcher.calls == 1

    def test_expired_token_refreshes_once(self):
        """Passing expiry should trigger exactly one new fetch."""
        fetcher = CountingFetcher(expires_at="2024-01-01T00:30:00+0000")
        cache = TokenCache(fetch=fetcher)

        with freeze_time("2024-01-01 00:00:00"):
            assert cache.get_token() == "tok_1"

        fetcher.expires_at = "2024-01-01T01:30:00+0000"
        with freeze_time("2024-01-01 00:30:00"):
            assert cache.get_token() == "tok_2"
            assert cache.get_token() == "tok_2"

        assert fetcher.calls == 2

    def test_injected_clock(self):
        """The clock argument should decide validity."""
        now = [datetime(2024, 1, 1, tzinfo=timezone.utc)]
        fetcher = CountingFetcher(expires_at="2024-01-01T00:30:00+0000")
        cache = TokenCache(fetch=fetcher, clock=lambda: now[0])

        cache.get_token()
        now[0] = datetime(2024, 1, 1, 0, 29, 59, tzinfo=timezone.utc)
        cache.get_token()
        assert fetcher.calls == 1

        now[0] = datetime(2024, 1, 1, 0, 30, tzinfo=timezone.utc)
        cache.get_token()
        assert fetcher.calls == 2

    @freeze_time("2024-01-01 00:00:00")
    def test_invalidate_forces_login(self):
        """invalidate() should drop the entry holding the rejected token."""
        fetcher = CountingFetcher()
        cache = TokenCache(fetch=fetcher)
        cache.get_token()

        assert cache.invalidate("tok_1") is True

        assert cache.entry is None
        assert cache.get_token() == "tok_2"

    @freeze_time("2024-01-01 00:00:00")
    def test_stale_invalidate_keeps_fresh_token(self):
        """A late rejection of a replaced token leaves the newer one cached."""
        fetcher = CountingFetcher()
        cache = TokenCache(fetch=fetcher)
        assert cache.get_token() == "tok_1"
        cache.invalidate("tok_1")
        assert cache.get_token() == "tok_2"

        assert cache.invalidate("tok_1") is False

        assert cache.entry is not None
        assert cache.get_token() == "tok_2"
        assert fetcher.calls == 2

    def test_invalidate_on_empty_cache_is_noop(self):
        """Invalidating before any login should not fail."""
        cache = TokenCache(fetch=CountingFetcher())

        assert cache.invalidate("tok_1") is False
        assert cache.entry is None

    @freeze_time("2024-01-01 00:00:00")
    def test_fetch_error_propagates_and_keeps_cache_empty(self):
        """A failed login should raise and leave nothing cached."""

        def failing_fetch():
            raise AirwallexAuthError("Airwallex rejected the login")

        cache = TokenCache(fetch=failing_fetch)

        with pytest.raises(AirwallexAuthError):
            cache.get_token()
        assert cache.entry is None

    @freeze_time("2024-01-01 00:00:00")
    def test_bad_expiry_raises_format_error(self):
        """An unparseable expires_at should raise ExpiryFormatError."""
        cache = TokenCache(fetch=CountingFetcher(expires_at="soon"))

        with pytest.raises(ExpiryFormatError):
            cache.get_token()
        assert cache.entry is None

    @freeze_time("2024-01-01 00:00:00")
    def test_already_expired_token_is_returned_once(self):
        """A token expiring before use is still handed to the caller."""
        fetcher = CountingFetcher(expires_at="2023-12-31T23:00:00+0000")
        cache = TokenCache(fetch=fetcher)

        assert cache.get_token() == "tok_1"
        assert cache.get_token() == "tok_2"


# =============================================================================
# Concurrency Tests
# =============================================================================


class TestTokenCacheConcurrency:
    """Concurrent callers must share one login."""

    @pytest.mark.parametrize("thread_count", [2, 8, 32])
    def test_concurrent_callers_on_empty_cache_login_once(self, thread_count):
        """N threads racing on an empty cache should cause one fetch."""
        fetcher = CountingFetcher(expires_at="2999-01-01T00:00:00+0000", delay=0.05)
        cache = TokenCache(fetch=fetcher)
        barrier = threading.Barrier(thread_count)
        results = []
        errors = []

        def worker():
            barrier.wait()
            try:
                results.append(cache.get_token())
            except Exception as e:  # pragma: no cover - reported below
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []
        assert fetcher.calls == 1
        assert results == ["tok_1"] * thread_count

    def test_concurrent_callers_after_expiry_login_once(self):
        """Racing callers on an expired entry should refresh once."""
        now = [datetime(2024, 1, 1, tzinfo=timezone.utc)]
        fetcher = CountingFetcher(expires_at="2024-01-01T00:30:00+0000", delay=0.05)
        cache = TokenCache(fetch=fetcher, clock=lambda: now[0])
        cache.get_token()

        fetcher.expires_at = "2024-01-01T02:00:00+0000"
        now[0] = datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)
        barrier = threading.Barrier(16)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get_token())

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert fetcher.calls == 2
        assert results == ["tok_2"] * 16

    def test_concurrent_callers_through_client_login(self, airwallex_client, fake_api):
        """Racing callers backed by the real client should hit login once."""
        cache = TokenCache(fetch=airwallex_client.login)
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get_token())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert fake_api.calls_to("/api/v1/authentication/login") == 1
        assert results == ["tok_test"] * 8
