"""Tests for CredentialCache with a mocked session and a fake clock."""

import datetime
import json
import logging
import threading
import time

import pytest
import requests
from unittest.mock import MagicMock, patch

from sources.jquants.credentials import CredentialCache, TOKEN_TTL
from sources.jquants.errors import ConfigurationError, UpstreamAuthError
from utils.session import RequestSession


def _make_cache(clock, refresh_token="refresh-123"):
    return CredentialCache(session=MagicMock(), refresh_token=refresh_token, clock=clock)


# ---------------------------------------------------------------------------
# Caching
# ---------------------------------------------------------------------------

class TestAcquire:
    def test_second_call_within_window_skips_exchange(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})

        first = cache.acquire()
        clock.advance(hours=22, minutes=59)
        second = cache.acquire()

        assert first.token == "id-1"
        assert second.token == first.token
        assert cache.session.post.call_count == 1

    def test_expiry_is_23_hours_after_refresh(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})
        credential = cache.acquire()
        assert credential.expires_at == clock.now + datetime.timedelta(hours=23)
        assert TOKEN_TTL == datetime.timedelta(hours=23)

    def test_refreshes_once_after_expiry(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.side_effect = [
            mock_response(json_data={"idToken": "id-1"}),
            mock_response(json_data={"idToken": "id-2"}),
        ]
        cache.acquire()
        clock.advance(hours=23)  # now == expires_at counts as expired
        refreshed = cache.acquire()

        assert refreshed.token == "id-2"
        assert refreshed.expires_at == clock.now + datetime.timedelta(hours=23)
        assert cache.session.post.call_count == 2
        assert cache.refresh_count == 2

    def test_exchange_url_and_params(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})
        cache.acquire()
        args, kwargs = cache.session.post.call_args
        assert args[0].endswith("/token/auth_refresh")
        assert kwargs["params"] == {"refreshtoken": "refresh-123"}

    def test_invalidate_forces_refresh(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})
        cache.acquire()
        cache.invalidate()
        assert cache.credential is None
        cache.acquire()
        assert cache.session.post.call_count == 2


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfiguration:
    def test_missing_secret_raises(self, clock):
        with patch.dict("os.environ", {}, clear=True):
            cache = _make_cache(clock, refresh_token=None)
            with pytest.raises(ConfigurationError, match="JQUANTS_API_KEY"):
                cache.acquire()
        cache.session.post.assert_not_called()

    def test_reads_env_secret(self, clock, mock_response):
        with patch.dict("os.environ", {"JQUANTS_API_KEY": "env-refresh"}):
            cache = _make_cache(clock, refresh_token=None)
            cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})
            cache.acquire()
        _, kwargs = cache.session.post.call_args
        assert kwargs["params"]["refreshtoken"] == "env-refresh"

    def test_cached_token_served_without_secret(self, clock, mock_response):
        with patch.dict("os.environ", {"JQUANTS_API_KEY": "env-refresh"}):
            cache = _make_cache(clock, refresh_token=None)
            cache.session.post.return_value = mock_response(json_data={"idToken": "id-1"})
            cache.acquire()
        with patch.dict("os.environ", {}, clear=True):
            assert cache.acquire().token == "id-1"


# ---------------------------------------------------------------------------
# Exchange failures
# ---------------------------------------------------------------------------

class TestExchangeFailures:
    def test_rejected_exchange_carries_body(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(
            status_code=400, text='{"message": "The incoming token is invalid or expired."}'
        )
        with pytest.raises(UpstreamAuthError, match="incoming token is invalid") as exc_info:
            cache.acquire()
        assert exc_info.value.status == 400
        assert cache.credential is None

    def test_no_response_raises(self, clock):
        cache = _make_cache(clock)
        cache.session.post.return_value = None
        with pytest.raises(UpstreamAuthError, match="no response"):
            cache.acquire()

    def test_non_json_body_raises(self, clock, mock_response):
        cache = _make_cache(clock)
        resp = mock_response(text="<html>Bad Gateway</html>")
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        cache.session.post.return_value = resp
        with pytest.raises(UpstreamAuthError, match="not JSON") as exc_info:
            cache.acquire()
        assert exc_info.value.status == 200
        assert cache.credential is None

    def test_missing_id_token_raises(self, clock, mock_response):
        cache = _make_cache(clock)
        cache.session.post.return_value = mock_response(json_data={})
        with pytest.raises(UpstreamAuthError, match="idToken"):
            cache.acquire()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class TestConcurrentRefresh:
    def test_concurrent_misses_share_one_exchange(self, clock, mock_response):
        cache = _make_cache(clock)

        def slow_post(*args, **kwargs):
            time.sleep(0.05)
            return mock_response(json_data={"idToken": "id-shared"})

        cache.session.post.side_effect = slow_post

        n_threads = 8
        barrier = threading.Barrier(n_threads)
        tokens = []
        lock = threading.Lock()

        def worker():
            barrier.wait()
            token = cache.acquire().token
            with lock:
                tokens.append(token)

        threads = [threading.Thread(target=worker) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert tokens == ["id-shared"] * n_threads
        assert cache.session.post.call_count == 1


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

class TestSecretNotLogged:
    def test_transport_failure_does_not_log_refresh_token(self, clock, caplog):
        session = RequestSession(timeout=2)
        error = requests.exceptions.ConnectionError(
            "HTTPConnectionPool(host='127.0.0.1', port=9): Max retries exceeded with url: "
            "/v1/token/auth_refresh?refreshtoken=SUPERSECRET123"
        )
        cache = CredentialCache(session=session, refresh_token="SUPERSECRET123", clock=clock)

        with caplog.at_level(logging.DEBUG):
            with patch.object(session.session, "request", side_effect=error):
                with pytest.raises(UpstreamAuthError, match="no response"):
                    cache.acquire()

        assert "auth_refresh" in caplog.text
        assert "ConnectionError" in caplog.text
        assert "SUPERSECRET123" not in caplog.text
