"""
ID token cache for the J-Quants API.

J-Quants data endpoints take a short-lived ID token, obtained by exchanging
the long-lived refresh token at /token/auth_refresh. ID tokens are valid for
24 hours; we keep them for 23 so a token never expires mid-request.
"""

import datetime
import logging
import os
import threading
from typing import Callable, Optional

from models import Credential
from utils.session import RequestSession
from sources.jquants.config import DEFAULT_BASE_URL, REFRESH_TOKEN_ENV
from sources.jquants.errors import ConfigurationError, UpstreamAuthError

logger = logging.getLogger(__name__)

TOKEN_TTL = datetime.timedelta(hours=23)


class CredentialCache:
    """
    Holds one ID token and refreshes it when absent or expired.

    The clock is injectable so tests can move time. Refreshes are serialised:
    threads that miss the cache at the same time wait for the first exchange
    and reuse its token instead of each calling the token endpoint.
    """

    def __init__(
        self,
        session: Optional[RequestSession] = None,
        refresh_token: Optional[str] = None,
        clock: Optional[Callable[[], datetime.datetime]] = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self.session = session or RequestSession()
        self.base_url = base_url
        self.clock = clock or datetime.datetime.now
        self._refresh_token = refresh_token
        self._credential: Optional[Credential] = None
        self._lock = threading.Lock()
        self.refresh_count = 0

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def acquire(self) -> Credential:
        """
        Return a valid credential, refreshing it first if needed.

        Raises:
            ConfigurationError: If no refresh token is configured
            UpstreamAuthError: If J-Quants rejects the exchange
        """
        credential = self._credential
        if credential and credential.is_valid(self.clock()):
            return credential

        with self._lock:
            # Another thread may have refreshed while we waited
            credential = self._credential
            if credential and credential.is_valid(self.clock()):
                return credential
            return self._refresh()

    def invalidate(self) -> None:
        """Forget the cached token; the next acquire() refreshes."""
        with self._lock:
            self._credential = None

    def _refresh(self) -> Credential:
        refresh_token = self._refresh_token or os.getenv(REFRESH_TOKEN_ENV)
        if not refresh_token:
            raise ConfigurationError(f"{REFRESH_TOKEN_ENV} (refresh token) is not set")

        now = self.clock()
        logger.info("Refreshing J-Quants ID token")
        resp = self.session.post(
            f"{self.base_url}/token/auth_refresh",
            params={"refreshtoken": refresh_token},
        )
        if resp is None:
            raise UpstreamAuthError("Failed to get ID token: no response from J-Quants")
        if not resp:
            raise UpstreamAuthError(
                f"Failed to get ID token: {resp.text}. The refresh token may be invalid "
                f"or expired; issue a new one from the J-Quants dashboard "
                f"(https://application.jpx-jquants.com/).",
                status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError:
            raise UpstreamAuthError("Token exchange response is not JSON", status=resp.status_code)

        id_token = payload.get("idToken")
        if not id_token:
            raise UpstreamAuthError("Token exchange response missing idToken", status=resp.status_code)

        self._credential = Credential(token=id_token, expires_at=now + TOKEN_TTL)
        self.refresh_count += 1
        logger.debug(f"ID token cached until {self._credential.expires_at.isoformat()}")
        return self._credential
