"""
Thin wrapper around requests.Session shared by the data providers.

Responses are returned as-is (a requests.Response is falsy for non-2xx
statuses); transport failures are logged and reported as None so providers
can treat "no response" and "bad response" with the same check.
"""

import logging
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "jquants-screener/1.0",
}


class RequestSession:
    """requests.Session with default headers and a default timeout."""

    def __init__(self, timeout: int = 30, headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if headers:
            self.session.headers.update(headers)

    def request(self, method: str, url: str, **kwargs) -> Optional[requests.Response]:
        kwargs.setdefault("timeout", self.timeout)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            # exception text can echo the query string, which may carry secrets
            logger.error(f"{method} {url.split('?')[0]} failed: {type(e).__name__}")
            return None

        if not resp:
            logger.warning(f"{method} {url} -> HTTP {resp.status_code}")
        else:
            logger.debug(f"{method} {url} -> HTTP {resp.status_code}")
        return resp

    def get(self, url: str, **kwargs) -> Optional[requests.Response]:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> Optional[requests.Response]:
        return self.request("POST", url, **kwargs)
