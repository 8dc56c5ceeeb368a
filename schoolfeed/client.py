import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from schoolfeed.errors import ConfigError, FetchError
from schoolfeed.models import DateRange
from schoolfeed.normalizers.types import Payload, RecordKind
from schoolfeed.settings import BAKALARI_CLIENT_ID, HTTP_TIMEOUT

log = logging.getLogger(__name__)

ENDPOINTS = {
    "marks": "/api/3/marks",
    "homeworks": "/api/3/homeworks",
    "events": "/api/3/events",
}


def to_iso_date(dt: datetime) -> str:
    """`from`/`to` query params are plain UTC calendar dates."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date().isoformat()


class BakalariClient:
    """
    Thin requests wrapper around the Bakaláři REST API.
    Every fetch logs in afresh; no token is cached between calls.
    """
    def __init__(self, base_url: str, username: str, password: str,
                 timeout: float = HTTP_TIMEOUT, session: Optional[requests.Session] = None):
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigError("Missing Bakaláři base URL.")
        if (not isinstance(username, str) or not username.strip()
                or not isinstance(password, str) or not password.strip()):
            raise ConfigError("Missing Bakaláři credentials.")
        self.base_url = base_url.strip().rstrip("/")
        self.username = username.strip()
        self.password = password.strip()
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_access_token(self) -> str:
        url = f"{self.base_url}/api/login"
        body = {
            "client_id": BAKALARI_CLIENT_ID,
            "grant_type": "password",
            "username": self.username,
            "password": self.password,
        }
        try:
            r = self.session.post(url, data=body, timeout=self.timeout,
                                  headers={"Content-Type": "application/x-www-form-urlencoded"})
            r.raise_for_status()
            token = (r.json() or {}).get("access_token")
        except requests.HTTPError as e:
            raise FetchError("Bakaláři login failed", status_code=e.response.status_code, url=url) from e
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"Bakaláři login failed: {e}", url=url) from e
        if not token:
            raise FetchError("Bakaláři login did not return an access token.", url=url)
        return token

    def fetch(self, kind: RecordKind, date_range: DateRange) -> Payload:
        """Log in, then GET the raw JSON payload for one record kind."""
        if kind not in ENDPOINTS:
            raise ValueError(f"unknown record kind: {kind!r}")
        token = self.fetch_access_token()
        url = f"{self.base_url}{ENDPOINTS[kind]}"
        params = {"from": to_iso_date(date_range.start), "to": to_iso_date(date_range.end)}
        log.debug("GET %s params=%s", url, params)
        try:
            r = self.session.get(url, params=params, timeout=self.timeout,
                                 headers={"Authorization": f"Bearer {token}"})
            r.raise_for_status()
            data = r.json()
        except requests.HTTPError as e:
            raise FetchError(f"Bakaláři {kind} request failed", status_code=e.response.status_code, url=url) from e
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"Bakaláři {kind} request failed: {e}", url=url) from e
        # a non-object body carries no containers; treat it as empty
        return data if isinstance(data, dict) else {}
