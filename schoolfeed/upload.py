import logging
from typing import Any, Optional

import requests

from schoolfeed.errors import ConfigError, UploadError
from schoolfeed.settings import HTTP_TIMEOUT

log = logging.getLogger(__name__)


class Uploader:
    """POSTs an already-encoded `key=value&...` string to the ingestion endpoint."""

    def __init__(self, upload_url: str, import_key: str,
                 timeout: float = HTTP_TIMEOUT, session: Optional[requests.Session] = None):
        if not isinstance(upload_url, str) or not upload_url.strip():
            raise ConfigError("Missing upload URL.")
        if not isinstance(import_key, str) or not import_key.strip():
            raise ConfigError("Missing import key.")
        self.upload_url = upload_url.strip()
        self.import_key = import_key.strip()
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit(self, encoded: str) -> Any:
        try:
            body = encoded.encode("ascii")
        except UnicodeEncodeError as e:
            raise UploadError(f"Payload is not ASCII: {e}") from e
        try:
            r = self.session.post(
                self.upload_url,
                params={"key": self.import_key},
                data=body,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.HTTPError as e:
            raise UploadError("Upload rejected", status_code=e.response.status_code) from e
        except requests.RequestException as e:
            raise UploadError(f"Upload failed: {e}") from e
        try:
            return r.json()
        except ValueError:
            return r.text
