import logging
from typing import Dict, Optional
from urllib.parse import quote

from curl_cffi import CurlError, requests

from .config import Settings
from .errors import FetchError, TransportError

logger = logging.getLogger(__name__)


class Fetcher:

    def __init__(self, settings: Optional[Settings] = None, session=None):
        self.settings = settings or Settings()
        self.session = session or requests.Session(impersonate=self.settings.impersonate)
        self.session.headers.update(self.settings.headers)

    def proxied(self, url: str) -> str:
        return f"{self.settings.proxy_url}{quote(url, safe='')}"

    def request(self, method: str, url: str, headers: Optional[Dict] = None, data=None) -> str:
        target = self.proxied(url) if self.settings.use_proxy else url
        logger.debug("%s %s", method, target)

        try:
            response = self.session.request(
                method,
                target,
                headers=headers,
                data=data,
                timeout=self.settings.timeout,
            )
        except CurlError as e:
            logger.warning("Transport failure for %s: %s", url, e)
            raise TransportError(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning("HTTP %s for %s", response.status_code, url)
            raise FetchError(response.status_code, url)

        return response.text

    def get(self, url: str, headers: Optional[Dict] = None) -> str:
        return self.request("GET", url, headers=headers)

    def post(self, url: str, data=None, headers: Optional[Dict] = None) -> str:
        return self.request("POST", url, headers=headers, data=data)
