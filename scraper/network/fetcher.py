"""
Page fetcher.
This module downloads pages over HTTP(S) and hands the raw bytes, with the
encoding the server declared, to the parser.
"""

import logging
from typing import Dict, NamedTuple, Optional

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..utils.config import Config
from ..utils.logging import log_exception

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = [429, 500, 502, 503, 504]


class FetchResult(NamedTuple):
    """The outcome of fetching one URL."""
    url: str
    content: bytes
    encoding: str
    status_code: int


class PageFetcher:
    """
    Fetch HTML pages with a shared, retrying requests session.
    """

    def __init__(self, config: Optional[Config] = None, session: Optional[requests.Session] = None):
        """
        Initialize the page fetcher.

        Args:
            config: Configuration to read network settings from
            session: Session to use instead of a newly configured one
        """
        self.config = config or Config()
        self.timeout = self.config.get("network.timeout", 30)
        self.default_encoding = self.config.get("parser.default_encoding", "utf-8")
        self.session = session or self._create_session()

        logger.debug(f"Page fetcher initialized (timeout: {self.timeout}s)")

    def _create_session(self) -> requests.Session:
        """
        Create a new requests session with appropriate configuration.

        Returns:
            A configured requests session
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.get("network.max_retries", 3),
            backoff_factor=self.config.get("network.backoff_factor", 0.5),
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=["GET", "HEAD"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.verify = certifi.where()

        session.headers.update({
            "User-Agent": self.config.get("network.user_agent", "html-scraper/1.0"),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        })

        return session

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResult:
        """
        Fetch a URL.

        Args:
            url: The URL to fetch
            headers: Additional request headers

        Returns:
            The response body and its declared encoding

        Raises:
            requests.RequestException: If the request fails or the server
                answers with an error status
        """
        logger.info(f"Fetching {url}")
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            log_exception(logger, e, f"Error fetching {url}")
            raise

        encoding = self._declared_encoding(response) or self.default_encoding
        logger.debug(f"Fetched {len(response.content)} bytes from {response.url} ({encoding})")
        return FetchResult(response.url, response.content, encoding, response.status_code)

    @staticmethod
    def _declared_encoding(response: requests.Response) -> Optional[str]:
        """Get the charset from the Content-Type header, if there is one."""
        content_type = response.headers.get("Content-Type", "")
        for param in content_type.split(";")[1:]:
            name, _, value = param.strip().partition("=")
            if name.strip().lower() == "charset" and value.strip():
                return value.strip().strip('"\'')
        return None

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
