"""
1.0 Sitemap Fetcher Module
Fetches raw sitemap bytes over HTTP(S).

Key features:
- Session reuse for connection pooling across a whole resolution
- Configurable user agent and optional timeout
- Transport failures surface as FetchError; HTTP status codes do not
"""

import logging
from typing import Optional, Dict, Any, Union

import requests

from sitediff.config import DEFAULT_USER_AGENT
from sitediff.exceptions import FetchError

logger = logging.getLogger(__name__)


class SitemapFetcher:
    """
    2.0 SitemapFetcher Class
    Fetches sitemap XML content as bytes.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        """
        2.1 Initialize the SitemapFetcher.

        Args:
            config: Configuration dictionary with optional keys:
                - user_agent: Custom user agent string
                - timeout: Request timeout in seconds (default: None, wait forever)
            session: Optional pre-built requests.Session to reuse
        """
        config = config or {}

        self.user_agent = config.get("user_agent", DEFAULT_USER_AGENT)
        if not isinstance(self.user_agent, str) or not self.user_agent.strip():
            self.user_agent = DEFAULT_USER_AGENT
            logger.warning(f"Invalid user_agent in config. Using default: {self.user_agent}")

        self.timeout = config.get("timeout")

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.user_agent})

        logger.debug(
            f"SitemapFetcher initialized: "
            f"User-Agent={self.user_agent[:50]}, "
            f"timeout={self.timeout}"
        )

    def fetch_sitemap_xml(self, sitemap_url: str, timeout: Optional[Union[int, float]] = None) -> bytes:
        """
        2.2 Fetch the raw body of a sitemap URL.

        A non-2xx response whose body is readable is returned as-is; only
        transport-level failures are errors.

        Args:
            sitemap_url: The URL of the sitemap to fetch
            timeout: Optional override for the request timeout

        Returns:
            Response body as bytes

        Raises:
            FetchError: connection, read or URL error
        """
        timeout = timeout if timeout is not None else self.timeout

        logger.info(f"Fetching sitemap: {sitemap_url}")

        try:
            response = self.session.get(sitemap_url, timeout=timeout)
            # 2.2.1 Reading the body can fail separately (chunked/decoding errors)
            content = response.content
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timeout fetching {sitemap_url} after {timeout}s", url=sitemap_url) from e
        except requests.exceptions.ConnectionError as e:
            raise FetchError(f"Connection error fetching {sitemap_url}: {e}", url=sitemap_url) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request error fetching {sitemap_url}: {e}", url=sitemap_url) from e

        if not response.ok:
            logger.warning(
                f"Fetched {sitemap_url} with status={response.status_code}; "
                f"decoding the body anyway"
            )
        else:
            logger.debug(
                f"Successfully fetched {sitemap_url} "
                f"(status={response.status_code}, size={len(content):,} bytes)"
            )
        return content

    def close(self) -> None:
        self.session.close()
