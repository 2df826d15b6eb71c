"""Error kinds raised while resolving a sitemap tree."""

from typing import Optional


class SitemapError(Exception):
    """Base class for failures resolving the sitemap at ``url``."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class FetchError(SitemapError):
    """The sitemap could not be retrieved (connection, read or URL error)."""


class DecodeError(SitemapError):
    """The payload is neither a well-formed urlset nor a sitemap index."""


class CycleError(SitemapError):
    """A sitemap index references a sitemap that is already being resolved."""

    def __init__(self, url: str, chain):
        self.chain = list(chain)
        path = " -> ".join(self.chain + [url])
        super().__init__(f"Sitemap cycle detected: {path}", url=url)
