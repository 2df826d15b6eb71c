"""
1.0 Sitemap Resolver Module
Turns a sitemap or sitemap index URL into the flat list of page URLs it describes.

Key features:
- Recursive sitemap index traversal, depth-first, in document order
- "Has <url> entries" decides leaf vs index, not the root tag name
- Fail-fast: the first fetch or decode error aborts the whole resolution
- Cycle guard on the chain of sitemaps currently being resolved
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

from sitediff.exceptions import CycleError
from sitediff.sitemap_fetcher import SitemapFetcher
from sitediff.sitemap_parser import SitemapParser

logger = logging.getLogger(__name__)


class SitemapResolver:
    """
    2.0 SitemapResolver Class
    Fetches and parses sitemaps, descending through nested indexes.
    """

    def __init__(
        self,
        fetcher: Optional[SitemapFetcher] = None,
        parser: Optional[SitemapParser] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.fetcher = fetcher or SitemapFetcher(config=config)
        self.parser = parser or SitemapParser()

    def fetch_urlset(self, sitemap_url: str) -> List[str]:
        """
        2.1 Fetch a single sitemap and return its <url><loc> entries.

        Nested indexes are not followed.
        """
        xml_content = self.fetcher.fetch_sitemap_xml(sitemap_url)
        return self.parser.parse_urlset(xml_content, sitemap_url=sitemap_url)

    def fetch_index(self, sitemap_url: str) -> List[str]:
        """
        2.2 Fetch a single sitemap index and return its <sitemap><loc> entries.
        """
        xml_content = self.fetcher.fetch_sitemap_xml(sitemap_url)
        return self.parser.parse_index(xml_content, sitemap_url=sitemap_url)

    def resolve(self, sitemap_url: str) -> List[str]:
        """
        2.3 Recursively produce every page URL represented by sitemap_url.

        If sitemap_url points to a sitemap index, every sitemap within it is
        requested in turn. Requests are sequential, so the result order
        follows document order.

        Raises:
            FetchError: a sitemap in the tree could not be retrieved
            DecodeError: a sitemap in the tree is not well-formed XML
            CycleError: an index references one of its own ancestors
        """
        return self._resolve(sitemap_url, chain=())

    def _resolve(self, sitemap_url: str, chain: Sequence[str]) -> List[str]:
        if sitemap_url in chain:
            raise CycleError(sitemap_url, chain)

        logger.info(f"Processing sitemap: {sitemap_url}")

        # 2.3.1 Decoding may happen twice, so hold on to the bytes
        xml_content = self.fetcher.fetch_sitemap_xml(sitemap_url)

        # 2.3.2 Any <url> entry makes this a leaf sitemap
        page_urls = self.parser.parse_urlset(xml_content, sitemap_url=sitemap_url)
        if page_urls:
            logger.info(f"URL set {sitemap_url} contains {len(page_urls)} page URLs.")
            return page_urls

        # 2.3.3 Otherwise try it as an index; an empty urlset ends up here too
        sub_sitemaps = self.parser.parse_index(xml_content, sitemap_url=sitemap_url)
        logger.info(f"Sitemap index {sitemap_url} contains {len(sub_sitemaps)} sub-sitemaps.")

        all_page_urls_from_this_branch: List[str] = []
        child_chain = tuple(chain) + (sitemap_url,)
        for sub_url in sub_sitemaps:
            all_page_urls_from_this_branch.extend(self._resolve(sub_url, child_chain))

        return all_page_urls_from_this_branch


def fetch_all(sitemap_url: str, config: Optional[Dict[str, Any]] = None) -> List[str]:
    """Resolve sitemap_url with a one-off resolver built from config."""
    resolver = SitemapResolver(config=config)
    try:
        return resolver.resolve(sitemap_url)
    finally:
        resolver.fetcher.close()
