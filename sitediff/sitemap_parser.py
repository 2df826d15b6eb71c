import logging
from typing import List, Optional

from lxml import etree  # Using lxml for strict parsing and namespace-agnostic XPath

from sitediff.exceptions import DecodeError

logger = logging.getLogger(__name__)

# Paths are relative to the root element, whatever its name or namespace.
URLSET_LOC_XPATH = "./*[local-name()='url']/*[local-name()='loc']"
INDEX_LOC_XPATH = "./*[local-name()='sitemap']/*[local-name()='loc']"

FEED_CHUNK_SIZE = 64 * 1024


class SitemapParser:
    """
    Decodes sitemap payloads into lists of <loc> values.

    Only the first element of the payload is decoded. Anything after its
    closing tag (a stray comment, <br/>, a debug line appended by the server)
    is ignored; malformed XML before that point is a DecodeError.
    """

    def parse_urlset(self, xml_content: bytes, sitemap_url: str = "") -> List[str]:
        """
        Interprets the payload as a flat sitemap.

        Args:
            xml_content: Raw XML bytes.
            sitemap_url: The URL the payload was fetched from (for logging/context).

        Returns:
            The <url><loc> values in document order. An empty list means the
            payload holds no URL entries, not that it is an index.

        Raises:
            DecodeError: the payload is not well-formed XML.
        """
        root = self._parse_root(xml_content, sitemap_url)
        urls = self._extract_locs(root, URLSET_LOC_XPATH, sitemap_url)
        logger.debug(f"Extracted {len(urls)} URL entries from {sitemap_url or 'urlset'}.")
        return urls

    def parse_index(self, xml_content: bytes, sitemap_url: str = "") -> List[str]:
        """
        Interprets the payload as a sitemap index.

        Returns the <sitemap><loc> values in document order.

        Raises:
            DecodeError: the payload is not well-formed XML.
        """
        root = self._parse_root(xml_content, sitemap_url)
        sitemap_urls = self._extract_locs(root, INDEX_LOC_XPATH, sitemap_url)
        logger.debug(f"Extracted {len(sitemap_urls)} sitemap links from {sitemap_url or 'index'}.")
        return sitemap_urls

    def _parse_root(self, xml_content: bytes, sitemap_url: str) -> etree._Element:
        if isinstance(xml_content, str):
            xml_content = xml_content.encode("utf-8")
        if not xml_content or not xml_content.strip():
            raise DecodeError(f"Empty XML content in sitemap {sitemap_url}", url=sitemap_url or None)
        try:
            # libxml2 rejects whitespace before the XML declaration
            return self._parse_first_element(xml_content.lstrip())
        except etree.XMLSyntaxError as e:
            raise DecodeError(f"XML syntax error in sitemap {sitemap_url}: {e}", url=sitemap_url or None) from e

    def _new_pull_parser(self) -> etree.XMLPullParser:
        # No recover mode: malformed XML must be reported, not patched up.
        return etree.XMLPullParser(
            events=("end",),
            remove_blank_text=True,
            resolve_entities=False,
            no_network=True,
        )

    def _parse_first_element(self, data: bytes) -> etree._Element:
        """Feed data in chunks and return the root as soon as its end tag is read."""
        parser = self._new_pull_parser()
        fed = 0
        while fed < len(data):
            chunk = data[fed:fed + FEED_CHUNK_SIZE]
            try:
                parser.feed(chunk)
            except etree.XMLSyntaxError:
                # The error may sit after the root's end tag in this chunk
                return self._replay_bytewise(data[:fed], chunk)
            fed += len(chunk)
            root = self._closed_root(parser)
            if root is not None:
                return root
        return parser.close()

    def _replay_bytewise(self, clean_prefix: bytes, failing_chunk: bytes) -> etree._Element:
        """
        Re-parse failing_chunk one byte at a time after a prefix known to be clean.

        Returns the root if it closes before the error, otherwise the
        XMLSyntaxError from the failing byte propagates.
        """
        parser = self._new_pull_parser()
        # The first feed needs a few bytes for encoding detection; no root closes in under 4 bytes
        head = clean_prefix or failing_chunk[:4]
        rest = failing_chunk if clean_prefix else failing_chunk[4:]
        parser.feed(head)
        root = self._closed_root(parser)
        if root is not None:
            return root
        for i in range(len(rest)):
            parser.feed(rest[i:i + 1])
            root = self._closed_root(parser)
            if root is not None:
                return root
        return parser.close()

    @staticmethod
    def _closed_root(parser: etree.XMLPullParser) -> Optional[etree._Element]:
        for _event, element in parser.read_events():
            if element.getparent() is None:
                return element
        return None

    def _extract_locs(self, root: etree._Element, xpath: str, sitemap_url: str) -> List[str]:
        locs = []
        for loc_element in root.xpath(xpath):
            text: Optional[str] = loc_element.text
            if text and text.strip():
                locs.append(text.strip())
            else:
                logger.warning(f"Skipping empty <loc> in {sitemap_url or 'sitemap'}.")
        return locs
