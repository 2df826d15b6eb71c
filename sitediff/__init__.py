"""
sitediff - Sitemap URL listing and line diffing

Modules:
- config: Optional JSON configuration loading and validation
- exceptions: Error kinds raised while resolving sitemaps
- sitemap_fetcher: HTTP fetching of raw sitemap bytes
- sitemap_parser: XML decoding of urlsets and sitemap indexes
- resolver: Recursive sitemap index resolution
- differ: Line-set comparison of two URL lists
- cli: `sitediff get` / `sitediff diff` entry point
"""

__version__ = "1.0.0"
