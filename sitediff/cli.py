"""
1.0 sitediff CLI
List every URL behind a sitemap, or compare two URL lists.

Usage:
    sitediff get https://www.example.com/sitemap.xml > today.txt
    sitediff diff yesterday.txt today.txt
    sitediff --config sitediff.json -v get https://www.example.com/sitemap_index.xml
"""

import argparse
import logging
import sys
from typing import List, Optional

from sitediff import __version__
from sitediff.config import DEFAULT_CONFIG, load_config
from sitediff.differ import diff_files
from sitediff.exceptions import SitemapError
from sitediff.resolver import fetch_all

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitediff",
        description="List the URLs in a sitemap (index) or show lines added between two URL lists",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Optional JSON configuration file (user_agent, timeout, log_level)"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="{get,diff}")

    get_parser = subparsers.add_parser("get", help="Print every page URL behind a sitemap or sitemap index")
    get_parser.add_argument("url", help="Sitemap or sitemap index URL")

    diff_parser = subparsers.add_parser("diff", help="Print lines of NEW that are not in OLD")
    diff_parser.add_argument("old", help="Old line-per-URL file")
    diff_parser.add_argument("new", help="New line-per-URL file")

    return parser


def setup_logging(level: str) -> None:
    """Install the stderr handler once; later calls only change the level."""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level)


def run_get(url: str, config: dict) -> int:
    try:
        urls = fetch_all(url, config=config)
    except SitemapError as e:
        logger.error(f"failed to fetch: {e}")
        return 1

    for page_url in urls:
        print(page_url)
    logger.info(f"Resolved {len(urls)} URLs from {url}")
    return 0


def run_diff(old_path: str, new_path: str) -> int:
    try:
        with diff_files(old_path, new_path) as added:
            for line in added:
                print(line)
    except OSError as e:
        logger.error(f"error reading input: {e}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns the process exit status: 0 on success, 1 on any fetch, decode,
    file or configuration error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_usage()
        return 0

    # Flags win over the config file's log_level
    if args.verbose:
        flag_level = "DEBUG"
    elif args.quiet:
        flag_level = "WARNING"
    else:
        flag_level = None
    setup_logging(flag_level or DEFAULT_CONFIG["log_level"])

    config = load_config(args.config)
    if config is None:
        logger.error("Failed to load configuration. Exiting.")
        return 1

    if flag_level is None:
        setup_logging(config["log_level"].upper())

    if args.command == "get":
        return run_get(args.url, config)
    return run_diff(args.old, args.new)


if __name__ == "__main__":
    sys.exit(main())
