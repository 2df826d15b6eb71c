"""
1.0 Line Differ Module
Reports lines present in a new URL list but absent from an old one.

Comparison is exact string equality on whole lines: no trimming, no case
folding, no URL normalisation. Output keeps the new list's order and
duplicates.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Set

logger = logging.getLogger(__name__)


def scan_lines(lines: Iterable[bytes]) -> Iterator[str]:
    """
    Yield text lines from a binary line iterator.

    The trailing "\\n" (or "\\r\\n") is removed; a last line without a
    terminator is still yielded. Invalid UTF-8 is replaced, not fatal.
    """
    for raw in lines:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        yield raw.decode("utf-8", errors="replace")


def build_line_set(lines: Iterable[str]) -> Set[str]:
    """Collapse lines into a membership set."""
    return set(lines)


def diff_lines(old_lines: Iterable[str], new_lines: Iterable[str]) -> Iterator[str]:
    """
    Lazily yield each line of new_lines whose exact text is not in old_lines.

    old_lines is consumed in full before the first line is yielded.
    """
    seen = build_line_set(old_lines)
    logger.debug(f"Built line set with {len(seen)} distinct old lines")
    for line in new_lines:
        if line not in seen:
            yield line


@contextmanager
def diff_files(old_path: str, new_path: str) -> Iterator[Iterator[str]]:
    """
    Open both files and yield the lazy diff of their lines.

    Both files are opened before anything is yielded and closed when the
    block exits, whether or not the diff was consumed:

        with diff_files("old.txt", "new.txt") as added:
            for line in added:
                print(line)

    Raises:
        OSError: either file cannot be opened or read
    """
    with open(old_path, "rb") as old_file, open(new_path, "rb") as new_file:
        logger.debug(f"Comparing {new_path} against {old_path}")
        yield diff_lines(scan_lines(old_file), scan_lines(new_file))
