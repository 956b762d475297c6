#!/usr/bin/env python3
"""Page range parsing for pdfworks.

Range expressions are what users type into a "pages" field:

    all          every page
    (blank)      every page
    5            a single page
    2-7          an inclusive range
    1-3,5,9-10   any comma-separated combination

Two contracts exist. The splitter parses strictly: one bad token rejects the
whole expression. The page numberer parses leniently: bad tokens are
dropped and ranges are trimmed to the document. Both report an expression
that selects nothing with EmptyResult.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set, Tuple

from pdfworks.errors import EmptyResult, MalformedExpression

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^([0-9]+)(?:\s*-\s*([0-9]+))?$")

ALL_PAGES_KEYWORD = "all"


def _split_token(part: str) -> Optional[Tuple[int, int]]:
    """Return ``(start, end)`` for a token, or None if it is malformed."""
    match = _TOKEN_RE.match(part)
    if match is None:
        return None
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) is not None else start
    return start, end


def parse_page_range(expression: str, total_pages: int, strict: bool = True) -> List[int]:
    """Parse a page range expression into a sorted list of page numbers.

    Page numbers are 1-indexed. Overlapping tokens are unified, so
    ``"1-3,2-4"`` selects pages 1 to 4 once each.

    Args:
        expression: The expression typed by the user.
        total_pages: Number of pages in the document.
        strict: If True, any malformed or out-of-range token rejects the
            whole expression. If False, such tokens are dropped, and ranges
            keep only the pages that exist in the document.

    Returns:
        Ascending list of unique page numbers in ``[1, total_pages]``.

    Raises:
        MalformedExpression: Strict mode only, on the first invalid token.
        EmptyResult: If the expression selects no pages at all.

    Examples:
        >>> parse_page_range("1-3,2-4", 10)
        [1, 2, 3, 4]
        >>> parse_page_range("all", 3)
        [1, 2, 3]
        >>> parse_page_range("8-12", 10, strict=False)
        [8, 9, 10]
    """
    text = expression.strip()
    if not text or text.lower() == ALL_PAGES_KEYWORD:
        pages = list(range(1, total_pages + 1))
        if not pages:
            raise EmptyResult("Document has no pages")
        return pages

    selected: Set[int] = set()

    for part in text.split(","):
        part = part.strip()
        # Trailing commas and doubled commas
        if not part:
            continue

        bounds = _split_token(part)
        if bounds is None:
            if strict:
                raise MalformedExpression(f"Invalid page token '{part}'")
            logger.debug(f"Dropping malformed page token '{part}'")
            continue

        start, end = bounds

        if strict:
            if start < 1 or end > total_pages or start > end:
                raise MalformedExpression(
                    f"Page range out of bounds: {start}-{end} (PDF has {total_pages} pages)"
                )
            selected.update(range(start, end + 1))
            continue

        if start > end:
            logger.debug(f"Dropping reversed range '{part}'")
            continue
        # Keep only the part of the range that exists in the document
        low = max(start, 1)
        high = min(end, total_pages)
        if low > high:
            logger.debug(f"Dropping out-of-range token '{part}' ({total_pages} pages)")
            continue
        selected.update(range(low, high + 1))

    if not selected:
        raise EmptyResult(f"Expression '{expression}' selects no pages")

    return sorted(selected)
