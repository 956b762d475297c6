#!/usr/bin/env python3
"""Overlay placement geometry.

Coordinates are PDF user space: the origin is the bottom-left corner of the
page and y grows upwards. The returned point is the left end of the text
baseline.
"""

from __future__ import annotations

from typing import Tuple

from pdfworks.types import DEFAULT_MARGIN, Anchor


def place(
    anchor: Anchor,
    page_width: float,
    page_height: float,
    text_width: float,
    font_size: float,
    margin: float = DEFAULT_MARGIN,
) -> Tuple[float, float]:
    """Compute the (x, y) anchor point for overlay text.

    Text wider than ``page_width - 2 * margin`` yields coordinates partly
    off the page; no clamping is done.

    Examples:
        >>> place(Anchor.BOTTOM_CENTER, 200, 100, 40, 12, 30)
        (80.0, 30.0)
    """
    if anchor.vertical == "top":
        y = page_height - margin
    elif anchor.vertical == "middle":
        y = page_height / 2 - font_size / 2
    else:
        y = margin

    if anchor.horizontal == "left":
        x = margin
    elif anchor.horizontal == "center":
        x = (page_width - text_width) / 2
    else:
        x = page_width - margin - text_width

    return float(x), float(y)
