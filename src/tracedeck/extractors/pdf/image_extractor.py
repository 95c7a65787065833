"""Embedded raster image extraction for PDFs."""

from __future__ import annotations

import logging
from typing import List, Optional, Set

import pymupdf

from ...models import ImageData, Placement

logger = logging.getLogger(__name__)


def _placement(page: pymupdf.Page, xref: int) -> Optional[Placement]:
    rects = page.get_image_rects(xref)
    if not rects:
        return None
    rect = rects[0]
    return Placement(page=page.number + 1, x=max(0, int(rect.x0)), y=max(0, int(rect.y0)))


def extract_images(doc: pymupdf.Document, *, include_data: bool = True) -> List[ImageData]:
    """Return every distinct raster XObject in page order.

    An image drawn on several pages is emitted once, placed where it first
    appears. Images that cannot be decoded or report a zero dimension are
    skipped.
    """
    images: List[ImageData] = []
    seen: Set[int] = set()

    for page in doc:
        for info in page.get_images(full=True):
            xref = info[0]
            if xref in seen:
                continue
            seen.add(xref)

            try:
                extracted = doc.extract_image(xref)
            except (RuntimeError, ValueError) as exc:
                logger.warning("Skipping image xref %s on page %s: %s", xref, page.number + 1, exc)
                continue
            if not extracted:
                logger.warning("Skipping image xref %s on page %s: no image data", xref, page.number + 1)
                continue

            width, height = int(extracted.get("width") or 0), int(extracted.get("height") or 0)
            if width <= 0 or height <= 0:
                continue

            images.append(
                ImageData(
                    id=f"img_{len(images)}",
                    format=str(extracted.get("ext") or "raw").lower(),
                    width=width,
                    height=height,
                    data=extracted["image"] if include_data else b"",
                    placement=_placement(page, xref),
                )
            )

    logger.debug("Extracted %d images", len(images))
    return images
