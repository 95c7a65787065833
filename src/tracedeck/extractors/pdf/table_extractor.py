"""Grid-aligned table recovery for PDF pages."""

from __future__ import annotations

import logging
from typing import List, Tuple

from ...models import TableData

logger = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]  # (x0, top, x1, bottom) in pdfplumber page coords


def extract_tables(page) -> Tuple[List[TableData], List[BBox]]:
    """Return the tables found on a pdfplumber page and their bounding boxes.

    The boxes are returned even for grids that yield no usable cells so the
    text pass can mask the ruled region either way.
    """
    tables: List[TableData] = []
    regions: List[BBox] = []

    for found in page.find_tables():
        regions.append(tuple(found.bbox))
        table = TableData.from_grid(found.extract())
        if table is not None:
            tables.append(table)

    if tables:
        logger.debug("Page %s: %d tables", page.page_number, len(tables))
    return tables, regions
