"""Document information dictionary extraction for PDFs."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import pymupdf

_PDF_DATE = re.compile(
    r"^(?:D:)?(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+\-]\d{2}'?\d{2}?'?)?"
)


def parse_pdf_date(value: Optional[str]) -> Optional[str]:
    """Convert a PDF date string (``D:YYYYMMDDHHmmSS+hh'mm'``) to ISO-8601.

    Returns ``None`` for empty or unparseable values rather than guessing.
    """
    if not value:
        return None
    match = _PDF_DATE.match(value.strip())
    if not match:
        return None

    parts = match.groupdict()
    try:
        stamp = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError:
        return None

    tz = parts["tz"]
    if tz:
        if tz in ("Z", "z"):
            stamp = stamp.replace(tzinfo=timezone.utc)
        else:
            digits = tz[1:].replace("'", "")
            hours = int(digits[:2])
            minutes = int(digits[2:4] or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            stamp = stamp.replace(tzinfo=timezone(offset if tz[0] == "+" else -offset))
    return stamp.isoformat()


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or None


def extract_metadata(doc: pymupdf.Document) -> Dict[str, Any]:
    """Return ``pages``, ``title``, ``author`` and ``created_at`` for an open document."""
    info = doc.metadata or {}
    return {
        "pages": doc.page_count or None,
        "title": _clean(info.get("title")),
        "author": _clean(info.get("author")),
        "created_at": parse_pdf_date(_clean(info.get("creationDate"))),
    }
