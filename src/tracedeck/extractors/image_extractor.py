"""Raster image decoder (png, jpg, jpeg, webp, gif)."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from config.settings import ProcessingSettings
from ..errors import ImageError
from ..models import DocumentFormat, DocumentMetadata, ExtractedContent, ImageData
from ..utils.io_utils import read_document_bytes

logger = logging.getLogger(__name__)


def decode_image(path: Union[str, Path], fmt: DocumentFormat,
                 options: Optional[ProcessingSettings] = None) -> ExtractedContent:
    """Decode an image file; the image itself becomes the sole ``ImageData``.

    The pixels are fully loaded so truncated files fail here rather than
    later. Images carry no text or tables and always count as one page.
    """
    options = options or ProcessingSettings()
    data = read_document_bytes(path)

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ImageError(f"cannot identify image: {exc}") from exc
    except (OSError, SyntaxError, ValueError) as exc:
        # Pillow reports truncated or corrupt streams as OSError/SyntaxError
        raise ImageError(f"cannot decode image: {exc}") from exc

    if width <= 0 or height <= 0:
        raise ImageError(f"invalid dimensions {width}x{height}")

    logger.debug("Decoded %s: %dx%d %s", path, width, height, fmt.value)
    return ExtractedContent(
        text="",
        images=[
            ImageData(
                id="img_0",
                format=fmt.value,
                width=width,
                height=height,
                data=data if options.include_image_data else b"",
            )
        ],
        tables=[],
        metadata=DocumentMetadata(file_type=fmt, file_size=len(data), pages=1),
    )
