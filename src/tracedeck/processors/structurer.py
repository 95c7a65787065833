from __future__ import annotations

from typing import List, Optional

from config.settings import ProcessingSettings
from ..models import (
    ElementType,
    ExtractedContent,
    ImageData,
    ProcessedData,
    VisualElement,
)
from .normalizer import NormalizedContent


def place_visual(image: ImageData, index: int, row_height: int) -> VisualElement:
    """Build the visual element for ``image``.

    Decoder coordinates are used when known; otherwise images are stacked
    vertically, ``row_height`` apart, in extraction order.
    """
    if image.placement is not None:
        position = (image.placement.x, image.placement.y)
        page = image.placement.page
    else:
        position = (0, index * row_height)
        page = None
    return VisualElement(
        element_type=ElementType.IMAGE,
        position=position,
        size=(image.width, image.height),
        image_id=image.id,
        page=page,
    )


def structure(content: ExtractedContent, normalized: NormalizedContent,
              options: Optional[ProcessingSettings] = None) -> ProcessedData:
    """Combine decoded content and the normalizer's view into :class:`ProcessedData`."""
    options = options or ProcessingSettings()
    visuals: List[VisualElement] = [
        place_visual(image, index, options.layout_row_height)
        for index, image in enumerate(content.images)
    ]
    # total_pages >= 1 is enforced by DocumentStructure itself
    return ProcessedData(
        text_blocks=list(normalized.text_blocks),
        visual_elements=visuals,
        structure=normalized.structure,
    )
