from config.settings import ProcessingSettings
from tracedeck.models import (
    BlockType,
    DocumentFormat,
    DocumentMetadata,
    ExtractedContent,
    ImageData,
    LayoutBlock,
    TextBlock,
)
from tracedeck.processors import classify_blocks, detect_language, detect_sections, normalize, split_paragraphs
from tracedeck.processors.normalizer import IMAGE_BLOCK_CONFIDENCE

ENGLISH = "The report covers the results of the survey and it shows that the team was on track for the year."


def _content(text="", fmt=DocumentFormat.PDF, pages=None, layout=(), images=()):
    return ExtractedContent(
        text=text,
        images=list(images),
        layout=list(layout),
        metadata=DocumentMetadata(file_type=fmt, file_size=len(text), pages=pages),
    )


def test_split_paragraphs():
    assert split_paragraphs("One\n\nTwo\n  \nThree\nstill three\n\n\n") == ["One", "Two", "Three\nstill three"]
    assert split_paragraphs("   ") == []


def test_image_yields_single_content_block():
    image = ImageData(id="img_0", format="png", width=1, height=1)
    blocks = classify_blocks(_content(fmt=DocumentFormat.PNG, pages=1, images=[image]))
    assert blocks == [TextBlock(content="", block_type=BlockType.CONTENT, confidence=IMAGE_BLOCK_CONFIDENCE)]


def test_plain_text_is_split_on_blank_lines():
    blocks = classify_blocks(_content("INTRODUCTION\n\n" + ENGLISH + "\n\n- first point"))
    assert [b.block_type for b in blocks] == [BlockType.HEADING, BlockType.PARAGRAPH, BlockType.BULLET]


def test_layout_blocks_are_preferred():
    layout = [
        LayoutBlock(text="Overview", font_size=20.0),
        LayoutBlock(text=ENGLISH, font_size=10.0),
    ]
    blocks = classify_blocks(_content("ignored", layout=layout))
    assert [b.content for b in blocks] == ["Overview", ENGLISH]
    assert blocks[0].block_type is BlockType.HEADING


def test_empty_document_has_no_blocks():
    assert classify_blocks(_content("", fmt=DocumentFormat.DOCX)) == []


def test_detect_sections():
    def block(text, kind):
        return TextBlock(content=text, block_type=kind, confidence=0.9)

    blocks = [
        block("Preamble", BlockType.PARAGRAPH),
        block("One", BlockType.HEADING),
        block("a", BlockType.PARAGRAPH),
        block("b", BlockType.BULLET),
        block("Two", BlockType.HEADING),
        block("Three", BlockType.HEADING),
        block("c", BlockType.CAPTION),
    ]
    sections = detect_sections(blocks)
    assert [(s.title, s.content_blocks) for s in sections] == [("One", 2), ("Two", 0), ("Three", 1)]
    assert detect_sections(blocks[:1]) == []


def test_detect_language():
    assert detect_language(ENGLISH) == "en"
    assert detect_language("Der Bericht ist fertig und die Ergebnisse sind mit dem Team auf dem Weg.") == "de"
    assert detect_language("Le rapport est prêt et les résultats sont dans la base pour le projet.") == "fr"
    assert detect_language("too short") is None
    assert detect_language("") is None
    assert detect_language("Lorem ipsum dolor sit amet consectetur adipiscing elit sed do") is None


def test_normalize_defaults_total_pages():
    normalized = normalize(_content(ENGLISH, fmt=DocumentFormat.DOCX, pages=None))
    assert normalized.structure.total_pages == 1
    assert normalized.structure.language == "en"


def test_normalize_uses_page_count_and_word_threshold():
    normalized = normalize(_content(ENGLISH, pages=3), ProcessingSettings(min_language_words=100))
    assert normalized.structure.total_pages == 3
    assert normalized.structure.language is None
