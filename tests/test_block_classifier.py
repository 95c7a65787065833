import pytest

from tracedeck.classifiers import BlockContext, classify_block
from tracedeck.models import BlockType, LayoutBlock

LONG = "This paragraph has plenty of words so that it reads like running body text in a report."


@pytest.mark.parametrize("style, expected", [
    ("Heading1", BlockType.HEADING),
    ("Title", BlockType.HEADING),
    ("Caption", BlockType.CAPTION),
    ("ListBullet", BlockType.BULLET),
])
def test_paragraph_style_wins(style, expected):
    block_type, confidence = classify_block(LONG, LayoutBlock(text=LONG, style=style))
    assert block_type is expected
    assert confidence == 0.95


def test_unknown_style_falls_through():
    block_type, _ = classify_block(LONG, LayoutBlock(text=LONG, style="Normal"))
    assert block_type is BlockType.PARAGRAPH


@pytest.mark.parametrize("text", ["- milk", "* eggs", "• bread", "1. first step", "a) option", "(iv) clause"])
def test_list_markers(text):
    assert classify_block(text) == (BlockType.BULLET, 0.9)


def test_numbering_flag_marks_bullet():
    assert classify_block("Collect samples", LayoutBlock(text="Collect samples", list_item=True))[0] is BlockType.BULLET


@pytest.mark.parametrize("text", ["Figure 3: Sales by region", "Table 2. Results", "Fig. 1 - Overview"])
def test_caption_cues(text):
    assert classify_block(text) == (BlockType.CAPTION, 0.85)


def test_large_font_is_heading():
    context = BlockContext(body_font_size=11.0)
    block_type, confidence = classify_block("Quarterly Report", LayoutBlock(text="Quarterly Report", font_size=22.0), context)
    assert block_type is BlockType.HEADING
    assert 0.8 <= confidence <= 1.0


def test_body_sized_text_is_not_heading():
    context = BlockContext(body_font_size=11.0)
    block_type, _ = classify_block("Short line", LayoutBlock(text="Short line", font_size=11.0), context)
    assert block_type is BlockType.PARAGRAPH


def test_bold_and_caps_short_lines():
    assert classify_block("Key findings", LayoutBlock(text="Key findings", bold=True)) == (BlockType.HEADING, 0.65)
    assert classify_block("EXECUTIVE SUMMARY") == (BlockType.HEADING, 0.65)
    assert classify_block("2.1 Method")[0] is BlockType.HEADING


def test_sentences_stay_paragraphs():
    assert classify_block("Counts were higher than expected.") == (BlockType.PARAGRAPH, 0.6)
    assert classify_block(LONG) == (BlockType.PARAGRAPH, 0.75)


def test_body_size_is_character_weighted():
    blocks = [
        LayoutBlock(text="Big Title", font_size=24.0),
        LayoutBlock(text=LONG, font_size=10.0),
    ]
    assert BlockContext.from_layout(blocks).body_font_size == 10.0
    assert BlockContext.from_layout([]).body_font_size is None
