"""PDF decoder: text blocks, tables, embedded images and document info."""

from .pdf_extractor import decode_pdf
from .metadata_extractor import extract_metadata, parse_pdf_date
from .image_extractor import extract_images
from .table_extractor import extract_tables
from .text_extractor import extract_text_blocks

__all__ = ["decode_pdf", "extract_metadata", "parse_pdf_date", "extract_images", "extract_tables", "extract_text_blocks"]
