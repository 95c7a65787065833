#!/usr/bin/env python3
"""
Example script demonstrating the trace-deck pipeline.

This script shows how to:
1. Process a single document and inspect its structure
2. Save the result as JSON and load it back
3. Process a whole folder with bounded concurrency
"""

import sys
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))
sys.path.append(str(Path(__file__).parent.parent))

from config import settings
from tracedeck import DocumentResult, TraceDeckError, process_document
from tracedeck.utils.batch import collect_files, run_batch
from tracedeck.utils.formatting import format_duration, format_size


def process_document_example(path: str):
    """Example of processing one document and walking its result."""

    if not Path(path).exists():
        print(f"Document not found: {path}")
        return None

    print(f"Processing document: {path}")
    try:
        result = process_document(path)
    except TraceDeckError as exc:
        print(f"Processing failed: {exc}")
        return None

    meta = result.extracted.metadata
    print(f"\n1. Extracted {meta.file_type.value} ({format_size(meta.file_size)}) "
          f"in {format_duration(result.processing_time_ms)}")
    print(f"   {len(result.extracted.images)} images, {len(result.extracted.tables)} tables")

    print("\n2. Text blocks:")
    for block in result.processed.text_blocks[:10]:
        preview = block.content[:60].replace("\n", " ")
        print(f"  [{block.block_type.value:<9} {block.confidence:.2f}] {preview}")

    structure = result.processed.structure
    print(f"\n3. Structure: {structure.total_pages} pages, language={structure.language}")
    for section in structure.sections:
        print(f"  {section.title} ({section.content_blocks} blocks)")

    return result


def save_and_reload(result: DocumentResult, output: Path):
    """Write the result to disk and check it reads back unchanged."""
    output.write_text(result.to_json(indent=2), encoding="utf-8")
    reloaded = DocumentResult.from_json(output.read_text(encoding="utf-8"))
    print(f"\nSaved {output} (round trip ok: {reloaded == result})")


def batch_example(folder: str):
    """Process every supported file in a folder."""
    files = collect_files(folder)
    print(f"\nBatch: {len(files)} files, {settings.batch.max_workers} workers")
    report = run_batch(files)
    for outcome in report.outcomes:
        status = "ok" if outcome.ok else outcome.error
        print(f"  {outcome.path.name}: {status}")
    print(f"Success rate: {report.success_rate:.1f}%")


if __name__ == "__main__":
    print("Document Processing Example")
    print("=" * 40)

    target = sys.argv[1] if len(sys.argv) > 1 else "../data/sample.pdf"
    result = process_document_example(target)
    if result is not None:
        save_and_reload(result, Path(target).with_suffix(".json"))
        batch_example(str(Path(target).parent))
