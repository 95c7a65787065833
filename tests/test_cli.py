import json
import logging

import pytest

from tracedeck import DocumentResult
from tracedeck.cli import build_arg_parser, main

from conftest import png_bytes


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("tracedeck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_parser_defaults():
    args = build_arg_parser().parse_args(["process", "doc.pdf"])
    assert (args.format, args.timing, args.verbose) == ("pretty", False, False)
    args = build_arg_parser().parse_args(["batch", "in", "--ext", "png", "-w", "3"])
    assert (args.ext, args.workers, args.timeout) == ("png", 3, None)


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage:" in capsys.readouterr().out


def test_process_json(png_file, capsys):
    assert main(["process", str(png_file), "--format", "json", "--timing", "--verbose"]) == 0
    captured = capsys.readouterr()
    result = DocumentResult.from_json(captured.out.strip())
    assert result.extracted.images[0].width == 100
    assert "Processing completed" in captured.err
    assert "Visual Elements" in captured.err


def test_process_missing_file(tmp_path, capsys):
    assert main(["process", str(tmp_path / "absent.pdf")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_process_pipeline_error(tmp_path, capsys):
    bad = tmp_path / "bad.gif"
    bad.write_text("nope")
    assert main(["process", str(bad)]) == 1
    assert "Image error" in capsys.readouterr().err


def test_extract_text_only(docx_file, capsys):
    assert main(["extract", str(docx_file), "--text-only"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Introduction\n\n")


def test_extract_with_metadata(docx_file, capsys):
    assert main(["extract", str(docx_file)]) == 0
    captured = capsys.readouterr()
    assert "Introduction" in captured.out
    assert "Field Notes" in captured.err
    assert "Found 1 images" in captured.err


def test_batch(tmp_path, capsys):
    folder = tmp_path / "inbox"
    folder.mkdir()
    for name in ("a.png", "b.png", "c.png"):
        (folder / name).write_bytes(png_bytes(10, 10))
    (folder / "d.xyz").write_text("x")

    assert main(["batch", str(folder)]) == 0
    err = capsys.readouterr().err
    assert "75.0%" in err
    assert "1 files failed" in err


def test_batch_missing_directory(tmp_path, capsys):
    assert main(["batch", str(tmp_path / "nowhere")]) == 1
    assert "Directory not found" in capsys.readouterr().err


def test_batch_empty_directory(tmp_path, capsys):
    assert main(["batch", str(tmp_path), "--ext", "pdf"]) == 0
    assert "No files found" in capsys.readouterr().err


def test_formats_and_info(capsys):
    assert main(["formats"]) == 0
    assert "Portable Document Format" in capsys.readouterr().err
    assert main(["info"]) == 0
    assert "export" in capsys.readouterr().err


def test_export(png_file, tmp_path):
    target = tmp_path / "out" / "result.json"
    assert main(["export", str(png_file), "--output", str(target)]) == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["extracted"]["metadata"]["file_type"] == "png"
    assert payload["processed"]["structure"]["total_pages"] == 1
