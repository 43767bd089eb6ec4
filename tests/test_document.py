"""Tests for the cleaned document model and NDD format."""

from pathlib import Path

import pytest

from fact_graph.errors import ExtractionError
from fact_graph.preprocessing.document import Document, format_ndd, load_document, parse_ndd


class TestParseNdd:
    """Tests for parsing newline-delimited documents."""

    def test_lines_are_sentences(self) -> None:
        doc = parse_ndd("a b\nc")
        assert doc.paragraphs == ((("a", "b"), ("c",)),)

    def test_blank_lines_split_paragraphs(self) -> None:
        doc = parse_ndd("a b\nc\n\nd")
        assert doc.paragraphs == ((("a", "b"), ("c",)), (("d",),))

    def test_repeated_blank_lines_are_one_break(self) -> None:
        doc = parse_ndd("a\n\n\n   \nb\n")
        assert doc.paragraphs == ((("a",),), (("b",),))

    def test_empty_text_is_empty_document(self) -> None:
        assert parse_ndd("").is_empty
        assert parse_ndd("\n\n  \n").is_empty

    def test_terms_in_document_order(self) -> None:
        doc = parse_ndd("a b\nc\n\nd")
        assert list(doc.terms()) == ["a", "b", "c", "d"]
        assert list(doc.sentences()) == [("a", "b"), ("c",), ("d",)]


class TestFormatNdd:
    def test_format_inverts_parse(self) -> None:
        text = "cat chases mouse\ncat sleeps\n\ndog barks"
        assert format_ndd(parse_ndd(text)) == text

    def test_from_lists_drops_empty_levels(self) -> None:
        doc = Document.from_lists([[["a"], []], [], [[]], [["b"]]])
        assert doc.paragraphs == ((("a",),), (("b",),))
        assert format_ndd(doc) == "a\n\nb"

    def test_empty_document_formats_to_empty_string(self) -> None:
        assert format_ndd(Document()) == ""


class TestLoadDocument:
    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cats-1"
        path.write_text("cat chases mouse\n", encoding="utf-8")
        assert load_document(path).paragraphs == ((("cat", "chases", "mouse"),),)

    def test_invalid_utf8_raises_extraction_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken-1"
        path.write_bytes(b"\xff\xfe\xfa not text")
        with pytest.raises(ExtractionError) as exc_info:
            load_document(path)
        assert exc_info.value.document_name == "broken-1"

    def test_nul_bytes_raise_extraction_error(self, tmp_path: Path) -> None:
        path = tmp_path / "binary-1"
        path.write_bytes(b"cat\x00dog")
        with pytest.raises(ExtractionError):
            load_document(path)

    def test_missing_file_raises_extraction_error(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError):
            load_document(tmp_path / "missing-1")
