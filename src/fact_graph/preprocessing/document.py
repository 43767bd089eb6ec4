"""Cleaned document model and the newline-delimited document format.

A cleaned document is a list of paragraphs, each a list of sentences,
each a list of terms.  On disk ("NDD" format) every non-blank line is
one sentence with whitespace-separated terms, and paragraphs are
separated by blank lines.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from fact_graph.errors import ExtractionError

Sentence = tuple[str, ...]
Paragraph = tuple[Sentence, ...]


@dataclass(frozen=True)
class Document:
    """An immutable cleaned document.

    Attributes:
        paragraphs: Ordered paragraphs of ordered sentences of terms.
            Empty sentences and empty paragraphs are never stored.
    """

    paragraphs: tuple[Paragraph, ...] = ()

    @classmethod
    def from_lists(cls, paragraphs: list[list[list[str]]]) -> Document:
        """Build a document from nested lists, dropping empty levels."""
        cleaned: list[Paragraph] = []
        for paragraph in paragraphs:
            sentences = tuple(tuple(s) for s in paragraph if s)
            if sentences:
                cleaned.append(sentences)
        return cls(tuple(cleaned))

    @property
    def is_empty(self) -> bool:
        return not self.paragraphs

    def sentences(self) -> Iterator[Sentence]:
        for paragraph in self.paragraphs:
            yield from paragraph

    def terms(self) -> Iterator[str]:
        for sentence in self.sentences():
            yield from sentence


def parse_ndd(text: str) -> Document:
    """Parse newline-delimited document text.

    Lines containing only whitespace count as paragraph breaks.
    """
    paragraphs: list[list[list[str]]] = []
    in_paragraph = False
    for line in text.splitlines():
        terms = line.split()
        if not terms:
            in_paragraph = False
            continue
        if not in_paragraph:
            paragraphs.append([])
            in_paragraph = True
        paragraphs[-1].append(terms)
    return Document.from_lists(paragraphs)


def format_ndd(document: Document) -> str:
    """Render a document in the newline-delimited format."""
    return "\n\n".join(
        "\n".join(" ".join(sentence) for sentence in paragraph)
        for paragraph in document.paragraphs
    )


def load_document(path: Path) -> Document:
    """Read and parse a cleaned document file.

    Raises:
        ExtractionError: If the file cannot be read or is not UTF-8 text.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError(path.name, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise ExtractionError(path.name, str(e)) from e
    if "\x00" in text:
        raise ExtractionError(path.name, "contains NUL bytes")
    return parse_ndd(text)
