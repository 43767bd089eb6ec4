"""Raw text cleaning for fact extraction.

Turns free text into a cleaned ``Document``: words are lowercased and
reduced to their alphabetic characters, stopwords are dropped, sentences
end at ``.``, ``?`` or ``!``, and blank lines start a new paragraph.
"""

import re
import unicodedata
from pathlib import Path

import yaml

from fact_graph.preprocessing.document import Document

# Words are split on whitespace and on hyphens/dashes
_WORD_SPLIT = re.compile(r"[\s\-—–]+")
_SENTENCE_END = (".", "?", "!")


def normalize_term(word: str) -> str:
    """Normalize a single word to a term.

    Steps:
        1. Unicode NFC normalization (merge decomposed forms)
        2. Lowercase
        3. Drop every non-alphabetic character

    Returns:
        The normalized term, possibly empty.
    """
    result = unicodedata.normalize("NFC", word).lower()
    return "".join(ch for ch in result if ch.isalpha())


def preprocess_text(text: str, stopwords: frozenset[str] = frozenset()) -> Document:
    """Clean raw text into a ``Document``.

    Args:
        text: Raw document text.
        stopwords: Normalized terms to drop.

    Returns:
        The cleaned document.  Text with no surviving terms yields the
        empty document.
    """
    paragraphs: list[list[list[str]]] = [[[]]]

    for line in text.splitlines():
        words = [w for w in _WORD_SPLIT.split(line) if w]
        if not words:
            # blank line: start a new paragraph unless the current one is empty
            if any(paragraphs[-1]):
                paragraphs.append([[]])
            continue

        for word in words:
            term = normalize_term(word)
            if term and term not in stopwords:
                paragraphs[-1][-1].append(term)
            if word.endswith(_SENTENCE_END) and paragraphs[-1][-1]:
                paragraphs[-1].append([])

    return Document.from_lists(paragraphs)


def load_stopwords(config_path: Path) -> frozenset[str]:
    """Load a stopword list from a YAML config file.

    The file holds a YAML list of words; each is normalized at load time
    so it compares equal to normalized terms.
    """
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not raw:
        return frozenset()

    return frozenset(t for t in (normalize_term(str(w)) for w in raw) if t)
