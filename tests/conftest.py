"""Shared test fixtures."""

from pathlib import Path

import pytest

from fact_graph.preprocessing.document import Document, parse_ndd
from fact_graph.preprocessing.normalizer import load_stopwords

REPO_ROOT = Path(__file__).resolve().parents[1]
PIPELINE_CONFIG = REPO_ROOT / "config" / "pipeline.yaml"
STOPWORDS_PATH = REPO_ROOT / "src" / "fact_graph" / "config" / "stopwords.yaml"

# Three near-duplicate documents about a cat, three related but distinct
# documents about markets.  Cat and market documents share no terms.
CAT_TEXTS = [
    "cat chases mouse\ncat sleeps sofa",
    "cat chases mouse\ncat sleeps sofa",
    "cat chases mouse\ncat sleeps couch",
]
MARKET_TEXTS = [
    "stock market rises\ninvestors buy shares",
    "stock market rises\nbank raises rates",
    "stock market rises\ngold price falls",
]

RAW_CAT_TEXTS = [
    "The cat chases the mouse. The cat sleeps on the sofa!",
    "The Cat chases a mouse.\n\nThe cat sleeps on the sofa.",
    "The cat chases the mouse. The cat sleeps on the couch.",
]
RAW_MARKET_TEXTS = [
    "The stock market rises. Investors buy shares.",
    "The stock market rises. The bank raises rates.",
    "The stock market rises. The gold price falls.",
]


@pytest.fixture
def stopwords() -> frozenset[str]:
    """The shipped stopword list."""
    return load_stopwords(STOPWORDS_PATH)


@pytest.fixture
def interleaved_documents() -> list[tuple[str, Document]]:
    """Six cleaned documents, cat and market documents alternating."""
    documents = []
    for i, (cat, market) in enumerate(zip(CAT_TEXTS, MARKET_TEXTS), start=1):
        documents.append((f"cats-{i}", parse_ndd(cat)))
        documents.append((f"markets-{i}", parse_ndd(market)))
    return documents


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """A workspace with six raw documents in ``raw_input/``."""
    raw = tmp_path / "raw_input"
    raw.mkdir()
    for i, text in enumerate(RAW_CAT_TEXTS, start=1):
        (raw / f"cats-{i}.txt").write_text(text, encoding="utf-8")
    for i, text in enumerate(RAW_MARKET_TEXTS, start=1):
        (raw / f"markets-{i}.txt").write_text(text, encoding="utf-8")
    return tmp_path
