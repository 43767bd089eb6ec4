"""Document model, raw text cleaning, and ground-truth labels."""

from fact_graph.preprocessing.document import (
    Document,
    format_ndd,
    load_document,
    parse_ndd,
)
from fact_graph.preprocessing.labels import true_label
from fact_graph.preprocessing.normalizer import load_stopwords, normalize_term, preprocess_text

__all__ = [
    "Document",
    "format_ndd",
    "load_document",
    "load_stopwords",
    "normalize_term",
    "parse_ndd",
    "preprocess_text",
    "true_label",
]
