"""Fact graph data model, extraction strategies, builder, and store."""

from fact_graph.graph.builder import GraphBuilder
from fact_graph.graph.extractors import (
    Extractor,
    HierarchicalExtractor,
    SentenceCooccurrenceExtractor,
    SentenceLinkExtractor,
    make_extractor,
)
from fact_graph.graph.model import Fact, FactGraph
from fact_graph.graph.store import load_graph, load_graphs, save_graph

__all__ = [
    "Extractor",
    "Fact",
    "FactGraph",
    "GraphBuilder",
    "HierarchicalExtractor",
    "SentenceCooccurrenceExtractor",
    "SentenceLinkExtractor",
    "load_graph",
    "load_graphs",
    "make_extractor",
    "save_graph",
]
