"""Tests for the graph builder and graph store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fact_graph.graph.builder import GraphBuilder
from fact_graph.graph.model import Fact, FactGraph
from fact_graph.graph.store import load_graph, load_graphs, save_graph
from fact_graph.pipeline.config import ExtractionConfig
from fact_graph.preprocessing.document import Document, parse_ndd


class _FixedExtractor:
    """Extractor stub returning the same facts for any document."""

    def __init__(self, facts: list[Fact]) -> None:
        self.facts = facts
        self.calls = 0

    def extract(self, document: Document) -> list[Fact]:
        self.calls += 1
        return list(self.facts)


class TestGraphBuilder:
    def test_build_is_deterministic(self):
        doc = parse_ndd("cat chases mouse\ncat sleeps sofa")
        builder = GraphBuilder()
        assert builder.build(doc) == builder.build(doc)
        assert GraphBuilder().build(doc) == builder.build(doc)

    def test_build_names_graph(self):
        graph = GraphBuilder().build(parse_ndd("cat"), name="cats-1")
        assert graph.name == "cats-1"

    def test_empty_document_gives_empty_graph(self):
        extractor = _FixedExtractor([Fact("x", "co_occurs", "y")])
        graph = GraphBuilder(extractor=extractor).build(Document(), name="empty-1")
        assert graph.is_empty
        assert graph.name == "empty-1"
        assert extractor.calls == 0

    def test_no_facts_gives_empty_graph(self):
        graph = GraphBuilder(ExtractionConfig(strategy="sentence_link")).build(
            parse_ndd("cat\ndog")
        )
        assert graph.is_empty

    def test_injected_extractor_is_used(self):
        extractor = _FixedExtractor([Fact("x", "co_occurs", "y")])
        graph = GraphBuilder(extractor=extractor).build(parse_ndd("cat"))
        assert graph.node_labels() == ["x", "y"]

    def test_strategy_from_config(self):
        doc = parse_ndd("a b a")
        cooccurrence = GraphBuilder().build(doc)
        link = GraphBuilder(ExtractionConfig(strategy="sentence_link")).build(doc)
        assert cooccurrence.number_of_edges() == 6
        assert link.number_of_edges() == 1


class TestGraphStore:
    def test_save_and_load(self, tmp_path: Path):
        graph = GraphBuilder().build(parse_ndd("cat chases mouse"), name="cats-1")
        path = save_graph(graph, tmp_path / "graphs", "cats-1")
        assert path == tmp_path / "graphs" / "cats-1"
        assert load_graph(path) == graph

    def test_load_graphs_in_name_order(self, tmp_path: Path):
        builder = GraphBuilder()
        for name in ("markets-1", "cats-2", "cats-10"):
            save_graph(builder.build(parse_ndd(name.split("-")[0])), tmp_path, name)
        (tmp_path / ".hidden").write_text("{}", encoding="utf-8")

        names = [name for name, _ in load_graphs(tmp_path)]
        assert names == ["cats-10", "cats-2", "markets-1"]

    def test_missing_directory_is_empty(self, tmp_path: Path):
        assert load_graphs(tmp_path / "nope") == []

    def test_invalid_json_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "broken-1"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_graph(path)

    def test_non_graph_json_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "broken-1"
        path.write_text(json.dumps({"hello": "world"}), encoding="utf-8")
        with pytest.raises(ValueError, match="Not a fact graph"):
            load_graph(path)

    def test_empty_graph_survives_store(self, tmp_path: Path):
        path = save_graph(FactGraph.from_facts([], name="empty-1"), tmp_path, "empty-1")
        assert load_graph(path).is_empty
