"""Tests for the Fact and FactGraph data model."""

from __future__ import annotations

import json
import pickle

import networkx as nx
import pytest

from fact_graph.graph.model import Fact, FactGraph


def _sample_graph() -> FactGraph:
    facts = [
        Fact("cat", "mentions", "cat", 1.0, (0, 0)),
        Fact("cat", "co_occurs", "mouse", 1.0, (0, 0)),
        Fact("mouse", "co_occurs", "cat", 2.0),
        Fact("dog", "same_paragraph", "cat", 0.5),
    ]
    return FactGraph.from_facts(facts, name="cats-1")


class TestFromFacts:
    def test_ids_assigned_in_first_mention_order(self):
        graph = _sample_graph()
        assert graph.node_labels() == ["cat", "mouse", "dog"]
        assert graph.number_of_nodes() == 3

    def test_one_edge_per_fact(self):
        graph = _sample_graph()
        assert graph.number_of_edges() == 4

    def test_repeated_fact_adds_parallel_edge(self):
        fact = Fact("a", "co_occurs", "b")
        graph = FactGraph.from_facts([fact, fact])
        assert graph.number_of_edges() == 2
        assert graph.number_of_nodes() == 2

    def test_facts_recovered_in_order(self):
        graph = _sample_graph()
        facts = graph.facts()
        assert [f.predicate for f in facts] == [
            "mentions", "co_occurs", "co_occurs", "same_paragraph",
        ]
        assert facts[0].position == (0, 0)
        assert facts[2].position is None
        assert facts[2].weight == 2.0

    def test_labeled_edges(self):
        graph = _sample_graph()
        assert list(graph.labeled_edges())[1] == ("cat", "co_occurs", "mouse", 1.0)

    def test_name_kept_on_graph(self):
        assert _sample_graph().name == "cats-1"
        assert FactGraph.from_facts([]).name is None

    def test_empty_graph(self):
        graph = FactGraph.from_facts([])
        assert graph.is_empty
        assert graph.facts() == []
        assert FactGraph().is_empty

    @pytest.mark.parametrize("weight", [-1.0, float("nan"), float("inf")])
    def test_invalid_weight_rejected(self, weight):
        with pytest.raises(ValueError, match="weight"):
            Fact("a", "owns", "b", weight)


class TestImmutability:
    def test_graph_is_frozen(self):
        graph = _sample_graph()
        with pytest.raises(nx.NetworkXError):
            graph.nx_graph.add_node(99)

    def test_equal_graphs_hash_equal(self):
        assert _sample_graph() == _sample_graph()
        assert hash(_sample_graph()) == hash(_sample_graph())

    def test_different_facts_not_equal(self):
        other = FactGraph.from_facts([Fact("cat", "co_occurs", "mouse")])
        assert _sample_graph() != other


class TestSerialisation:
    def test_dict_round_trip_through_json(self):
        graph = _sample_graph()
        data = json.loads(json.dumps(graph.to_dict()))
        restored = FactGraph.from_dict(data)
        assert restored == graph
        assert restored.name == "cats-1"
        assert restored.facts()[0].position == (0, 0)

    def test_restored_graph_is_frozen(self):
        restored = FactGraph.from_dict(_sample_graph().to_dict())
        assert nx.is_frozen(restored.nx_graph)

    def test_pickle_round_trip(self):
        graph = _sample_graph()
        restored = pickle.loads(pickle.dumps(graph))
        assert restored == graph
        assert restored.name == graph.name

    def test_empty_graph_round_trip(self):
        graph = FactGraph.from_facts([], name="empty-1")
        restored = FactGraph.from_dict(graph.to_dict())
        assert restored.is_empty
        assert restored.name == "empty-1"
