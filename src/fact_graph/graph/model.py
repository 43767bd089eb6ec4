"""Fact and FactGraph data model.

A ``FactGraph`` is a frozen ``networkx.MultiDiGraph``:

- nodes are entities with integer ids ``0..n-1`` assigned in order of
  first mention, carrying ``label`` (surface form) and ``type``;
- edges are facts directed from subject to object, carrying
  ``predicate``, ``weight``, an optional ``position`` and a ``seq``
  number that records fact order.

Graphs serialise to networkx node-link JSON.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

import networkx as nx

ENTITY_TYPE = "term"


@dataclass(frozen=True)
class Fact:
    """A typed ``(subject, predicate, object)`` relation.

    Attributes:
        subject: Surface form of the subject entity.
        predicate: Relation label.
        object: Surface form of the object entity.
        weight: Numeric strength of the relation.
        position: ``(paragraph, sentence)`` where the fact was observed,
            if it is tied to one place in the document.
    """

    subject: str
    predicate: str
    object: str
    weight: float = 1.0
    position: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.weight) or self.weight < 0:
            raise ValueError(f"Fact weight must be finite and non-negative, got {self.weight}")


class FactGraph:
    """Immutable directed labeled multigraph of the facts of one document."""

    def __init__(self, graph: nx.MultiDiGraph | None = None) -> None:
        if graph is None:
            graph = nx.MultiDiGraph()
        self._graph = nx.freeze(graph)

    @classmethod
    def from_facts(cls, facts: Iterable[Fact], name: str | None = None) -> FactGraph:
        """Fold facts into a graph.

        Entity surface forms are interned into node ids in order of first
        mention; one edge is appended per fact, in fact order.
        """
        graph = nx.MultiDiGraph()
        if name is not None:
            graph.graph["name"] = name
        ids: dict[str, int] = {}

        def intern(label: str) -> int:
            node_id = ids.get(label)
            if node_id is None:
                node_id = len(ids)
                ids[label] = node_id
                graph.add_node(node_id, label=label, type=ENTITY_TYPE)
            return node_id

        for seq, fact in enumerate(facts):
            attrs: dict[str, Any] = {
                "predicate": fact.predicate,
                "weight": fact.weight,
                "seq": seq,
            }
            if fact.position is not None:
                attrs["position"] = fact.position
            graph.add_edge(intern(fact.subject), intern(fact.object), **attrs)

        return cls(graph)

    @property
    def nx_graph(self) -> nx.MultiDiGraph:
        """The underlying frozen networkx graph."""
        return self._graph

    @property
    def name(self) -> str | None:
        return self._graph.graph.get("name")

    @property
    def is_empty(self) -> bool:
        return self._graph.number_of_nodes() == 0

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    def node_labels(self) -> list[str]:
        """Entity labels indexed by node id."""
        return [self._graph.nodes[n]["label"] for n in sorted(self._graph.nodes)]

    def labeled_edges(self) -> Iterator[tuple[str, str, str, float]]:
        """Yield ``(subject_label, predicate, object_label, weight)`` in fact order."""
        for fact in self.facts():
            yield fact.subject, fact.predicate, fact.object, fact.weight

    def facts(self) -> list[Fact]:
        """Reconstruct the facts of the graph in their original order."""
        nodes = self._graph.nodes
        edges = sorted(self._graph.edges(data=True), key=lambda e: e[2]["seq"])
        return [
            Fact(
                subject=nodes[u]["label"],
                predicate=d["predicate"],
                object=nodes[v]["label"],
                weight=d["weight"],
                position=d.get("position"),
            )
            for u, v, d in edges
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible node-link dict."""
        data = nx.node_link_data(self._graph, edges="edges")
        for edge in data["edges"]:
            if "position" in edge:
                edge["position"] = list(edge["position"])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FactGraph:
        """Rebuild a graph from ``to_dict`` output."""
        graph = nx.node_link_graph(data, directed=True, multigraph=True, edges="edges")
        for _, _, attrs in graph.edges(data=True):
            if "position" in attrs:
                attrs["position"] = tuple(attrs["position"])
        return cls(graph)

    def __reduce__(self):
        # frozen networkx graphs carry patched methods; pickle the data instead
        return (FactGraph.from_dict, (self.to_dict(),))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FactGraph):
            return NotImplemented
        return (
            self.node_labels() == other.node_labels()
            and self.facts() == other.facts()
        )

    def __hash__(self) -> int:
        return hash((tuple(self.node_labels()), tuple(self.facts())))

    def __repr__(self) -> str:
        return (
            f"FactGraph(name={self.name!r}, nodes={self.number_of_nodes()}, "
            f"edges={self.number_of_edges()})"
        )
