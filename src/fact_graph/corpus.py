"""Ordered corpus of named fact graphs with their true labels.

Insertion order is the canonical order: it is the order of rows in the
distance matrix and of lines in the ``names``/``pred``/``true`` files.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from fact_graph.graph.model import FactGraph
from fact_graph.preprocessing.labels import true_label


@dataclass(frozen=True)
class CorpusEntry:
    """One document of the corpus."""

    name: str
    graph: FactGraph
    true_label: str


class Corpus:
    """Immutable, ordered sequence of ``CorpusEntry`` objects."""

    def __init__(self, entries: Iterable[CorpusEntry] = ()) -> None:
        self._entries = tuple(entries)
        seen: set[str] = set()
        for entry in self._entries:
            if entry.name in seen:
                raise ValueError(f"Duplicate document name in corpus: {entry.name!r}")
            seen.add(entry.name)

    @classmethod
    def from_named_graphs(cls, named_graphs: Iterable[tuple[str, FactGraph]]) -> Corpus:
        """Build a corpus, taking each true label from the document name."""
        return cls(
            CorpusEntry(name=name, graph=graph, true_label=true_label(name))
            for name, graph in named_graphs
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CorpusEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> CorpusEntry:
        return self._entries[index]

    @property
    def names(self) -> list[str]:
        return [e.name for e in self._entries]

    @property
    def graphs(self) -> list[FactGraph]:
        return [e.graph for e in self._entries]

    @property
    def true_labels(self) -> list[str]:
        return [e.true_label for e in self._entries]
