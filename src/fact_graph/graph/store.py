"""On-disk store for generated fact graphs.

One JSON file per document, named after the document, so that repeated
clustering runs can reuse graphs without rebuilding them.
"""

import json
from pathlib import Path

from fact_graph.graph.model import FactGraph


def save_graph(graph: FactGraph, directory: Path, name: str) -> Path:
    """Write ``graph`` to ``directory/name`` and return the path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(json.dumps(graph.to_dict()), encoding="utf-8")
    return path


def load_graph(path: Path) -> FactGraph:
    """Read a graph file written by ``save_graph``.

    Raises:
        ValueError: If the file is not valid JSON or not a node-link graph.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        return FactGraph.from_dict(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Not a fact graph: {path}: {e}") from e


def load_graphs(directory: Path) -> list[tuple[str, FactGraph]]:
    """Load every graph in ``directory`` as ``(name, graph)`` pairs.

    Files are returned in lexicographic name order, which is the
    canonical corpus order for graphs read back from disk.
    """
    if not directory.is_dir():
        return []
    return [
        (path.name, load_graph(path))
        for path in sorted(directory.iterdir(), key=lambda p: p.name)
        if path.is_file() and not path.name.startswith(".")
    ]
