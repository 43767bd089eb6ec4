"""Graph builder: one cleaned document in, one fact graph out."""

from __future__ import annotations

import structlog

from fact_graph.graph.extractors import Extractor, make_extractor
from fact_graph.graph.model import FactGraph
from fact_graph.pipeline.config import ExtractionConfig
from fact_graph.preprocessing.document import Document

logger = structlog.get_logger()


class GraphBuilder:
    """Builds fact graphs with a configured extraction strategy.

    ``build`` is total: an empty or degenerate document produces the
    empty graph.  The builder keeps no state between calls.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.extractor = extractor or make_extractor(self.config)

    def build(self, document: Document, name: str | None = None) -> FactGraph:
        if document.is_empty:
            logger.debug("empty_graph", document=name, reason="no_terms")
            return FactGraph.from_facts([], name=name)

        graph = FactGraph.from_facts(self.extractor.extract(document), name=name)
        if graph.is_empty:
            logger.debug("empty_graph", document=name, reason="no_facts")
        return graph
