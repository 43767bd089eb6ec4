"""Tests for the ordered corpus and logging setup."""

import io
import json
import logging
import sys

import pytest
import structlog

from fact_graph.corpus import Corpus, CorpusEntry
from fact_graph.graph.model import FactGraph
from fact_graph.logging_config import configure_logging


def _entry(name: str) -> CorpusEntry:
    return CorpusEntry(name=name, graph=FactGraph.from_facts([], name=name), true_label="x")


class TestCorpus:
    def test_keeps_insertion_order(self):
        corpus = Corpus.from_named_graphs(
            (name, FactGraph.from_facts([], name=name)) for name in ["b-2", "a-1", "b-1"]
        )
        assert corpus.names == ["b-2", "a-1", "b-1"]
        assert corpus.true_labels == ["b", "a", "b"]
        assert corpus[1].name == "a-1"
        assert len(corpus.graphs) == 3

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            Corpus([_entry("a-1"), _entry("a-1")])

    def test_empty_corpus(self):
        corpus = Corpus()
        assert len(corpus) == 0
        assert list(corpus) == []


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        structlog.reset_defaults()

    def test_json_lines(self):
        stream = io.StringIO()
        configure_logging(json_output=True, stream=stream)
        structlog.get_logger("fact_graph.test").info("graphs_generated", documents=3)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "graphs_generated"
        assert record["documents"] == 3
        assert record["level"] == "info"

    def test_level_filters_lower_levels(self):
        stream = io.StringIO()
        configure_logging(log_level="WARNING", stream=stream)
        structlog.get_logger("fact_graph.test").info("hidden")
        logging.getLogger("fact_graph.test").warning("shown")
        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_logs_go_to_stderr_by_default(self):
        configure_logging()
        (handler,) = logging.getLogger().handlers
        assert handler.stream is sys.stderr
