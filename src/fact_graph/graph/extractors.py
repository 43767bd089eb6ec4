"""Fact extraction strategies.

Each strategy turns a cleaned ``Document`` into an ordered list of
``Fact`` objects.  Strategies are pure: the same document always yields
the same facts in the same order.  Iteration is over the document's own
ordering only, never over sets or dicts keyed by content.
"""

from __future__ import annotations

from typing import Protocol

from fact_graph.errors import ConfigurationError
from fact_graph.graph.model import Fact
from fact_graph.pipeline.config import ExtractionConfig, TierWeights
from fact_graph.preprocessing.document import Document

MENTIONS = "mentions"
CO_OCCURS = "co_occurs"
LINKED = "linked"
SAME_SENTENCE = "same_sentence"
SAME_PARAGRAPH = "same_paragraph"
SAME_DOCUMENT = "same_document"

# Predicates whose direction carries no meaning
SYMMETRIC_PREDICATES = frozenset(
    {CO_OCCURS, LINKED, SAME_SENTENCE, SAME_PARAGRAPH, SAME_DOCUMENT}
)


class Extractor(Protocol):
    """Capability interface for fact extraction."""

    def extract(self, document: Document) -> list[Fact]: ...


class SentenceCooccurrenceExtractor:
    """Counts term pairings within sentences.

    Every ordered pair of term occurrences ``i < j`` in a sentence yields
    a ``co_occurs`` fact from the earlier to the later term, and every
    occurrence yields a ``mentions`` self-fact.  A sentence containing a
    pairing several times counts it several times ("cat dog dog" relates
    cat and dog twice).
    """

    def extract(self, document: Document) -> list[Fact]:
        facts: list[Fact] = []
        for p, paragraph in enumerate(document.paragraphs):
            for s, sentence in enumerate(paragraph):
                position = (p, s)
                for i, term in enumerate(sentence):
                    facts.append(Fact(term, MENTIONS, term, 1.0, position))
                    for other in sentence[i + 1 :]:
                        facts.append(Fact(term, CO_OCCURS, other, 1.0, position))
        return facts


class HierarchicalExtractor:
    """Relates every pair of term occurrences by their tightest shared tier.

    Pairs in the same sentence get ``same_sentence``, pairs in the same
    paragraph ``same_paragraph``, all remaining pairs ``same_document``;
    each occurrence relates to itself through ``mentions``.  Fact weights
    come from ``TierWeights`` and zero-weight facts are not emitted.
    """

    def __init__(self, weights: TierWeights | None = None) -> None:
        self.weights = weights or TierWeights()

    def extract(self, document: Document) -> list[Fact]:
        w = self.weights
        occurrences = [
            (term, p, s)
            for p, paragraph in enumerate(document.paragraphs)
            for s, sentence in enumerate(paragraph)
            for term in sentence
        ]
        facts: list[Fact] = []
        for i, (term, p, s) in enumerate(occurrences):
            if w.self_pair:
                facts.append(Fact(term, MENTIONS, term, w.self_pair, (p, s)))
            for other, op, os_ in occurrences[i + 1 :]:
                if op == p and os_ == s:
                    predicate, weight, position = SAME_SENTENCE, w.sentence, (p, s)
                elif op == p:
                    predicate, weight, position = SAME_PARAGRAPH, w.paragraph, None
                else:
                    predicate, weight, position = SAME_DOCUMENT, w.document, None
                if weight:
                    facts.append(Fact(term, predicate, other, weight, position))
        return facts


class SentenceLinkExtractor:
    """Links terms that co-occur in at least one sentence.

    Emits one unweighted ``linked`` fact per distinct unordered term pair,
    in order of first co-occurrence.  Repeated terms within a sentence
    are not linked to themselves.
    """

    def extract(self, document: Document) -> list[Fact]:
        seen: set[tuple[str, str]] = set()
        facts: list[Fact] = []
        for p, paragraph in enumerate(document.paragraphs):
            for s, sentence in enumerate(paragraph):
                for i, term in enumerate(sentence):
                    for other in sentence[i + 1 :]:
                        if other == term:
                            continue
                        key = (term, other) if term < other else (other, term)
                        if key in seen:
                            continue
                        seen.add(key)
                        facts.append(Fact(term, LINKED, other, 1.0, (p, s)))
        return facts


def make_extractor(config: ExtractionConfig) -> Extractor:
    """Instantiate the extraction strategy named in ``config``.

    Raises:
        ConfigurationError: If the strategy name is unknown.
    """
    if config.strategy == "sentence_cooccurrence":
        return SentenceCooccurrenceExtractor()
    if config.strategy == "hierarchical":
        return HierarchicalExtractor(config.tier_weights)
    if config.strategy == "sentence_link":
        return SentenceLinkExtractor()
    raise ConfigurationError(f"Unknown extraction strategy: {config.strategy!r}")
