"""Error taxonomy for the fact graph clustering pipeline.

``ExtractionError`` is scoped to a single document and may be recovered
from by skipping that document.  ``ConfigurationError`` and
``EmptyCorpusError`` are structural: they abort a run before any output
is written.
"""

from __future__ import annotations


class FactGraphError(Exception):
    """Base class for all pipeline errors."""


class ExtractionError(FactGraphError):
    """A document could not be read or turned into facts."""

    def __init__(self, document_name: str, reason: str) -> None:
        self.document_name = document_name
        self.reason = reason
        super().__init__(document_name, reason)

    def __str__(self) -> str:
        return f"Cannot extract facts from {self.document_name!r}: {self.reason}"


class ConfigurationError(FactGraphError):
    """Invalid cluster count, unknown strategy, or unreadable config."""


class EmptyCorpusError(FactGraphError):
    """The corpus contains no documents."""
