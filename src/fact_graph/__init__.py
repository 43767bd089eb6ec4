"""Document clustering by structural fact graphs."""

__version__ = "0.1.0"
