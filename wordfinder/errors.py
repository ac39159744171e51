from __future__ import annotations

class WordFinderError(Exception):
    """Base class for errors raised by the word finder."""

class GenerationCancelled(WordFinderError):
    """A generation was abandoned through its cancel flag before finishing."""

class SearchRejected(WordFinderError):
    """The search manager refused the request before doing any work."""
