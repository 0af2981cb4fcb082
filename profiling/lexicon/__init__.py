"""Lexicon (LIWC-style) signal extraction."""

from .extractor import (
    LexiconSignalExtractor,
    LexiconAnalysis,
    LexiconSignal,
    tokenize,
    find_matches,
    normalize,
    sample_size_confidence,
)

__all__ = [
    "LexiconSignalExtractor",
    "LexiconAnalysis",
    "LexiconSignal",
    "tokenize",
    "find_matches",
    "normalize",
    "sample_size_confidence",
]
