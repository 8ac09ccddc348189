"""
Lexicon package: from extracted document text to a ranked vocabulary.

This package provides functionality for:
- Filtering extracted text down to Thai-only lines
- Segmenting Thai text into words
- Counting and ranking unique words
"""

from .frequency import FrequencyTable, aggregate
from .segmenter import segment
from .text_processor import ALLOWED_CHARACTERS, is_allowed_line, normalize_extracted_text

__all__ = [
    "FrequencyTable",
    "aggregate",
    "segment",
    "ALLOWED_CHARACTERS",
    "is_allowed_line",
    "normalize_extracted_text",
]
