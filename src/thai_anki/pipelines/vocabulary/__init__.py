"""
Document to vocabulary deck pipeline.

This package extracts Thai text from a document, ranks its words by frequency,
resolves dictionary definitions and packages the result as an Anki deck.
"""

from .models import PipelineResult, PipelineStage
from .pipeline import build_vocabulary_deck, run_vocabulary_pipeline
