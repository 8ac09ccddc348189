"""thai_anki package.

Builds Anki decks of Thai vocabulary from PDF and DOCX documents:
- lexicon: text normalization, word segmentation and frequency ranking
- dictionary: Thai-English lexicon access and per-word definition resolution
- deck: card assembly and .apkg packaging
- pipelines.vocabulary: the end-to-end run
"""
