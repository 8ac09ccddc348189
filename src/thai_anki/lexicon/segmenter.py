"""
Thai word segmentation backed by PyThaiNLP.
"""
from __future__ import annotations

import logging
from typing import List

from pythainlp.tokenize import word_tokenize

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "newmm"


def segment(text: str, engine: str = DEFAULT_ENGINE) -> List[str]:
    """Split Thai text into word tokens, preserving their order in the text.

    Whitespace and empty tokens are dropped so every returned token is a
    non-empty word.
    """
    if not text:
        return []
    raw_tokens = word_tokenize(text, engine=engine, keep_whitespace=False)
    tokens = [token for token in raw_tokens if token and token.strip()]
    logger.debug("Segmented text", extra={"engine": engine, "tokens": len(tokens)})
    return tokens
