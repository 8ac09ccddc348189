"""
Document → vocabulary deck pipeline.

Stages run strictly in order:
EXTRACTING → NORMALIZING → SEGMENTING → AGGREGATING → RESOLVING → BUILDING → DONE.
A fatal error moves the run to FAILED and propagates. RESOLVING absorbs
per-word lookup failures and therefore never fails the run.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from pathlib import Path
from typing import Callable, Dict, List, Optional

from thai_anki.common.errors import ConfigurationError
from thai_anki.config_models import DeckPipelineConfig
from thai_anki.deck.builder import (
    CARDS_JSON_SUFFIX,
    build_cards,
    build_deck,
    output_path_for,
    write_cards_json,
    write_package,
)
from thai_anki.dictionary.resolver import DefinitionResolver
from thai_anki.dictionary.thai_dict import DictionaryClient, open_dictionary
from thai_anki.extraction.documents import check_file_type, extract_text
from thai_anki.lexicon.frequency import aggregate
from thai_anki.lexicon.segmenter import segment
from thai_anki.lexicon.text_processor import normalize_extracted_text
from thai_anki.pipelines.vocabulary.models import PipelineResult, PipelineStage

logger = logging.getLogger(__name__)

DictionaryFactory = Callable[[Path], AbstractAsyncContextManager[DictionaryClient]]


class _StageTracker:
    def __init__(self, result: PipelineResult) -> None:
        self.result = result

    def enter(self, stage: PipelineStage) -> None:
        self.result.stage = stage
        self.result.history.append(stage)
        logger.info(f"Stage: {stage.value}", extra={"source": self.result.source.name})

    def fail(self) -> None:
        failed_in = self.result.stage
        self.result.stage = PipelineStage.FAILED
        self.result.history.append(PipelineStage.FAILED)
        logger.error("Pipeline failed", extra={"stage": failed_in.value})


async def build_vocabulary_deck(
        source: str | Path,
        config: DeckPipelineConfig,
        *,
        extractor: Callable[[Path], str] = extract_text,
        segmenter: Callable[..., List[str]] = segment,
        dictionary_factory: DictionaryFactory = open_dictionary,
) -> PipelineResult:
    """Run the whole pipeline for one document and write its .apkg package.

    Args:
        source: Path to the PDF or DOCX document
        config: Validated pipeline configuration
        extractor: Document text extractor (raises on unsupported or unreadable files)
        segmenter: Word segmenter called as segmenter(text, engine=...)
        dictionary_factory: Async context manager yielding an initialized dictionary

    Returns:
        PipelineResult describing the run
    """
    source = Path(source)
    result = PipelineResult(source=source)
    stages = _StageTracker(result)

    check_file_type(source)
    if config.mode == "definitions":
        dictionary_path = config.dictionary_path
        if dictionary_path is None or not dictionary_path.is_file():
            raise ConfigurationError(f"Dictionary file not found: {dictionary_path}")

    async with AsyncExitStack() as stack:
        dictionary: Optional[DictionaryClient] = None
        if config.mode == "definitions":
            # Held open from before EXTRACTING through RESOLVING.
            dictionary = await stack.enter_async_context(dictionary_factory(config.dictionary_path))

        try:
            stages.enter(PipelineStage.EXTRACTING)
            raw_text = await asyncio.to_thread(extractor, source)

            stages.enter(PipelineStage.NORMALIZING)
            text = normalize_extracted_text(raw_text)
            logger.debug("Normalized text", extra={"raw_chars": len(raw_text), "kept_chars": len(text)})

            stages.enter(PipelineStage.SEGMENTING)
            tokens = await asyncio.to_thread(segmenter, text, engine=config.segmenter_engine)

            stages.enter(PipelineStage.AGGREGATING)
            table = aggregate(tokens)
            vocabulary = table.ranked()
            result.token_count = table.total
            result.unique_words = len(vocabulary)
            logger.info("Aggregated words", extra={"tokens": table.total, "unique": len(vocabulary)})

            definitions: Dict[str, str] = {}
            if dictionary is not None:
                stages.enter(PipelineStage.RESOLVING)
                resolver = DefinitionResolver(dictionary, config.lookup)
                definitions = await resolver.resolve_all(vocabulary)
                result.resolved_definitions = sum(1 for definition in definitions.values() if definition)

            stages.enter(PipelineStage.BUILDING)
            cards = build_cards(
                vocabulary,
                config.mode,
                definitions=definitions,
                table=table,
                placeholder=config.placeholder,
                count_format=config.count_format,
            )
            deck = build_deck(source.name, cards)
            output_path = output_path_for(source)
            result.output_path = await asyncio.to_thread(write_package, deck, output_path)
            if config.export_json:
                result.cards_json_path = await asyncio.to_thread(
                    write_cards_json, cards, output_path_for(source, CARDS_JSON_SUFFIX)
                )
        except Exception:
            stages.fail()
            raise

    stages.enter(PipelineStage.DONE)
    return result


def run_vocabulary_pipeline(source: str | Path, config: DeckPipelineConfig, **collaborators) -> PipelineResult:
    """Synchronous entry point around build_vocabulary_deck."""
    return asyncio.run(build_vocabulary_deck(source, config, **collaborators))
