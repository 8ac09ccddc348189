"""Tests for the end-to-end vocabulary deck pipeline."""

import zipfile
from contextlib import asynccontextmanager

import pytest

from thai_anki.common.errors import (
    ConfigurationError,
    ExtractionError,
    SerializationError,
    UnsupportedFileTypeError,
)
from thai_anki.config_models import DeckPipelineConfig
from thai_anki.deck import builder
from thai_anki.deck.models import Card
from thai_anki.extraction.documents import extract_text
from thai_anki.pipelines.vocabulary import PipelineStage, pipeline, run_vocabulary_pipeline


EXTRACTED = "Lesson 1\nดี ไม่ดี\nดี\tgood\nดี ดี ไม่ดี\n"
TOKENS = ["ดี", "ไม่ดี", "ดี", "ดี", "ไม่ดี"]


def fake_segmenter(text, engine="newmm"):
    assert text == "ดี ไม่ดีดี ดี ไม่ดี"
    return list(TOKENS)


def fake_extractor(path):
    return EXTRACTED


@pytest.fixture
def captured_cards(monkeypatch):
    """Record the cards handed to the package writer."""
    captured = []
    original = builder.build_deck

    def spy(name, cards):
        captured.append((name, list(cards)))
        return original(name, cards)

    monkeypatch.setattr("thai_anki.pipelines.vocabulary.pipeline.build_deck", spy)
    return captured


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "lesson.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return path


class TestDefinitionsMode:
    """Test a full run with dictionary definitions."""

    def test_example_scenario(self, source, dictionary_file, fake_dictionary_factory, fake_dictionary,
                              captured_cards):
        config = DeckPipelineConfig(dictionary_path=dictionary_file)
        result = run_vocabulary_pipeline(
            source,
            config,
            extractor=fake_extractor,
            segmenter=fake_segmenter,
            dictionary_factory=fake_dictionary_factory,
        )

        assert result.stage is PipelineStage.DONE
        assert result.output_path == source.parent / "lesson.pdf.apkg"
        assert zipfile.is_zipfile(result.output_path)
        assert result.token_count == 5
        assert result.unique_words == 2
        assert result.resolved_definitions == 1
        assert fake_dictionary.initialized
        assert captured_cards == [(
            "lesson.pdf",
            [Card("ดี", "[ADJ] good, fine (เลว)"), Card("ไม่ดี", "(no definition)")],
        )]
        assert result.history == [
            PipelineStage.EXTRACTING,
            PipelineStage.NORMALIZING,
            PipelineStage.SEGMENTING,
            PipelineStage.AGGREGATING,
            PipelineStage.RESOLVING,
            PipelineStage.BUILDING,
            PipelineStage.DONE,
        ]

    def test_lookup_failures_never_fail_the_run(self, source, dictionary_file, fake_dictionary_factory,
                                                fake_dictionary, captured_cards):
        fake_dictionary.failing = {"ดี", "ไม่ดี"}
        result = run_vocabulary_pipeline(
            source,
            DeckPipelineConfig(dictionary_path=dictionary_file),
            extractor=fake_extractor,
            segmenter=fake_segmenter,
            dictionary_factory=fake_dictionary_factory,
        )
        assert result.stage is PipelineStage.DONE
        assert [card.back for card in captured_cards[0][1]] == ["(no definition)", "(no definition)"]

    def test_real_dictionary_file(self, source, dictionary_file, captured_cards):
        result = run_vocabulary_pipeline(
            source,
            DeckPipelineConfig(dictionary_path=dictionary_file),
            extractor=fake_extractor,
            segmenter=fake_segmenter,
        )
        assert result.stage is PipelineStage.DONE
        assert captured_cards[0][1][0] == Card("ดี", "[ADJ] good, fine (เลว)")

    def test_missing_dictionary_fails_before_extraction(self, source, tmp_path):
        calls = []
        config = DeckPipelineConfig(dictionary_path=tmp_path / "missing.jsonl")
        with pytest.raises(ConfigurationError):
            run_vocabulary_pipeline(source, config, extractor=calls.append, segmenter=fake_segmenter)
        assert calls == []

    def test_cards_json_export(self, source, dictionary_file, fake_dictionary_factory):
        config = DeckPipelineConfig(dictionary_path=dictionary_file, export_json=True)
        result = run_vocabulary_pipeline(
            source,
            config,
            extractor=fake_extractor,
            segmenter=fake_segmenter,
            dictionary_factory=fake_dictionary_factory,
        )
        assert result.cards_json_path == source.parent / "lesson.pdf.cards.json"
        assert result.cards_json_path.exists()


class TestCountsOnlyMode:
    """Test a run without a dictionary."""

    def test_counts_on_back_and_no_resolving(self, source, captured_cards):
        def no_dictionary(path):
            raise AssertionError("dictionary must not be opened in counts-only mode")

        result = run_vocabulary_pipeline(
            source,
            DeckPipelineConfig(mode="counts-only"),
            extractor=fake_extractor,
            segmenter=fake_segmenter,
            dictionary_factory=no_dictionary,
        )
        assert PipelineStage.RESOLVING not in result.history
        assert captured_cards[0][1] == [Card("ดี", "3 occurrences"), Card("ไม่ดี", "2 occurrences")]

    def test_empty_document_gives_empty_deck(self, source, captured_cards):
        result = run_vocabulary_pipeline(
            source,
            DeckPipelineConfig(mode="counts-only"),
            extractor=lambda path: "English only\n",
            segmenter=lambda text, engine: [],
        )
        assert result.stage is PipelineStage.DONE
        assert result.unique_words == 0
        assert captured_cards[0][1] == []


class TestFailures:
    """Test fatal errors and the FAILED state."""

    def test_unsupported_file_type_writes_nothing(self, tmp_path):
        source = tmp_path / "report.txt"
        source.write_text("ดี", encoding="utf-8")
        with pytest.raises(UnsupportedFileTypeError):
            run_vocabulary_pipeline(source, DeckPipelineConfig(mode="counts-only"), extractor=extract_text)
        assert not (tmp_path / "report.txt.apkg").exists()

    def test_extraction_error_propagates(self, source):
        def broken(path):
            raise ExtractionError("corrupt")

        with pytest.raises(ExtractionError):
            run_vocabulary_pipeline(source, DeckPipelineConfig(mode="counts-only"), extractor=broken)

    def test_serialization_error_propagates(self, source, monkeypatch):
        def broken_write(deck, path):
            raise SerializationError("disk full")

        monkeypatch.setattr("thai_anki.pipelines.vocabulary.pipeline.write_package", broken_write)
        with pytest.raises(SerializationError):
            run_vocabulary_pipeline(
                source,
                DeckPipelineConfig(mode="counts-only"),
                extractor=fake_extractor,
                segmenter=fake_segmenter,
            )
        assert not (source.parent / "lesson.pdf.apkg").exists()

    def test_unsupported_file_type_checked_before_dictionary(self, tmp_path):
        """The suffix is rejected even when the dictionary is unusable."""
        source = tmp_path / "report.txt"
        source.write_text("ดี", encoding="utf-8")
        config = DeckPipelineConfig(dictionary_path=tmp_path / "missing.jsonl")
        with pytest.raises(UnsupportedFileTypeError):
            run_vocabulary_pipeline(source, config)


class TestDictionaryAcquisition:
    """Test that the dictionary is loaded before any stage runs."""

    def test_corrupt_dictionary_fails_before_extraction(self, source, tmp_path):
        corrupt = tmp_path / "dict.json"
        corrupt.write_text("{not json", encoding="utf-8")
        calls = []

        with pytest.raises(ConfigurationError, match="Failed to load dictionary"):
            run_vocabulary_pipeline(
                source,
                DeckPipelineConfig(dictionary_path=corrupt),
                extractor=calls.append,
                segmenter=fake_segmenter,
            )
        assert calls == []
        assert not (source.parent / "lesson.pdf.apkg").exists()

    def test_failed_acquisition_enters_no_stage(self, source, dictionary_file, monkeypatch):
        results = []
        original = pipeline.PipelineResult

        def recording_result(**kwargs):
            results.append(original(**kwargs))
            return results[-1]

        @asynccontextmanager
        async def broken_factory(path):
            raise ConfigurationError("lexicon unreadable")
            yield

        monkeypatch.setattr(pipeline, "PipelineResult", recording_result)
        with pytest.raises(ConfigurationError):
            run_vocabulary_pipeline(
                source,
                DeckPipelineConfig(dictionary_path=dictionary_file),
                extractor=fake_extractor,
                segmenter=fake_segmenter,
                dictionary_factory=broken_factory,
            )
        assert results[0].stage is PipelineStage.PENDING
        assert results[0].history == []

    def test_dictionary_open_through_resolving_and_closed_after(self, source, dictionary_file, fake_dictionary):
        events = []

        @asynccontextmanager
        async def tracking_factory(path):
            events.append("open")
            await fake_dictionary.init()
            yield fake_dictionary
            events.append("close")

        def tracking_extractor(path):
            events.append("extract")
            return EXTRACTED

        result = run_vocabulary_pipeline(
            source,
            DeckPipelineConfig(dictionary_path=dictionary_file),
            extractor=tracking_extractor,
            segmenter=fake_segmenter,
            dictionary_factory=tracking_factory,
        )
        assert events == ["open", "extract", "close"]
        assert fake_dictionary.calls == ["ดี", "ไม่ดี"]
        assert result.resolved_definitions == 1
