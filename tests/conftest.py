"""Shared fixtures and fakes for the thai_anki test suite."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from thai_anki.dictionary.thai_dict import DictionaryEntry


SAMPLE_RECORDS = [
    {"search": "ดี", "result": "good", "type": "ADJ", "relate": ["เลว"]},
    {"search": "ดี", "result": "fine", "type": "ADV", "relate": []},
    {"search": "บ้าน", "result": "house", "type": "N"},
    {"search": "กิน", "result": "eat", "type": "V", "synonym": "ทาน, รับประทาน"},
]


class FakeDictionary:
    """In-memory dictionary with optional failures and delays per word."""

    def __init__(
            self,
            entries: Optional[Dict[str, List[DictionaryEntry]]] = None,
            failing: Optional[set] = None,
            delays: Optional[Dict[str, float]] = None,
    ):
        self.entries = entries or {}
        self.failing = failing or set()
        self.delays = delays or {}
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.initialized = False

    async def init(self) -> None:
        self.initialized = True

    async def search(self, word: str) -> List[DictionaryEntry]:
        self.calls.append(word)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(word, 0))
            if word in self.failing:
                raise ConnectionError(f"dictionary unavailable for {word}")
            return list(self.entries.get(word, []))
        finally:
            self.in_flight -= 1


def entries_for(*records: dict) -> List[DictionaryEntry]:
    return [DictionaryEntry.model_validate(record) for record in records]


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """setup_logging() binds a handler to the current stderr; undo it after each test."""
    package_logger = logging.getLogger("thai_anki")
    handlers = list(package_logger.handlers)
    level, propagate = package_logger.level, package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


@pytest.fixture
def fake_dictionary():
    return FakeDictionary(
        entries={
            "ดี": entries_for(*SAMPLE_RECORDS[:2]),
            "บ้าน": entries_for(SAMPLE_RECORDS[2]),
        }
    )


@pytest.fixture
def fake_dictionary_factory(fake_dictionary):
    """Async context manager factory compatible with open_dictionary."""

    @asynccontextmanager
    async def factory(path):
        await fake_dictionary.init()
        yield fake_dictionary

    return factory


@pytest.fixture
def dictionary_file(tmp_path) -> Path:
    path = tmp_path / "lexitron.jsonl"
    path.write_text(
        "\n".join(json.dumps(record, ensure_ascii=False) for record in SAMPLE_RECORDS) + "\n",
        encoding="utf-8",
    )
    return path
