"""
File-backed Thai → English dictionary.

Records follow the LEXiTRON export layout: one object per sense with the keys
``search`` (Thai headword), ``result`` (English translation), ``type`` (part
of speech) and optional ``synonym``, ``antonym``, ``relate``, ``sample`` and
``tag``. A file may be a JSON array, JSON lines, or gzipped JSON lines.
"""
from __future__ import annotations

import asyncio
import gzip
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Iterable, List, Optional, Protocol

from pydantic import BaseModel, Field, ValidationError, field_validator

from thai_anki.common.errors import ConfigurationError, DictionaryNotReadyError

logger = logging.getLogger(__name__)


class DictionaryEntry(BaseModel):
    """One candidate translation for a Thai headword."""
    search: str = Field(..., description="Thai headword")
    result: str = Field(default="", description="English translation")
    type: str = Field(default="", description="Part of speech")
    synonym: List[str] = Field(default_factory=list)
    antonym: List[str] = Field(default_factory=list)
    relate: List[str] = Field(default_factory=list, description="Related words")
    sample: str = Field(default="")
    tag: List[str] = Field(default_factory=list)

    @field_validator("synonym", "antonym", "relate", "tag", mode="before")
    @classmethod
    def _split_list(cls, value):
        # Some exports store these as a single comma separated string.
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("result", "type", "sample", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class DictionaryClient(Protocol):
    """What the definition resolver needs from a dictionary."""

    async def init(self) -> None: ...

    async def search(self, word: str) -> List[DictionaryEntry]: ...


class ThaiDictionary:
    """Process-wide lexicon loaded once and shared read-only by all lookups."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._index: Optional[Dict[str, List[DictionaryEntry]]] = None

    @property
    def ready(self) -> bool:
        return self._index is not None

    def __len__(self) -> int:
        return len(self._index) if self._index is not None else 0

    async def init(self) -> None:
        """Load the index. Calling it again after a successful load does nothing."""
        if self._index is not None:
            return
        self._index = await asyncio.to_thread(self._build_index)

    async def close(self) -> None:
        self._index = None

    async def search(self, word: str) -> List[DictionaryEntry]:
        if self._index is None:
            raise DictionaryNotReadyError("dictionary searched before init() completed")
        return list(self._index.get(word.strip(), ()))

    def _build_index(self) -> Dict[str, List[DictionaryEntry]]:
        logger.info("Loading dictionary", extra={"path": str(self.path)})
        index: Dict[str, List[DictionaryEntry]] = {}
        skipped = 0
        try:
            for record in self._iter_records():
                try:
                    entry = DictionaryEntry.model_validate(record)
                except ValidationError:
                    skipped += 1
                    continue
                headword = entry.search.strip()
                if not headword:
                    skipped += 1
                    continue
                index.setdefault(headword, []).append(entry)
        except (OSError, EOFError, ValueError) as e:
            raise ConfigurationError(f"Failed to load dictionary {self.path}: {e}") from e
        logger.info(
            "Loaded dictionary",
            extra={"headwords": len(index), "skipped": skipped or None},
        )
        return index

    def _iter_records(self) -> Iterable[dict]:
        name = self.path.name.lower()
        if name.endswith(".json"):
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError(f"Expected a JSON array of entries in {self.path}")
            yield from (item for item in data if isinstance(item, dict))
            return

        if name.endswith(".gz"):
            handle = gzip.open(self.path, "rt", encoding="utf-8")
        else:
            handle = open(self.path, "rt", encoding="utf-8")
        with handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    blob = json.loads(line)
                except json.JSONDecodeError:
                    logger.debug("Skipping malformed json line")
                    continue
                if isinstance(blob, dict):
                    yield blob


@asynccontextmanager
async def open_dictionary(path: Path) -> AsyncIterator[ThaiDictionary]:
    """Initialize the dictionary and release it when the scope exits."""
    dictionary = ThaiDictionary(path)
    await dictionary.init()
    try:
        yield dictionary
    finally:
        await dictionary.close()
