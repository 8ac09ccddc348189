"""
Definition resolution for a ranked vocabulary.

Every word gets exactly one definition string. A word whose lookup fails,
times out or returns nothing gets the empty string; that never affects any
other word.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Sequence

from thai_anki.common.errors import LookupFailure
from thai_anki.common.reliability import async_retry_invoke
from thai_anki.config_models import LookupConfig
from thai_anki.dictionary.thai_dict import DictionaryClient, DictionaryEntry

logger = logging.getLogger(__name__)


def format_definition(entries: Sequence[DictionaryEntry]) -> str:
    """Render dictionary candidates as ``[type] result, result (related, related)``.

    Part of speech and related words come from the first candidate; the
    translations of all candidates are listed.
    """
    if not entries:
        return ""
    first = entries[0]
    translations = ", ".join(entry.result for entry in entries)
    definition = f"[{first.type}] {translations}"
    if first.relate:
        definition += f" ({', '.join(first.relate)})"
    return definition


class DefinitionResolver:
    """Resolves definitions through a dictionary that has already been initialized."""

    def __init__(self, dictionary: DictionaryClient, options: LookupConfig | None = None) -> None:
        self.dictionary = dictionary
        self.options = options or LookupConfig()
        self._cache: Dict[str, str] = {}

    async def lookup(self, word: str) -> List[DictionaryEntry]:
        """Query the dictionary with the configured timeout and retries.

        Raises:
            LookupFailure: no candidates, or every attempt failed
        """
        opts = self.options
        try:
            entries = await async_retry_invoke(
                lambda: self.dictionary.search(word),
                max_retries=opts.max_retries,
                backoff_initial_seconds=opts.backoff_initial_seconds,
                backoff_multiplier=opts.backoff_multiplier,
                timeout_seconds=opts.lookup_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise LookupFailure(word, "timed out") from e
        except Exception as e:
            raise LookupFailure(word, str(e) or type(e).__name__) from e
        if not entries:
            raise LookupFailure(word, "no results found")
        return list(entries)

    async def resolve(self, word: str) -> str:
        """Definition for a single word; the empty string when it cannot be resolved."""
        if word in self._cache:
            return self._cache[word]
        try:
            definition = format_definition(await self.lookup(word))
        except LookupFailure as e:
            logger.debug("No definition", extra={"word": word, "reason": e.reason})
            definition = ""
        else:
            logger.debug("Resolved definition", extra={"word": word, "definition": definition})
        self._cache[word] = definition
        return definition

    async def resolve_all(self, vocabulary: Sequence[str]) -> Dict[str, str]:
        """Resolve every word of the vocabulary.

        With max_concurrent_lookups == 1 each lookup completes before the next
        starts, in vocabulary order. A larger value runs a bounded pool; the
        returned mapping is the same either way and follows vocabulary order.
        """
        limit = self.options.max_concurrent_lookups
        if limit <= 1:
            for word in vocabulary:
                await self.resolve(word)
        else:
            semaphore = asyncio.Semaphore(limit)

            async def bounded(word: str) -> str:
                async with semaphore:
                    return await self.resolve(word)

            await asyncio.gather(*(bounded(word) for word in dict.fromkeys(vocabulary)))

        definitions = {word: self._cache[word] for word in vocabulary}
        resolved = sum(1 for definition in definitions.values() if definition)
        total = len(definitions)
        logger.info(
            "Definition coverage",
            extra={
                "resolved": resolved,
                "unknown": total - resolved,
                "coverage": f"{(resolved / total * 100) if total else 0.0:.1f}%",
            },
        )
        return definitions
