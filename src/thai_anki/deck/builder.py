"""
Deck assembly and package output.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from thai_anki.common.errors import SerializationError
from thai_anki.config_models import DEFAULT_PLACEHOLDER, DeckMode
from thai_anki.deck.models import Card, VocabularyDeck
from thai_anki.lexicon.frequency import FrequencyTable

logger = logging.getLogger(__name__)

PACKAGE_SUFFIX = ".apkg"
CARDS_JSON_SUFFIX = ".cards.json"


def output_path_for(source: str | Path, suffix: str = PACKAGE_SUFFIX) -> Path:
    """The package is written next to the source, with the suffix appended to its full name."""
    return Path(f"{source}{suffix}")


def build_cards(
        vocabulary: Sequence[str],
        mode: DeckMode = "definitions",
        definitions: Optional[Mapping[str, str]] = None,
        table: Optional[FrequencyTable] = None,
        *,
        placeholder: str = DEFAULT_PLACEHOLDER,
        count_format: str = "{count} occurrences",
) -> List[Card]:
    """One card per vocabulary word, in vocabulary order.

    Args:
        vocabulary: Ranked unique words
        mode: "definitions" or "counts-only"
        definitions: word -> definition ("" when unknown); used in definitions mode
        table: frequency table; required in counts-only mode
        placeholder: back text for words without a definition
        count_format: back text template in counts-only mode

    Returns:
        List of cards
    """
    if mode == "counts-only":
        if table is None:
            raise ValueError("counts-only mode needs the frequency table")
        return [Card(front=word, back=count_format.format(count=table.count(word))) for word in vocabulary]

    definitions = definitions or {}
    cards: List[Card] = []
    for word in vocabulary:
        definition = definitions.get(word, "")
        cards.append(Card(front=word, back=definition if definition else placeholder))
    return cards


def build_deck(name: str, cards: Sequence[Card]) -> VocabularyDeck:
    deck = VocabularyDeck(name=name)
    for card in cards:
        deck.add_card(card.front, card.back)
    return deck


def write_package(deck: VocabularyDeck, output_path: Path) -> Path:
    """Serialize the deck and write it to output_path.

    The package is fully built in memory before the file is opened, so a
    serialization failure never leaves a partial file behind.

    Raises:
        SerializationError: If packaging or writing fails
    """
    try:
        blob = deck.save()
    except Exception as e:
        raise SerializationError(f"Failed to package deck '{deck.name}': {e}") from e

    try:
        output_path.write_bytes(blob)
    except OSError as e:
        output_path.unlink(missing_ok=True)
        raise SerializationError(f"Failed to write package {output_path}: {e}") from e

    logger.info("Wrote package", extra={"path": str(output_path), "cards": len(deck), "bytes": len(blob)})
    return output_path


def write_cards_json(cards: Sequence[Card], output_path: Path) -> Path:
    """Save the cards to JSON for reference."""
    try:
        output_path.write_text(
            json.dumps([card.to_dict() for card in cards], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        raise SerializationError(f"Failed to write cards to {output_path}: {e}") from e
    return output_path
