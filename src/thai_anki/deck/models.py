"""
Data models for vocabulary cards and the deck that packages them.
"""
from __future__ import annotations

import hashlib
import io
from dataclasses import asdict, dataclass, field
from typing import Dict, List

import genanki

# Fixed so that re-imported decks keep using the same note type in Anki.
BASIC_MODEL_ID = 1607392319

BASIC_MODEL = genanki.Model(
    BASIC_MODEL_ID,
    "thai-anki Basic",
    fields=[
        {"name": "Front"},
        {"name": "Back"},
    ],
    templates=[
        {
            "name": "Card 1",
            "qfmt": "{{Front}}",
            "afmt": '{{FrontSide}}<hr id="answer">{{Back}}',
        },
    ],
)


@dataclass(frozen=True)
class Card:
    """A single flashcard: the word on the front, its definition or count on the back."""
    front: str
    back: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def deck_id_for(name: str) -> int:
    """Stable deck id derived from the deck name."""
    digest = hashlib.md5(name.encode("utf-8")).hexdigest()
    return (1 << 30) + int(digest[:8], 16) % (1 << 30)


@dataclass
class VocabularyDeck:
    """Ordered cards named after the source document."""
    name: str
    cards: List[Card] = field(default_factory=list)

    def add_card(self, front: str, back: str) -> None:
        self.cards.append(Card(front=front, back=back))

    def __len__(self) -> int:
        return len(self.cards)

    def to_genanki(self) -> genanki.Deck:
        deck = genanki.Deck(deck_id_for(self.name), self.name)
        for card in self.cards:
            deck.add_note(genanki.Note(model=BASIC_MODEL, fields=[card.front, card.back]))
        return deck

    def save(self) -> bytes:
        """Serialize the deck to the bytes of an .apkg package."""
        buffer = io.BytesIO()
        genanki.Package(self.to_genanki()).write_to_file(buffer)
        return buffer.getvalue()
