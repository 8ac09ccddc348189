"""
Flashcard deck assembly and .apkg packaging.
"""

from .builder import build_cards, build_deck, output_path_for, write_cards_json, write_package
from .models import Card, VocabularyDeck
