"""
Thai → English dictionary access and per-word definition resolution.
"""

from .resolver import DefinitionResolver, format_definition
from .thai_dict import DictionaryClient, DictionaryEntry, ThaiDictionary, open_dictionary

__all__ = [
    "DefinitionResolver",
    "format_definition",
    "DictionaryClient",
    "DictionaryEntry",
    "ThaiDictionary",
    "open_dictionary",
]
