"""Exception hierarchy for the deck pipeline.

Only ``LookupFailure`` is recoverable: the definition resolver absorbs it per
word. Everything else aborts the run and is reported by the CLI.
"""
from __future__ import annotations


class ThaiAnkiError(Exception):
    pass


class MissingFilenameError(ThaiAnkiError):
    def __init__(self) -> None:
        super().__init__("no file provided")


class UnsupportedFileTypeError(ThaiAnkiError):
    def __init__(self, suffix: str) -> None:
        self.suffix = suffix
        super().__init__(f"unsupported file type: {suffix}")


class ExtractionError(ThaiAnkiError):
    pass


class LookupFailure(ThaiAnkiError):
    def __init__(self, word: str, reason: str) -> None:
        self.word = word
        self.reason = reason
        super().__init__(f"lookup failed for word {word!r}: {reason}")


class SerializationError(ThaiAnkiError):
    pass


class DictionaryNotReadyError(ThaiAnkiError):
    pass


class ConfigurationError(ThaiAnkiError):
    pass
