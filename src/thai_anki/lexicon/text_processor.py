"""
Text Processor

Filters raw text extracted from a document down to the lines written entirely
in Thai script (plus digits and a little punctuation) before segmentation.
"""

from typing import FrozenSet

# Thai characters of the Kedmanee keyboard layout: consonants, vowels,
# tone marks, Thai digits and the baht sign.
THAI_CHARACTERS = (
    "ๅภถุึคตจขชๆไำพะัีรนยบลฃฟหกดเ้่าสวงผปแอิืทมใฝ"
    "๑๒๓๔ู฿๕๖๗๘๙๐ฎฑธํ๊ณฯญฐฅฤฆฏโฌ็๋ษศซฉฮฺ์ฒฬฦ"
)
ASCII_DIGITS = "0123456789"
PUNCTUATION = "/\\ ."

# Tab is not allowed: a line containing one is dropped whole, so the tab
# strip in normalize_extracted_text never finds anything in kept lines.
ALLOWED_CHARACTERS: FrozenSet[str] = frozenset(THAI_CHARACTERS + ASCII_DIGITS + PUNCTUATION)


def is_allowed_line(line: str) -> bool:
    """
    Check whether every character of a line is in the allow-list.

    The empty line is allowed.

    Args:
        line (str): A single line without its line terminator

    Returns:
        bool: True if the line should be kept
    """
    return all(char in ALLOWED_CHARACTERS for char in line)


def normalize_extracted_text(raw_text: str) -> str:
    """
    Normalize text returned by a document extractor.

    This function:
    1. Splits the text into lines
    2. Drops every line containing at least one character outside the allow-list
       (the whole line goes, even if only one character is foreign)
    3. Joins the remaining lines with no separator
    4. Removes tab characters (a no-op after step 2, since tab is not allowed)

    Args:
        raw_text (str): The raw extracted text

    Returns:
        str: Thai-only text suitable for word segmentation
    """
    kept_lines = [line for line in raw_text.splitlines() if is_allowed_line(line)]
    return ''.join(kept_lines).replace('\t', '')
