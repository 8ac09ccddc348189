"""
Word frequency aggregation.

Turns an ordered token stream into a frequency table and a ranked vocabulary:
unique words by descending count, ties broken by where each word first
appeared in the stream.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List


@dataclass
class FrequencyTable:
    """Occurrence counts plus the first-occurrence index of every word."""
    counts: Counter[str] = field(default_factory=Counter)
    first_index: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def add(self, token: str) -> None:
        if token not in self.first_index:
            self.first_index[token] = self.total
        self.counts[token] += 1
        self.total += 1

    def __len__(self) -> int:
        return len(self.first_index)

    def __contains__(self, word: object) -> bool:
        return word in self.first_index

    def count(self, word: str) -> int:
        return self.counts.get(word, 0)

    def ranked(self) -> List[str]:
        """Unique words by descending count; equal counts keep first-occurrence order."""
        return sorted(
            self.first_index,
            key=lambda word: (-self.counts[word], self.first_index[word]),
        )


def aggregate(tokens: Iterable[str]) -> FrequencyTable:
    """Count tokens in a single pass over the stream."""
    table = FrequencyTable()
    for token in tokens:
        table.add(token)
    return table
