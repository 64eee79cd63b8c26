#!/usr/bin/env python3
"""
Letter N-gram Model
===================
Builds the table of "which character follows this context" counts that word
generation samples from.

For a word and an order k, every window of k+1 consecutive characters is
split into a context (the first k characters) and a successor (the last one).
The same is done for every order from k down to 1, so the table holds a full
backoff ladder: {"c": {"a": 3}, "ca": {"t": 1, "r": 1}, ...}.

Normalization is deliberately thin: words are lower-cased and hyphens are
removed. Apostrophes, digits and anything else stay in and become part of
contexts. Line terminators are never counted as successors, whether the words
came from a file or from a list.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

LINE_TERMINATORS = frozenset('\r\n')


def normalize_word(word: str) -> str:
    """Lower-case and drop hyphens. Nothing else is touched."""
    return word.lower().replace('-', '')


def read_corpus(path: Union[str, Path]) -> Iterator[str]:
    """
    Stream a one-word-per-line corpus file.

    Lines are yielded with their line endings; ModelBuilder filters those out.
    Undecodable bytes are carried through as surrogate escapes rather than
    rejected.
    """
    path = Path(path)
    try:
        with open(path, encoding='utf-8', errors='surrogateescape', newline='') as f:
            yield from f
    except OSError as e:
        raise ConfigurationError(f"Cannot read corpus {path}: {e}") from e


@dataclass
class GramTable:
    """Successor counts per context, for every context length 1..order"""
    order: int
    grams: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def __post_init__(self):
        self._contexts: Optional[List[str]] = None

    def __len__(self) -> int:
        return len(self.grams)

    def __contains__(self, context: str) -> bool:
        return context in self.grams

    def contexts(self) -> List[str]:
        """All contexts, in insertion order. Cached; the table is not patched after building."""
        if self._contexts is None:
            self._contexts = list(self.grams)
        return self._contexts

    def successors(self, context: str) -> Optional[Dict[str, int]]:
        """Successor distribution for a context, or None if it was never seen."""
        return self.grams.get(context)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Serialize to the stored schema: {context: {char: count}}"""
        return {context: dict(counts) for context, counts in self.grams.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, int]], order: int) -> 'GramTable':
        """Deserialize a table stored with to_dict()"""
        grams = {
            str(context): {str(char): int(count) for char, count in counts.items()}
            for context, counts in data.items()
            if counts
        }
        return cls(order=order, grams=grams)


class ModelBuilder:
    """
    Counts letter n-grams over a corpus.

    Usage:
        table = ModelBuilder(order=2).build(['cat', 'car', 'can'])
        table.successors('a')   # {'t': 1, 'r': 1, 'n': 1}
    """

    def __init__(self, order: int = 2):
        if order < 1:
            raise ConfigurationError(f"gram order must be >= 1, got {order}")
        self.order = order

    def build(self, corpus: Iterable[str]) -> GramTable:
        """Build a GramTable from an iterable of words. Deterministic."""
        table = GramTable(order=self.order)
        words = 0
        for word in corpus:
            word = normalize_word(word)
            for size in range(self.order, 0, -1):
                self._count(table.grams, word, size)
            words += 1

        logger.info(
            f"Built order-{self.order} table: {len(table)} contexts from {words} words"
        )
        return table

    @staticmethod
    def _count(grams: Dict[str, Dict[str, int]], word: str, size: int):
        """Count every (context of `size` chars -> next char) window in `word`."""
        for i in range(len(word) - size):
            context = word[i:i + size]
            successor = word[i + size]
            if not context or not successor or successor in LINE_TERMINATORS:
                continue
            counts = grams.setdefault(context, {})
            counts[successor] = counts.get(successor, 0) + 1


def build(corpus: Iterable[str], order: int) -> GramTable:
    """Shorthand for ModelBuilder(order).build(corpus)"""
    return ModelBuilder(order).build(corpus)


__all__ = [
    'GramTable',
    'ModelBuilder',
    'build',
    'read_corpus',
    'normalize_word',
    'LINE_TERMINATORS',
]
