#!/usr/bin/env python3
"""
Markov Word Generator
=====================
Generates pronounceable, made-up words from a letter n-gram table.

How a word is made:
1. Draw a target length uniformly from [min_length, max_length).
2. Pick a random context from the table as the opening letters. It must be
   at least min(gram_size, min_length) long and have a vowel in its first
   two letters.
3. Extend one letter at a time, looking up the last min(gram_size, len)
   letters and sampling the next letter by its recorded frequency.
4. Stop at the target length, or earlier if the current context was never
   followed by anything in the corpus. Early stops are normal output: on a
   small corpus (<1000 words or so) min_length can't be guaranteed.

Generated words can be served from a persisted cache, so the per-word cost is
amortized across a batch. The cache is consumed from the end (LIFO) and saved
after every pop.
"""

import dataclasses
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .entropy import RandomSource
from .errors import ConfigurationError, EmptyModelError, PersistenceError
from .grams import GramTable, ModelBuilder, read_corpus
from .settings import get_setting, resolve_path
from .store import FileStore

logger = logging.getLogger(__name__)

VOWELS = re.compile(r'[aeiou]')

CorpusSource = Union[str, os.PathLike, Sequence[str]]


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class GenerationConfig:
    """Generation parameters. Anything left as None is read from app.yaml (generator.*)."""
    corpus_source: Optional[CorpusSource] = None   # Path to a word list, or the words themselves
    gram_size: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None               # Exclusive bound on the target length
    caching_enabled: Optional[bool] = None
    cache_capacity: Optional[int] = None
    data_path: Optional[Union[str, os.PathLike]] = None
    cache_path: Optional[Union[str, os.PathLike]] = None
    flush_on_open: Optional[bool] = None
    max_attempts: Optional[int] = None             # Cap on reject-until-valid draws

    def __post_init__(self):
        cfg = get_setting("generator", {}) or {}
        given = {f.name for f in dataclasses.fields(self) if getattr(self, f.name) is not None}

        for name in ('corpus_source', 'gram_size', 'min_length', 'max_length',
                     'caching_enabled', 'cache_capacity', 'flush_on_open', 'max_attempts'):
            if name not in given:
                self._set(name, cfg.get(name))

        missing = [
            f.name for f in dataclasses.fields(self)
            if getattr(self, f.name) is None and f.name not in ('data_path', 'cache_path')
        ]
        if missing:
            raise ConfigurationError(f"generator settings missing in app.yaml: {', '.join(missing)}")

        self._validate()

        corpus = self.corpus_source
        if isinstance(corpus, (str, os.PathLike)):
            base = Path.cwd() if 'corpus_source' in given else None
            self._set('corpus_source', resolve_path(corpus, base))
        elif isinstance(corpus, (list, tuple)) and all(isinstance(w, str) for w in corpus):
            self._set('corpus_source', tuple(corpus))
        else:
            raise ConfigurationError(
                f"corpus_source must be a path or a sequence of words, got {type(corpus).__name__}"
            )

        data_dir = cfg.get('data_dir')
        for name, suffix in (('data_path', 'data'), ('cache_path', 'cache')):
            value = getattr(self, name)
            if value is not None:
                self._set(name, resolve_path(value, Path.cwd()))
            elif data_dir is None:
                raise ConfigurationError(f"generator.data_dir must be set in app.yaml (or pass {name})")
            else:
                self._set(name, resolve_path(data_dir) / f"markov_words_{self.gram_size}.{suffix}")

        # Caller-supplied values; replace() starts from these so store paths re-derive
        self._set('_given', {name: getattr(self, name) for name in given})

    def _set(self, name: str, value):
        object.__setattr__(self, name, value)

    def replace(self, **changes) -> 'GenerationConfig':
        """Copy with changes applied. Fields filled from app.yaml or derived are worked out again."""
        return GenerationConfig(**{**self._given, **changes})

    def _validate(self):
        for name in ('gram_size', 'min_length', 'max_length', 'cache_capacity', 'max_attempts'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.gram_size < 1:
            raise ConfigurationError(f"gram_size must be >= 1, got {self.gram_size}")
        if self.max_length < 2:
            raise ConfigurationError(f"max_length must be >= 2 (words have at least one letter), got {self.max_length}")
        if self.min_length < 0:
            raise ConfigurationError(f"min_length must be >= 0, got {self.min_length}")
        if self.min_length >= self.max_length:
            raise ConfigurationError(
                f"min_length ({self.min_length}) must be below max_length ({self.max_length}); "
                "max_length is exclusive"
            )
        if self.caching_enabled and self.cache_capacity < 1:
            raise ConfigurationError(
                f"cache_capacity must be >= 1 when caching is enabled, got {self.cache_capacity}"
            )
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @property
    def corpus_label(self) -> str:
        if isinstance(self.corpus_source, Path):
            return str(self.corpus_source)
        return f"<{len(self.corpus_source)} words>"


# =============================================================================
# Sampling helpers
# =============================================================================

def contains_vowel(chars: Sequence[str]) -> bool:
    """True if there is a vowel in the first two letters. Shorter sequences always pass."""
    if len(chars) < 2:
        return True
    return VOWELS.search(''.join(chars[:2])) is not None


def weighted_choice(counts: Optional[Dict[str, int]], rng: RandomSource) -> Optional[str]:
    """
    Pick a key of counts with probability proportional to its count.

    Given {"a": 1, "b": 2}, "a" comes back a third of the time and "b" two
    thirds. Returns None for a missing or empty distribution.
    """
    if not counts:
        return None

    total = sum(counts.values())
    pick = rng.randrange(total)
    cumulative = 0
    for char, count in counts.items():
        cumulative += count
        if cumulative > pick:
            return char
    return None


# =============================================================================
# Generator
# =============================================================================

class WordGenerator:
    """
    Makes words that look like they belong in the corpus.

    Usage:
        gen = WordGenerator(corpus_source='/usr/share/dict/words', gram_size=2)
        gen.word()              # from the cache, refilled when it runs dry
        gen.generate()          # always fresh
        gen.refresh_cache()     # top the cache up to cache_capacity

        # Deterministic output, no cache
        gen = WordGenerator(corpus_source=['cat', 'car', 'can'], gram_size=1,
                            caching_enabled=False, random_source=RandomSource(seed=1))

    The n-gram table is loaded from the data store on first use, or built from
    the corpus and stored if there is none yet.
    """

    def __init__(self,
                 config: Optional[GenerationConfig] = None,
                 random_source: Optional[RandomSource] = None,
                 data_store: Optional[FileStore] = None,
                 cache_store: Optional[FileStore] = None,
                 **options):
        """
        Args:
            config: Generation parameters (built from options if not given)
            random_source: Anything with randrange() and choice()
            data_store: Store for the n-gram table (opened at config.data_path if not given)
            cache_store: Store for cached words (only used when caching is enabled)
            **options: GenerationConfig fields, overriding config
        """
        if config is None:
            config = GenerationConfig(**options)
        elif options:
            config = config.replace(**options)
        self.config = config
        self.rng = random_source if random_source is not None else RandomSource()

        self._grams_key = get_setting("store.grams_key", "grams")
        self._gram_size_key = get_setting("store.gram_size_key", "gram_size")
        self._cache_key = get_setting("store.cache_key", "words")

        # Exposed so callers can keep related metadata in the same file
        self.data_store = data_store if data_store is not None else FileStore(
            config.data_path, flush_data=config.flush_on_open
        )
        self.cache_store = None
        if config.caching_enabled:
            self.cache_store = cache_store if cache_store is not None else FileStore(
                config.cache_path, flush_data=config.flush_on_open
            )

        self._grams: Optional[GramTable] = None

    def __repr__(self) -> str:
        return (f"WordGenerator(corpus={self.config.corpus_label}, "
                f"gram_size={self.config.gram_size}, caching={self.config.caching_enabled})")

    # -------------------------------------------------------------------------
    # N-gram table
    # -------------------------------------------------------------------------

    @property
    def grams(self) -> GramTable:
        """The n-gram table, loaded or built on first access"""
        if self._grams is None:
            self._grams = self._load_grams()
        return self._grams

    def _load_grams(self) -> GramTable:
        stored = self.data_store.retrieve(self._grams_key)
        if stored is not None:
            stored_order = self.data_store.retrieve(self._gram_size_key)
            if stored_order == self.config.gram_size:
                if not isinstance(stored, dict):
                    raise PersistenceError(
                        f"Stored '{self._grams_key}' in {self.data_store.file_path} is not a mapping"
                    )
                table = GramTable.from_dict(stored, order=self.config.gram_size)
                logger.info(f"Loaded order-{table.order} table ({len(table)} contexts) "
                            f"from {self.data_store.file_path}")
                return table
            logger.warning(
                f"Stored table has order {stored_order}, expected {self.config.gram_size}; rebuilding"
            )
        return self._build_grams()

    def _build_grams(self) -> GramTable:
        source = self.config.corpus_source
        corpus = read_corpus(source) if isinstance(source, Path) else source
        table = ModelBuilder(self.config.gram_size).build(corpus)

        if not len(table):
            logger.warning(f"Corpus {self.config.corpus_label} produced no n-grams; not storing")
            return table

        self.data_store.store(self._grams_key, table.to_dict())
        self.data_store.store(self._gram_size_key, table.order)
        return table

    def rebuild(self) -> GramTable:
        """Discard the stored table and build a new one from the corpus."""
        self.data_store.delete(self._grams_key)
        self.data_store.delete(self._gram_size_key)
        self._grams = self._build_grams()
        return self._grams

    # -------------------------------------------------------------------------
    # Words
    # -------------------------------------------------------------------------

    def word(self) -> str:
        """One word: popped from the cache when caching is on, fresh otherwise."""
        if not self.config.caching_enabled:
            return self.generate()

        words = self._load_cache()
        if not words:
            logger.info(f"Word cache empty, generating {self.config.cache_capacity} words")
            words = [self.generate() for _ in range(self.config.cache_capacity)]
            self._save_cache(words)

        word = words.pop()
        self._save_cache(words)
        logger.debug(f"Served '{word}' from cache ({len(words)} left)")
        return word

    def words(self, count: int) -> List[str]:
        """`count` calls to word()"""
        return [self.word() for _ in range(count)]

    def refresh_cache(self) -> List[str]:
        """
        Top the cache up to cache_capacity and return all of it.

        Returns an empty list (and touches no files) when caching is disabled.
        """
        if not self.config.caching_enabled:
            return []

        words = self._load_cache()
        missing = self.config.cache_capacity - len(words)
        while len(words) < self.config.cache_capacity:
            words.append(self.generate())
        self._save_cache(words)

        if missing > 0:
            logger.info(f"Added {missing} words to cache ({len(words)} total)")
        return words

    def cached_words(self) -> List[str]:
        """Current cache contents, oldest first. Does not consume anything."""
        if not self.config.caching_enabled:
            return []
        return self._load_cache()

    def _load_cache(self) -> List[str]:
        stored = self.cache_store.retrieve(self._cache_key)
        if stored is None:
            return []
        if not isinstance(stored, list):
            raise PersistenceError(
                f"Stored '{self._cache_key}' in {self.cache_store.file_path} is not a list"
            )
        # Capacity may have been lowered since the cache was written
        return [str(w) for w in stored[:self.config.cache_capacity]]

    def _save_cache(self, words: List[str]):
        self.cache_store.store(self._cache_key, words)

    # -------------------------------------------------------------------------
    # Fresh generation
    # -------------------------------------------------------------------------

    def generate(self) -> str:
        """Generate a new word, bypassing the cache."""
        grams = self.grams
        if not len(grams):
            raise EmptyModelError(
                f"No n-grams in corpus {self.config.corpus_label}; nothing to generate from"
            )

        target = self._target_length()
        chars = self._initial_chars(grams)[:max(target, 1)]

        while len(chars) < target:
            size = min(grams.order, len(chars))
            context = ''.join(chars[-size:])
            char = weighted_choice(grams.successors(context), self.rng)
            if char is None:
                # Dead end in the corpus: the word is just shorter
                break
            chars.append(char)

        return ''.join(chars)

    def _target_length(self) -> int:
        """Uniform draw from [0, max_length), rejected until >= min_length."""
        for _ in range(self.config.max_attempts):
            length = self.rng.randrange(self.config.max_length)
            if length >= self.config.min_length:
                return length
        raise ConfigurationError(
            f"No length >= {self.config.min_length} drawn below {self.config.max_length} "
            f"in {self.config.max_attempts} attempts"
        )

    def _initial_chars(self, grams: GramTable) -> List[str]:
        """A random context long enough, with a vowel up front, as a list of letters."""
        min_size = min(grams.order, self.config.min_length)
        contexts = grams.contexts()
        for _ in range(self.config.max_attempts):
            candidate = list(self.rng.choice(contexts))
            if len(candidate) >= min_size and contains_vowel(candidate):
                return candidate
        raise EmptyModelError(
            f"No starting context of length >= {min_size} with a leading vowel found "
            f"in {self.config.max_attempts} draws ({len(contexts)} contexts)"
        )


__all__ = [
    'GenerationConfig',
    'WordGenerator',
    'weighted_choice',
    'contains_vowel',
]
