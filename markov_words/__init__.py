#!/usr/bin/env python3
"""
markov-words - Pronounceable Word Generator
===========================================

Generates novel words that "look like" the words of a reference list, by
counting letter n-grams in the list and sampling from those counts.

Quick Start
-----------
    from markov_words import WordGenerator

    gen = WordGenerator()                 # /usr/share/dict/words, bigrams
    gen.word()                            # 'plandion'

    gen = WordGenerator(corpus_source='names.txt', gram_size=3,
                        min_length=4, max_length=10, caching_enabled=False)
    [gen.word() for _ in range(5)]

Modules
-------
    markov_words.grams     - N-gram table and model building
    markov_words.generator - Word generation and the word cache
    markov_words.store     - SQLite key-value store for table and cache
    markov_words.entropy   - Injectable random source
    markov_words.errors    - Exception hierarchy

CLI Usage
---------
    python -m markov_words generate -n 10
    python -m markov_words refresh --cache-size 100
    python -m markov_words stats
"""

__version__ = "0.4.0"
__author__ = "markov-words"

from .entropy import RandomSource
from .errors import (
    MarkovWordsError,
    ConfigurationError,
    EmptyModelError,
    PersistenceError,
)
from .grams import GramTable, ModelBuilder, build, read_corpus, normalize_word
from .store import FileStore
from .generator import (
    GenerationConfig,
    WordGenerator,
    weighted_choice,
    contains_vowel,
)

__all__ = [
    '__version__',
    # Generation
    'WordGenerator',
    'GenerationConfig',
    'weighted_choice',
    'contains_vowel',
    # Model
    'GramTable',
    'ModelBuilder',
    'build',
    'read_corpus',
    'normalize_word',
    # Infrastructure
    'FileStore',
    'RandomSource',
    # Errors
    'MarkovWordsError',
    'ConfigurationError',
    'EmptyModelError',
    'PersistenceError',
]
