"""Pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from markov_words import RandomSource, WordGenerator

DICTIONARY = Path(__file__).resolve().parent / "data" / "dictionary"


@pytest.fixture
def dictionary_path():
    """Bundled word list (~3000 lowercase words)."""
    return DICTIONARY


@pytest.fixture
def make_generator(tmp_path):
    """
    Factory for generators whose store files live in tmp_path.

    Defaults to the bundled dictionary, gram_size 1, no caching and a seeded
    random source; any GenerationConfig field can be overridden.
    """
    def _make(seed=1234, **options):
        options.setdefault('corpus_source', DICTIONARY)
        options.setdefault('gram_size', 1)
        options.setdefault('caching_enabled', False)
        options.setdefault('data_path', tmp_path / 'test.data')
        options.setdefault('cache_path', tmp_path / 'test.cache')
        return WordGenerator(random_source=RandomSource(seed=seed), **options)

    return _make
