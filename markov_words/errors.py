#!/usr/bin/env python3
"""
Errors
======
Exception hierarchy for markov-words. Everything raised on purpose by the
package derives from MarkovWordsError, so callers can catch one type.
"""


class MarkovWordsError(Exception):
    """Base class for markov-words errors"""


class ConfigurationError(MarkovWordsError, ValueError):
    """Generation parameters that can never produce a word (or a corpus that can't be read)"""


class EmptyModelError(MarkovWordsError):
    """The n-gram table has nothing usable to start a word from"""


class PersistenceError(MarkovWordsError):
    """The backing store could not be read or written"""


__all__ = [
    'MarkovWordsError',
    'ConfigurationError',
    'EmptyModelError',
    'PersistenceError',
]
