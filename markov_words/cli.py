#!/usr/bin/env python3
"""
markov-words CLI
================
Command-line wrapper around WordGenerator.

Usage:
    markov-words generate -n 10
    markov-words generate -n 5 --corpus names.txt --gram-size 3 --no-cache
    markov-words refresh --cache-size 100
    markov-words rebuild --corpus /usr/share/dict/words
    markov-words stats
"""

import argparse
import logging
import sys

from markov_words import __version__
from markov_words.entropy import RandomSource
from markov_words.errors import MarkovWordsError
from markov_words.generator import WordGenerator
from markov_words.settings import get_setting

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, *args, **kwargs):
        """Always printed: the thing the user asked for."""
        print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}")


# argparse dest -> GenerationConfig field
CONFIG_OPTIONS = {
    'corpus': 'corpus_source',
    'gram_size': 'gram_size',
    'min_length': 'min_length',
    'max_length': 'max_length',
    'cache_size': 'cache_capacity',
    'data_file': 'data_path',
    'cache_file': 'cache_path',
    'max_attempts': 'max_attempts',
}


def build_generator(args) -> WordGenerator:
    """WordGenerator from parsed arguments; unset options fall back to app.yaml."""
    options = {
        field: getattr(args, dest)
        for dest, field in CONFIG_OPTIONS.items()
        if getattr(args, dest, None) is not None
    }
    if getattr(args, 'no_cache', False):
        options['caching_enabled'] = False
    if getattr(args, 'flush', False):
        options['flush_on_open'] = True

    return WordGenerator(random_source=RandomSource(seed=args.seed), **options)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=get_setting("logging.format", "%(levelname)s %(name)s: %(message)s"),
    )


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Print generated words, one per line."""
    if args.count < 1:
        out.error("--count must be at least 1")
        return 1

    gen = build_generator(args)
    for _ in range(args.count):
        out.result(gen.generate() if args.fresh else gen.word())
    return 0


def cmd_refresh(args, out: Output):
    """Top up the word cache."""
    gen = build_generator(args)
    if not gen.config.caching_enabled:
        out.error("Caching is disabled; nothing to refresh")
        return 1

    words = gen.refresh_cache()
    out.success(f"{len(words)} words cached in {gen.cache_store.file_path}")
    return 0


def cmd_rebuild(args, out: Output):
    """Rebuild the n-gram table from the corpus."""
    gen = build_generator(args)
    table = gen.rebuild()
    if not len(table):
        out.error(f"Corpus {gen.config.corpus_label} produced no n-grams")
        return 1

    out.success(f"Order-{table.order} table with {len(table)} contexts "
                f"stored in {gen.data_store.file_path}")
    return 0


def cmd_stats(args, out: Output):
    """Show table and cache details."""
    gen = build_generator(args)
    cfg = gen.config
    rows = [
        ('Corpus', cfg.corpus_label),
        ('Gram size', cfg.gram_size),
        ('Length', f"{cfg.min_length}..{cfg.max_length - 1}"),
        ('Contexts', len(gen.grams)),
        ('Data file', gen.data_store.file_path),
    ]
    if cfg.caching_enabled:
        rows.append(('Cache', f"{len(gen.cached_words())}/{cfg.cache_capacity}"))
        rows.append(('Cache file', gen.cache_store.file_path))
    else:
        rows.append(('Cache', 'disabled'))

    width = max(len(label) for label, _ in rows) + 2
    for label, value in rows:
        out.result(f"{label + ':':<{width}}{value}")
    return 0


# =============================================================================
# Main
# =============================================================================

def make_parser() -> argparse.ArgumentParser:
    # Generation options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    g = common.add_argument_group('generation options (default: app.yaml)')
    g.add_argument('--corpus', '-c', help='Word list, one word per line')
    g.add_argument('--gram-size', '-k', type=int, help='N-gram order')
    g.add_argument('--min-length', type=int, help='Minimum target length')
    g.add_argument('--max-length', type=int, help='Exclusive maximum target length')
    g.add_argument('--cache-size', type=int, help='Number of words kept in the cache')
    g.add_argument('--no-cache', action='store_true', help='Generate every word fresh')
    g.add_argument('--data-file', help='Store file for the n-gram table')
    g.add_argument('--cache-file', help='Store file for cached words')
    g.add_argument('--max-attempts', type=int, help='Cap on redraws for length and start context')
    g.add_argument('--flush', action='store_true', help='Clear both store files before use')
    g.add_argument('--seed', type=int, help='Seed for reproducible output')

    parser = argparse.ArgumentParser(
        prog='markov-words',
        description='markov-words - pronounceable word generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 10
  %(prog)s generate -n 5 --corpus names.txt --gram-size 3 --no-cache
  %(prog)s refresh --cache-size 100
  %(prog)s rebuild --corpus /usr/share/dict/words
  %(prog)s stats
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], parents=[common],
                              help='Generate words')
    p.add_argument('-n', '--count', type=int, default=10, help='Number of words (default: 10)')
    p.add_argument('--fresh', action='store_true', help='Bypass the cache for these words')

    # --- refresh ---
    subparsers.add_parser('refresh', parents=[common], help='Top up the word cache')

    # --- rebuild ---
    subparsers.add_parser('rebuild', parents=[common], help='Rebuild the n-gram table')

    # --- stats ---
    subparsers.add_parser('stats', parents=[common], help='Show table and cache details')

    return parser


def main(argv=None):
    parser = make_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {'gen': 'generate', 'g': 'generate'}
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'refresh': cmd_refresh,
        'rebuild': cmd_rebuild,
        'stats': cmd_stats,
    }

    handler = commands.get(command)
    if handler:
        try:
            setup_logging(args.verbose)
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except MarkovWordsError as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
