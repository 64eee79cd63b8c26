"""Allow `python -m markov_words`."""

import sys

from .cli import main

sys.exit(main())
