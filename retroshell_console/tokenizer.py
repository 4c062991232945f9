"""
Tokenizer
=========

Splits a raw input line into lowercase, space-delimited tokens.

There is no quoting or escaping: a value containing a space cannot be
passed as a single token. Consecutive spaces do not produce empty
tokens.
"""

from __future__ import annotations

from typing import Iterator

SEPARATOR = " "


def tokenize(line: str) -> Iterator[str]:
    """Yield the lowercased tokens of ``line`` one at a time.

    The result is a generator, so it can be consumed only once.

    >>> list(tokenize("DF0  Insert disk.adf"))
    ['df0', 'insert', 'disk.adf']
    """
    for token in line.strip().split(SEPARATOR):
        if token:
            yield token.lower()
