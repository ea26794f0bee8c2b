"""Public parsing API for lenient markup parsing."""

from .parser import MarkupParser, parse, tokenize

__all__ = [
    "MarkupParser",
    "parse",
    "tokenize",
]
