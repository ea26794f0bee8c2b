"""Lenient Markup Parser.

A never-fail markup parser that turns any text buffer, however malformed,
into an ordered forest of elements, attributes and text leaves whose tokens
keep exact source positions.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), tokenize()
- Level 2: Configured parser - MarkupParser with ParserConfig
- Level 3: Components - Scanner and TreeBuilder over any token source
"""

__version__ = "0.1.0"
__author__ = "Lenient Markup Parser Team"

# Level 1 and 2 entry points
from .api import MarkupParser, parse, tokenize

# Configuration classes for advanced usage
from .shared.config import BuilderConfig, ParserConfig, ScannerConfig

# Level 3 components and the data model
from .tokenization import Position, Scanner, Span, Token, TokenKind
from .tree import Attribute, Element, Node, ParseResult, TextNode, TreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "tokenize",

    # Level 2: Configured parser
    "MarkupParser",
    "ParserConfig",
    "ScannerConfig",
    "BuilderConfig",

    # Level 3: Components
    "Scanner",
    "TreeBuilder",

    # Data model
    "Attribute",
    "Element",
    "Node",
    "ParseResult",
    "Position",
    "Span",
    "TextNode",
    "Token",
    "TokenKind",
]
