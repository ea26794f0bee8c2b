"""Tree building layer for lenient markup parsing.

Key Components:
    TreeBuilder: Assembles an ordered node forest from a token source
    Element: Tagged node with ordered attributes and children
    TextNode: Text leaf
    Attribute: Name/value token pair
    ParseResult: Forest plus diagnostics and performance metrics
"""

from .builder import ParseResult, TokenSource, TreeBuilder
from .nodes import Attribute, Element, Node, TextNode, walk

__all__ = [
    "Attribute",
    "Element",
    "Node",
    "ParseResult",
    "TextNode",
    "TokenSource",
    "TreeBuilder",
    "walk",
]
