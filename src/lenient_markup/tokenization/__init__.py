"""Tokenization layer for lenient markup parsing.

Key Components:
    Scanner: Three-mode state machine producing tokens one at a time
    Token: Kind plus the source span it was derived from
    TokenKind: Enumeration of the six token kinds
    Span: Zero-copy view of a region of the scanned buffer
    Position: Zero-indexed line/column/offset coordinate
    ScanMode: Scanner state machine modes
"""

from .scanner import Scanner, ScanMode, is_identifier_char
from .tokens import Position, Span, Token, TokenKind

__all__ = [
    "Position",
    "ScanMode",
    "Scanner",
    "Span",
    "Token",
    "TokenKind",
    "is_identifier_char",
]
