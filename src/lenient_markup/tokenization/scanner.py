"""Lexical scanner turning a markup buffer into a lazy token stream.

The scanner is a three-mode state machine driven one token at a time by
next_token(). It never raises on malformed input: a missing construct becomes
a point span and an unterminated opening tag simply ends the stream.
"""

import logging
from enum import Enum, auto
from typing import Callable, Dict, Iterator, List, Optional

from lenient_markup.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ScannerConfig,
)

from .tokens import Position, Span, Token, TokenKind

QUOTE_CHARS = ('"', "'")
UNQUOTED_VALUE_TERMINATORS = ">/"
IDENTIFIER_TERMINATORS = "=/>"

logger = logging.getLogger(__name__)


class ScanMode(Enum):
    """Scanner modes; each next_token() call dispatches on exactly one."""

    OUTSIDE_TAG = auto()      # Between tags: text, opening or closing tag
    ATTRIBUTE_NAME = auto()   # After a tag name or attribute value
    ATTRIBUTE_VALUE = auto()  # Immediately after an attribute name


def is_identifier_char(char: str) -> bool:
    """Tag and attribute names run until =, /, > or whitespace."""
    return char not in IDENTIFIER_TERMINATORS and not char.isspace()


class Scanner:
    """Stateful scanner over a single immutable buffer.

    The scanner can only be consumed once, front to back. Once next_token()
    returns None it stays exhausted.

    Examples:
        >>> [t.kind.name for t in Scanner('<a href=x>hi')]
        ['TAG_NAME', 'ATTRIBUTE_NAME', 'ATTRIBUTE_VALUE', 'OPENING_TAG_END', 'TEXT']
    """

    def __init__(
        self,
        source: str,
        config: Optional[ScannerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the scanner.

        Args:
            source: Markup buffer; scanned as given, with no trimming
            config: Scanner configuration
            correlation_id: Optional correlation ID for tracking requests
        """
        if not isinstance(source, str):
            raise TypeError(f"source must be str, not {type(source).__name__}")

        self.source = source
        self.config = config or ScannerConfig()
        self.correlation_id = correlation_id
        self.mode = ScanMode.OUTSIDE_TAG

        self._offset = 0
        self._line = 0
        self._column = 0
        self._exhausted = False

        self.tokens_emitted = 0
        self.token_counts: Dict[TokenKind, int] = {}
        self.diagnostics: List[DiagnosticEntry] = []

        logger.debug(
            "Scanner created",
            extra={
                "component": "scanner",
                "correlation_id": self.correlation_id,
                "char_count": len(source)
            }
        )

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def position(self) -> Position:
        """Position of the next unconsumed character."""
        return Position(self._line, self._column, self._offset)

    @property
    def characters_consumed(self) -> int:
        return self._offset

    def next_token(self) -> Optional[Token]:
        """Produce the next token, or None once the stream is exhausted."""
        if self._exhausted:
            return None

        if self.mode is ScanMode.OUTSIDE_TAG:
            token = self._scan_outside_tag()
        elif self.mode is ScanMode.ATTRIBUTE_NAME:
            token = self._scan_attribute_name()
        else:
            token = self._scan_attribute_value()

        if token is None:
            self._exhausted = True
            logger.debug(
                "Scanner exhausted",
                extra={
                    "component": "scanner",
                    "correlation_id": self.correlation_id,
                    "tokens_emitted": self.tokens_emitted,
                    "characters_consumed": self._offset,
                    "remaining": len(self.source) - self._offset
                }
            )
            return None

        self.tokens_emitted += 1
        self.token_counts[token.kind] = self.token_counts.get(token.kind, 0) + 1
        return token

    # Mode handlers

    def _scan_outside_tag(self) -> Optional[Token]:
        if self._peek() == "<":
            tag_start = self.position
            self._advance()
            closing = self._consume_char("/") is not None
            name = self._consume_identifier() or self._point_span()

            if closing:
                if self._consume_char(">") is None:
                    self._record(
                        "Closing tag is not terminated by '>'",
                        tag_start,
                        {"tag": name.text}
                    )
                return Token(TokenKind.TAG_END, name)

            if name.is_point:
                self._record("Opening tag has an empty name", tag_start)
            self.mode = ScanMode.ATTRIBUTE_NAME
            return Token(TokenKind.TAG_NAME, name)

        text = self._consume_while(lambda c: c != "<")
        if text is None:
            return None
        return Token(TokenKind.TEXT, text)

    def _scan_attribute_name(self) -> Optional[Token]:
        self._skip_whitespace()
        self._consume_char("/")

        tag_end = self._consume_char(">")
        if tag_end is not None:
            self.mode = ScanMode.OUTSIDE_TAG
            return Token(TokenKind.OPENING_TAG_END, tag_end)

        name = self._consume_identifier()
        if name is not None:
            self.mode = ScanMode.ATTRIBUTE_VALUE
            return Token(TokenKind.ATTRIBUTE_NAME, name)

        self._record(
            "Opening tag is not terminated; scanning stopped",
            self.position,
            {"remaining": len(self.source) - self._offset},
            DiagnosticSeverity.WARNING
        )
        return None

    def _scan_attribute_value(self) -> Token:
        self.mode = ScanMode.ATTRIBUTE_NAME

        if self._consume_char("=") is None:
            return Token(TokenKind.ATTRIBUTE_VALUE, self._point_span())

        quote = self._peek()
        if quote in QUOTE_CHARS:
            quote_start = self.position
            self._advance()
            value = self._consume_while(lambda c: c != quote)
            if self._consume_char(quote) is None:
                self._record(
                    "Quoted attribute value is not terminated",
                    quote_start,
                    {"quote": quote}
                )
            return Token(TokenKind.ATTRIBUTE_VALUE, value or self._point_span())

        value = self._consume_while(
            lambda c: not c.isspace() and c not in UNQUOTED_VALUE_TERMINATORS
        )
        return Token(TokenKind.ATTRIBUTE_VALUE, value or self._point_span())

    # Cursor primitives

    def _peek(self) -> Optional[str]:
        if self._offset < len(self.source):
            return self.source[self._offset]
        return None

    def _advance(self) -> str:
        char = self.source[self._offset]
        self._offset += 1
        if char == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        return char

    def _point_span(self) -> Span:
        return Span.point(self.position, self.source)

    def _consume_char(self, char: str) -> Optional[Span]:
        if self._peek() != char:
            return None
        start = self.position
        self._advance()
        return Span(start, self.position, self.source)

    def _consume_while(self, predicate: Callable[[str], bool]) -> Optional[Span]:
        """Consume characters while predicate holds; None if none matched."""
        start = self.position
        source_length = len(self.source)
        while self._offset < source_length and predicate(self.source[self._offset]):
            self._advance()
        if self._offset == start.offset:
            return None
        return Span(start, self.position, self.source)

    def _skip_whitespace(self) -> None:
        self._consume_while(str.isspace)

    def _consume_identifier(self) -> Optional[Span]:
        self._skip_whitespace()
        return self._consume_while(is_identifier_char)

    def _record(
        self,
        message: str,
        position: Position,
        details: Optional[Dict[str, object]] = None,
        severity: DiagnosticSeverity = DiagnosticSeverity.INFO
    ) -> None:
        if not self.config.enable_diagnostics:
            return
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="scanner",
            position=position.to_dict(),
            details=details,
            correlation_id=self.correlation_id
        ))
