"""Token types produced by the markup scanner.

Tokens never copy text out of the buffer they were scanned from: a Span keeps
a reference to the buffer plus two positions and slices on demand.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class TokenKind(Enum):
    """Markup token kinds emitted by the scanner."""

    TAG_NAME = auto()         # Name following <
    TAG_END = auto()          # Name following </
    OPENING_TAG_END = auto()  # > closing an opening tag
    ATTRIBUTE_NAME = auto()   # Attribute name inside an opening tag
    ATTRIBUTE_VALUE = auto()  # Attribute value, quotes excluded
    TEXT = auto()             # Character run between tags


@dataclass(frozen=True)
class Position:
    """Zero-indexed location in the scanned buffer."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 0:
            raise ValueError("Line number must be >= 0")
        if self.column < 0:
            raise ValueError("Column number must be >= 0")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass(frozen=True)
class Span:
    """Source region a token was derived from.

    A point span (start == end) marks a construct that was expected but
    absent, such as a missing tag name or attribute value.

    Spans compare by position and by source buffer contents, so equal
    positions over different buffers are not equal spans.
    """

    start: Position
    end: Position
    source: str = field(repr=False)

    def __post_init__(self) -> None:
        if self.end.offset < self.start.offset:
            raise ValueError("Span end must not precede span start")

    @classmethod
    def point(cls, position: Position, source: str) -> "Span":
        return cls(position, position, source)

    @property
    def text(self) -> str:
        return self.source[self.start.offset:self.end.offset]

    @property
    def is_point(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Token:
    """A classified, position-tagged fragment of the input."""

    kind: TokenKind
    span: Span

    @property
    def value(self) -> Optional[str]:
        """Name, value or text carried by the token.

        OPENING_TAG_END carries no payload and returns None.
        """
        if self.kind is TokenKind.OPENING_TAG_END:
            return None
        return self.span.text

    @property
    def start(self) -> Position:
        return self.span.start

    @property
    def end(self) -> Position:
        return self.span.end

    @property
    def is_synthesized(self) -> bool:
        """True when the token stands for something absent from the input."""
        return self.span.is_point

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name,
            "value": self.value,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }
