"""Tree building from a markup token stream.

This module turns the scanner's token stream into an ordered forest of
nodes. Nothing is ever backtracked: attributes are paired as they arrive and
elements are frozen once their children are complete.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from lenient_markup.shared import (
    BuilderConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    get_logger,
)
from lenient_markup.tokenization import Token, TokenKind

from .nodes import Attribute, Element, Node, TextNode, walk


class TokenSource(Protocol):
    """Anything that hands out tokens one at a time, None when exhausted."""

    def next_token(self) -> Optional[Token]:
        ...


class _OpenElement:
    """Element whose children are still being collected."""

    __slots__ = ("tag_name", "attributes", "children")

    def __init__(self, tag_name: Token, attributes: List[Attribute]) -> None:
        self.tag_name = tag_name
        self.attributes = attributes
        self.children: List[Node] = []

    def close(self) -> Element:
        return Element(self.tag_name, tuple(self.attributes), tuple(self.children))


class TreeBuilder:
    """Assembles an ordered forest of nodes from a token source.

    By default closing tags are discarded and every element collects all
    remaining content of the stream as its descendants, so well-formed
    nesting is reproduced only through token order. Open elements are kept on
    an explicit stack, so nesting depth is not limited by the interpreter's
    recursion limit.
    """

    def __init__(
        self,
        source: TokenSource,
        config: Optional[BuilderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            source: Token source, typically a Scanner
            config: Tree building configuration
            correlation_id: Optional correlation ID for request tracking
        """
        self.source = source
        self.config = config or BuilderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self.diagnostics: List[DiagnosticEntry] = []
        self.elements_created = 0
        self.text_nodes_created = 0
        self.tokens_consumed = 0
        self.tokens_discarded = 0
        self.max_depth = 0

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get tree building statistics."""
        return {
            "elements_created": self.elements_created,
            "text_nodes_created": self.text_nodes_created,
            "tokens_consumed": self.tokens_consumed,
            "tokens_discarded": self.tokens_discarded,
            "max_depth": self.max_depth,
        }

    def build(self) -> List[Node]:
        """Drain the token source into an ordered forest.

        Can be called repeatedly; every call continues from the shared
        cursor, so once the source is exhausted further calls return an
        empty list.
        """
        roots: List[Node] = []
        stack: List[_OpenElement] = []

        while True:
            token = self._pull()
            if token is None:
                break

            siblings = stack[-1].children if stack else roots
            if token.kind is TokenKind.TAG_NAME:
                attributes = self._collect_attributes(token)
                stack.append(_OpenElement(token, attributes))
                self.max_depth = max(self.max_depth, len(stack))
            elif token.kind is TokenKind.TEXT:
                siblings.append(TextNode(token))
                self.text_nodes_created += 1
            elif (
                token.kind is TokenKind.TAG_END
                and self.config.terminate_on_tag_end
                and stack
            ):
                self._close(stack, roots)
            else:
                self._discard(token)

        while stack:
            self._close(stack, roots)

        self.logger.debug(
            "Tree building pass completed",
            extra={"root_count": len(roots), **self.statistics}
        )
        return roots

    def _pull(self) -> Optional[Token]:
        token = self.source.next_token()
        if token is not None:
            self.tokens_consumed += 1
        return token

    def _close(self, stack: List[_OpenElement], roots: List[Node]) -> None:
        element = stack.pop().close()
        (stack[-1].children if stack else roots).append(element)
        self.elements_created += 1

    def _collect_attributes(self, tag_name: Token) -> List[Attribute]:
        attributes: List[Attribute] = []
        while True:
            token = self._pull()
            if token is None or token.kind is TokenKind.OPENING_TAG_END:
                return attributes

            if token.kind is not TokenKind.ATTRIBUTE_NAME:
                self._discard(token)
                continue

            value = self._pull()
            if value is None or value.kind is not TokenKind.ATTRIBUTE_VALUE:
                self._record(
                    DiagnosticSeverity.WARNING,
                    "Attribute name without a value token; attribute dropped",
                    token,
                    {"tag": tag_name.span.text, "attribute": token.span.text}
                )
                if value is not None:
                    self._discard(value)
                return attributes

            attributes.append(Attribute(token, value))

    def _discard(self, token: Token) -> None:
        self.tokens_discarded += 1
        self.logger.debug(
            "Discarded token",
            extra={"kind": token.kind.name, "position": token.start.to_dict()}
        )
        if token.kind is TokenKind.TAG_END:
            self._record(
                DiagnosticSeverity.DEBUG,
                "Closing tag discarded",
                token,
                {"tag": token.span.text}
            )
        else:
            self._record(
                DiagnosticSeverity.INFO,
                f"Unexpected {token.kind.name} token discarded",
                token
            )

    def _record(
        self,
        severity: DiagnosticSeverity,
        message: str,
        token: Token,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        if not self.config.enable_diagnostics:
            return
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="tree_builder",
            position=token.start.to_dict(),
            details=details,
            correlation_id=self.correlation_id
        ))


@dataclass
class ParseResult:
    """Forest produced by a parse together with its diagnostics and metrics.

    Following the never-fail philosophy, a failed parse still yields a
    ParseResult: success is False and a CRITICAL diagnostic explains why.
    """

    nodes: List[Node] = field(default_factory=list)
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def elements(self) -> List[Element]:
        """Root elements, skipping root text nodes."""
        return [node for node in self.nodes if isinstance(node, Element)]

    @property
    def element_count(self) -> int:
        return sum(1 for node, _ in walk(self.nodes) if isinstance(node, Element))

    @property
    def text_node_count(self) -> int:
        return sum(1 for node, _ in walk(self.nodes) if isinstance(node, TextNode))

    @property
    def attribute_count(self) -> int:
        return sum(
            len(node.attributes)
            for node, _ in walk(self.nodes)
            if isinstance(node, Element)
        )

    @property
    def max_depth(self) -> int:
        """Deepest element nesting level; 0 when there are no elements."""
        return max(
            (depth + 1 for node, depth in walk(self.nodes) if isinstance(node, Element)),
            default=0
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        by_severity: Dict[str, int] = {}
        for diag in self.diagnostics:
            by_severity[diag.severity.name] = by_severity.get(diag.severity.name, 0) + 1

        return {
            "success": self.success,
            "root_count": len(self.nodes),
            "element_count": self.element_count,
            "text_node_count": self.text_node_count,
            "attribute_count": self.attribute_count,
            "max_depth": self.max_depth,
            "diagnostics_by_severity": by_severity,
            "performance": self.performance.to_dict(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "success": self.success,
            "correlation_id": self.correlation_id,
            "nodes": [node.to_dict() for node in self.nodes],
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "summary": self.summary(),
        }
