"""Parser API for lenient markup parsing.

MarkupParser pairs one Scanner with one TreeBuilder over a single buffer.
The module-level parse() and tokenize() functions cover the common one-shot
cases, and parse() never raises.
"""

import time
from typing import Any, List, Optional

from lenient_markup.shared import (
    DiagnosticSeverity,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from lenient_markup.tokenization import Scanner, Token
from lenient_markup.tree import Node, ParseResult, TreeBuilder

# Max length for content preview in logs
PREVIEW_LENGTH = 100
MS_PER_SECOND = 1000


class MarkupParser:
    """Scanner/builder pair over one immutable buffer.

    The buffer is trimmed once at construction (unless disabled in the
    configuration); all token spans refer to the trimmed buffer.

    Examples:
        >>> parser = MarkupParser('<a href="/x">link</a>')
        >>> [element] = parser.build()
        >>> element.name, element.get_attribute('href')
        ('a', '/x')
    """

    def __init__(
        self,
        source: str,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            source: Markup buffer
            config: Parser configuration (defaults to lenient)
            correlation_id: Optional correlation ID for request tracking
        """
        if not isinstance(source, str):
            raise TypeError(f"source must be str, not {type(source).__name__}")

        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "markup_parser")

        self.source = source.strip() if self.config.trim_input else source
        self.scanner = Scanner(
            self.source,
            config=self.config.scanner,
            correlation_id=self.correlation_id
        )
        self.tree_builder = TreeBuilder(
            self.scanner,
            config=self.config.builder,
            correlation_id=self.correlation_id
        )

    def build(self) -> List[Node]:
        """Return the ordered root-node forest for the remaining tokens."""
        return self.tree_builder.build()

    def tokens(self) -> List[Token]:
        """Drain the remaining tokens without building a tree."""
        return list(self.scanner)

    def parse(self) -> ParseResult:
        """Build the forest and package it with diagnostics and metrics."""
        start_time = time.time()

        self.logger.info(
            "Starting parse",
            extra={
                "content_length": len(self.source),
                "preview": (
                    self.source[:PREVIEW_LENGTH] + "..."
                    if len(self.source) > PREVIEW_LENGTH else self.source
                )
            }
        )

        nodes = self.build()
        processing_time = (time.time() - start_time) * MS_PER_SECOND

        result = ParseResult(
            nodes=nodes,
            diagnostics=self.scanner.diagnostics + self.tree_builder.diagnostics,
            performance=PerformanceMetrics(
                processing_time_ms=processing_time,
                characters_processed=self.scanner.characters_consumed,
                tokens_generated=self.scanner.tokens_emitted,
                tokens_discarded=self.tree_builder.tokens_discarded,
            ),
            correlation_id=self.correlation_id,
        )

        self.logger.info(
            "Parse completed",
            extra={
                "root_count": len(nodes),
                "diagnostic_count": len(result.diagnostics),
                "processing_time_ms": processing_time,
                **self.tree_builder.statistics
            }
        )
        return result


def parse(
    source: Any,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a markup buffer into a forest of nodes.

    This is the primary entry point. It never raises: input that cannot be
    parsed at all (for example bytes, since no decoding is performed) yields a
    ParseResult with success set to False and a CRITICAL diagnostic.

    Args:
        source: Markup buffer
        config: Parser configuration (defaults to lenient)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult containing the forest, diagnostics and metrics

    Examples:
        >>> result = parse('<ul><li>one</li></ul>')
        >>> result.success
        True
        >>> result.nodes[0].children[0].name
        'li'
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")

    try:
        return MarkupParser(source, config=config, correlation_id=correlation_id).parse()
    except Exception as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "Parse operation failed",
            extra={
                "input_type": type(source).__name__,
                "processing_time_ms": processing_time
            }
        )
        result = ParseResult(
            success=False,
            performance=PerformanceMetrics(processing_time_ms=processing_time),
            correlation_id=correlation_id,
        )
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            f"Parse operation failed: {e}",
            "parse",
            details={"exception_type": type(e).__name__}
        )
        return result


def tokenize(source: str, config: Optional[ParserConfig] = None) -> List[Token]:
    """Scan a buffer into the full list of tokens.

    The buffer is trimmed exactly as MarkupParser would trim it.

    Raises:
        TypeError: If source is not a str
    """
    return MarkupParser(source, config=config).tokens()
