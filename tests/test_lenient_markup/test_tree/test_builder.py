"""Tests for the tree building engine.

Covers forest construction from scanner output, lenient handling of closing
tags, the opt-in closing-tag termination, and defensive handling of token
streams the scanner itself never produces.
"""

from typing import List, Optional

import pytest

from lenient_markup.shared import BuilderConfig, DiagnosticSeverity
from lenient_markup.tokenization import Position, Scanner, Span, Token, TokenKind
from lenient_markup.tree import Element, TextNode, TreeBuilder


def build(source: str, config: Optional[BuilderConfig] = None):
    return TreeBuilder(Scanner(source), config=config).build()


def shape(nodes) -> List:
    """Reduce a forest to names, attribute pairs and text for comparison."""
    result = []
    for node in nodes:
        if isinstance(node, TextNode):
            result.append(node.text)
        else:
            attributes = [(a.name_text, a.value_text) for a in node.attributes]
            entry = [node.name]
            if attributes:
                entry.append(attributes)
            entry.append(shape(node.children))
            result.append(entry)
    return result


class ListTokenSource:
    """Token source replaying a fixed token list."""

    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = list(tokens)

    def next_token(self) -> Optional[Token]:
        if not self._tokens:
            return None
        return self._tokens.pop(0)


def token(kind: TokenKind, text: str = "x") -> Token:
    return Token(kind, Span(Position(0, 0, 0), Position(0, len(text), len(text)), text))


class TestBasicForests:
    """Forest construction from well-formed input."""

    def test_empty_input(self):
        """Test that an empty buffer yields an empty forest."""
        assert build("") == []

    def test_orphan_closing_tag(self):
        """Test that a lone closing tag yields an empty forest."""
        assert build("</p>") == []

    def test_empty_element(self):
        """Test a single element with no attributes or children."""
        [element] = build("<a></a>")

        assert isinstance(element, Element)
        assert element.name == "a"
        assert element.attributes == ()
        assert element.children == ()

    def test_element_with_text(self):
        """Test a single text child."""
        [element] = build("<a>x</a>")
        [child] = element.children

        assert isinstance(child, TextNode)
        assert child.text == "x"

    def test_quoted_attribute(self):
        """Test a quoted attribute value without its quotes."""
        [element] = build('<a b="c"></a>')
        [attribute] = element.attributes

        assert attribute.name_text == "b"
        assert attribute.value_text == "c"
        assert attribute.value.value == "c"

    def test_attribute_without_value(self):
        """Test that a bare attribute pairs with an empty synthesized value."""
        [element] = build("<a b></a>")
        [attribute] = element.attributes

        assert attribute.value.kind is TokenKind.ATTRIBUTE_VALUE
        assert attribute.value.value == ""
        assert attribute.value.is_synthesized

    def test_nested_elements(self):
        """Test nesting reconstructed from token order alone."""
        [outer] = build("<a><b></b></a>")
        [inner] = outer.children

        assert outer.name == "a"
        assert isinstance(inner, Element)
        assert inner.name == "b"
        assert inner.children == ()

    def test_attribute_order_is_document_order(self):
        """Test that attributes keep their source order."""
        [element] = build("<a z=1 y='2' x>")

        assert [(a.name_text, a.value_text) for a in element.attributes] == [
            ("z", "1"), ("y", "2"), ("x", ""),
        ]

    def test_root_text_nodes(self):
        """Test that text outside any element becomes a root node."""
        assert shape(build("hello <b>x</b>")) == ["hello ", ["b", ["x"]]]

    def test_nodes_reference_source_tokens(self):
        """Test that nodes keep the tokens and positions they came from."""
        [element] = build("<a>\n<b>")
        [newline, inner] = element.children

        assert element.tag_name.start == Position(0, 1, 1)
        assert newline.token.end == Position(1, 0, 4)
        assert inner.tag_name.start == Position(1, 1, 5)


class TestLenientAssembly:
    """Default assembly where closing tags are discarded."""

    def test_sibling_tags_nest(self):
        """Test that consecutive elements nest because closing tags are ignored."""
        assert shape(build("<p>1</p><p>2</p>")) == [["p", ["1", ["p", ["2"]]]]]

    def test_closing_tag_names_are_not_compared(self):
        """Test that mismatched closing tags change nothing."""
        assert shape(build("<a><b>x</a></b>")) == shape(build("<a><b>x</b></a>"))

    def test_unclosed_element_collects_rest(self):
        """Test that an unclosed element owns everything after it."""
        assert shape(build("<ul><li>one<li>two")) == [
            ["ul", [["li", ["one", ["li", ["two"]]]]]]
        ]

    def test_comment_and_doctype_become_elements(self):
        """Test that comments and DOCTYPE are ordinary elements."""
        assert shape(build("<!DOCTYPE html><!-- c --><html></html>")) == [
            ["!DOCTYPE", [("html", "")], [
                ["!--", [("c", ""), ("--", "")], [["html", []]]]
            ]]
        ]

    def test_closing_tags_are_counted_as_discarded(self):
        """Test statistics and diagnostics for discarded closing tags."""
        builder = TreeBuilder(Scanner("<a><b></b></a>"))
        builder.build()

        assert builder.tokens_discarded == 2
        assert builder.elements_created == 2
        assert builder.max_depth == 2
        assert [d.severity for d in builder.diagnostics] == [DiagnosticSeverity.DEBUG] * 2
        assert builder.diagnostics[0].details == {"tag": "b"}

    def test_unterminated_opening_tag(self):
        """Test that an element survives an unterminated opening tag."""
        assert shape(build("<a b")) == [["a", [("b", "")], []]]

    def test_stray_equals_truncates(self):
        """Test that content after a stray = is dropped without failing."""
        assert shape(build("<a =x>rest")) == [["a", []]]

    @pytest.mark.parametrize("source", [
        "<", ">", "<<<", "</", "=", '<a b="', "<a/b/c>", "\n\n",
        "<a\n b\n=\n'c'>", "<<a>>", "</ >", "<a b=c=d>", "</a></b></c>",
        "<a><b><c>", "text only", "<a b='>'>",
    ])
    def test_build_never_fails(self, source):
        """Test that every input produces some forest."""
        assert isinstance(build(source), list)

    def test_deep_nesting_does_not_recurse(self):
        """Test that nesting depth beyond the recursion limit is handled."""
        depth = 5000
        builder = TreeBuilder(Scanner("<d>" * depth))
        [root] = builder.build()

        assert builder.max_depth == depth
        node = root
        for _ in range(depth - 1):
            [node] = node.children
        assert node.children == ()

    def test_build_shares_cursor(self):
        """Test that a second build continues from an exhausted cursor."""
        builder = TreeBuilder(Scanner("<a>x</a>"))

        assert len(builder.build()) == 1
        assert builder.build() == []


class TestTerminateOnTagEnd:
    """Opt-in assembly where closing tags end the innermost element."""

    config = BuilderConfig(terminate_on_tag_end=True)

    def test_siblings(self):
        """Test that closed elements become siblings."""
        assert shape(build("<p>1</p><p>2</p>", self.config)) == [
            ["p", ["1"]],
            ["p", ["2"]],
        ]

    def test_nested(self):
        """Test nesting with explicit closing tags."""
        assert shape(build("<a><b></b>t</a>", self.config)) == [["a", [["b", []], "t"]]]

    def test_names_are_not_compared(self):
        """Test that any closing tag ends the innermost element."""
        assert shape(build("<a><b></a></b>x", self.config)) == [["a", [["b", []]]], "x"]

    def test_stray_closing_tag_at_root_discarded(self):
        """Test that a closing tag with nothing open is discarded."""
        builder = TreeBuilder(Scanner("</x>y"), config=self.config)

        assert shape(builder.build()) == ["y"]
        assert builder.tokens_discarded == 1

    def test_unclosed_elements_closed_at_end(self):
        """Test that elements still open at end of stream are kept."""
        assert shape(build("<a><b>x", self.config)) == [["a", [["b", ["x"]]]]]


class TestMalformedTokenStreams:
    """Defensive handling of streams the scanner never emits."""

    def test_attribute_name_at_end_of_stream(self):
        """Test that a trailing attribute name is dropped, not paired."""
        source = ListTokenSource([
            token(TokenKind.TAG_NAME, "a"),
            token(TokenKind.ATTRIBUTE_NAME, "b"),
        ])
        builder = TreeBuilder(source)

        [element] = builder.build()
        assert element.attributes == ()
        [diagnostic] = builder.diagnostics
        assert diagnostic.severity is DiagnosticSeverity.WARNING
        assert diagnostic.details == {"tag": "a", "attribute": "b"}

    def test_attribute_name_followed_by_other_token(self):
        """Test that a non-value token stops attribute collection."""
        source = ListTokenSource([
            token(TokenKind.TAG_NAME, "a"),
            token(TokenKind.ATTRIBUTE_NAME, "b"),
            token(TokenKind.TEXT, "lost"),
            token(TokenKind.TEXT, "kept"),
        ])
        builder = TreeBuilder(source)

        assert shape(builder.build()) == [["a", ["kept"]]]
        assert builder.tokens_discarded == 1

    def test_stray_tokens_at_node_position(self):
        """Test that stray attribute and tag-end tokens are discarded."""
        source = ListTokenSource([
            token(TokenKind.OPENING_TAG_END, ">"),
            token(TokenKind.ATTRIBUTE_NAME, "n"),
            token(TokenKind.ATTRIBUTE_VALUE, "v"),
            token(TokenKind.TEXT, "t"),
        ])
        builder = TreeBuilder(source)

        assert shape(builder.build()) == ["t"]
        assert builder.tokens_discarded == 3
        assert all(d.severity is DiagnosticSeverity.INFO for d in builder.diagnostics)

    def test_stray_token_inside_attribute_list_skipped(self):
        """Test that unexpected tokens among attributes are skipped."""
        source = ListTokenSource([
            token(TokenKind.TAG_NAME, "a"),
            token(TokenKind.ATTRIBUTE_VALUE, "orphan"),
            token(TokenKind.ATTRIBUTE_NAME, "b"),
            token(TokenKind.ATTRIBUTE_VALUE, "c"),
            token(TokenKind.OPENING_TAG_END, ">"),
        ])

        assert shape(TreeBuilder(source).build()) == [["a", [("b", "c")], []]]

    def test_diagnostics_can_be_disabled(self):
        """Test that disabling diagnostics keeps statistics but records nothing."""
        builder = TreeBuilder(
            Scanner("</a></b>"),
            config=BuilderConfig(enable_diagnostics=False)
        )
        builder.build()

        assert builder.diagnostics == []
        assert builder.statistics["tokens_discarded"] == 2
