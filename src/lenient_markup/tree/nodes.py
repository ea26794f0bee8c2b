"""Node types for the markup forest.

Nodes are frozen: the builder creates each element once, after all of its
children exist, and nothing changes afterwards.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from lenient_markup.tokenization import Token, TokenKind

QUOTE_CHARS = ('"', "'")


def _require_kind(token: Token, kind: TokenKind, role: str) -> None:
    if not isinstance(token, Token) or token.kind is not kind:
        raise ValueError(f"{role} must be a {kind.name} token")


@dataclass(frozen=True)
class Attribute:
    """Name/value pair from an opening tag."""

    name: Token
    value: Token

    def __post_init__(self) -> None:
        _require_kind(self.name, TokenKind.ATTRIBUTE_NAME, "Attribute name")
        _require_kind(self.value, TokenKind.ATTRIBUTE_VALUE, "Attribute value")

    @property
    def name_text(self) -> str:
        return self.name.span.text

    @property
    def value_text(self) -> str:
        """Value with one layer of matching surrounding quotes removed."""
        raw = self.value.span.text
        if len(raw) >= 2 and raw[0] in QUOTE_CHARS and raw[-1] == raw[0]:
            return raw[1:-1]
        return raw


@dataclass(frozen=True)
class TextNode:
    """Text leaf holding the TEXT token it was built from."""

    token: Token

    def __post_init__(self) -> None:
        _require_kind(self.token, TokenKind.TEXT, "Text node token")

    @property
    def text(self) -> str:
        return self.token.span.text

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True, eq=False, repr=False)
class Element:
    """Tagged node with ordered attributes and ordered children.

    Equality, hashing, repr and to_dict() never recurse, so elements nested
    deeper than the interpreter's recursion limit are handled like any other.
    """

    tag_name: Token
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        _require_kind(self.tag_name, TokenKind.TAG_NAME, "Element tag name")
        # Accept any iterable but store tuples so the element stays immutable
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "children", tuple(self.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if (
                left.tag_name != right.tag_name
                or left.attributes != right.attributes
                or len(left.children) != len(right.children)
            ):
                return False
            for left_child, right_child in zip(left.children, right.children):
                if isinstance(left_child, Element) and isinstance(right_child, Element):
                    pending.append((left_child, right_child))
                elif left_child != right_child:
                    return False
        return True

    def __hash__(self) -> int:
        # Shallow; equal elements always agree on these fields
        return hash((self.tag_name, self.attributes, len(self.children)))

    def __repr__(self) -> str:
        return (
            f"Element(name={self.name!r}, attributes={len(self.attributes)}, "
            f"children={len(self.children)})"
        )

    @property
    def name(self) -> str:
        return self.tag_name.span.text

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Unquoted value of the first attribute called name."""
        for attribute in self.attributes:
            if attribute.name_text == name:
                return attribute.value_text
        return default

    def has_attribute(self, name: str) -> bool:
        return any(attribute.name_text == name for attribute in self.attributes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element and all descendants to dictionary representation."""
        result = self._shallow_dict()
        pending = [(self, result["children"])]
        while pending:
            element, children = pending.pop()
            for child in element.children:
                if isinstance(child, Element):
                    entry = child._shallow_dict()
                    pending.append((child, entry["children"]))
                else:
                    entry = child.to_dict()
                children.append(entry)
        return result

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "name": self.name,
            "attributes": [
                {"name": attribute.name_text, "value": attribute.value_text}
                for attribute in self.attributes
            ],
            "children": [],
        }


Node = Union[TextNode, Element]


def walk(nodes: Iterable[Node]) -> Iterator[Tuple[Node, int]]:
    """Yield every node with its depth, in document order.

    Roots have depth 0. Uses an explicit stack, so arbitrarily deep forests
    are safe.
    """
    stack = [(node, 0) for node in reversed(list(nodes))]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        if isinstance(node, Element):
            stack.extend((child, depth + 1) for child in reversed(node.children))
