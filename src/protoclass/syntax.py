"""
Syntax trees for legacy JavaScript sources.

Parsing is delegated to tree-sitter with the JavaScript grammar. Nodes are
wrapped in ``SyntaxNode`` so the rest of the converter works with character
offsets into the ``str`` source (tree-sitter reports UTF-8 byte offsets),
grammar field names per child, and a stable split between significant
children and comments.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, Optional, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

EXTRA_KINDS = frozenset({"comment", "html_comment"})


@lru_cache(maxsize=1)
def javascript_language() -> Language:
    return Language(tree_sitter_javascript.language())


def _parser() -> Parser:
    return Parser(javascript_language())


class SourceText:
    """Source string plus the byte-to-character offset mapping for it."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8", errors="surrogatepass")
        self._char_offsets: Optional[List[int]] = None
        if len(self.data) != len(text):
            offsets = [0] * (len(self.data) + 1)
            position = 0
            for index, char in enumerate(text):
                width = len(char.encode("utf-8", errors="surrogatepass"))
                for step in range(width):
                    offsets[position + step] = index
                position += width
            offsets[position] = len(text)
            self._char_offsets = offsets

    def char_offset(self, byte_offset: int) -> int:
        if self._char_offsets is None:
            return byte_offset
        return self._char_offsets[byte_offset]

    def line_column(self, offset: int) -> Tuple[int, int]:
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1


class SyntaxNode:
    """A tree-sitter node viewed through character offsets."""

    __slots__ = ("_node", "_source", "field", "_children")

    def __init__(self, node: Node, source: SourceText, field: Optional[str] = None) -> None:
        self._node = node
        self._source = source
        self.field = field
        self._children: Optional[Tuple["SyntaxNode", ...]] = None

    @property
    def kind(self) -> str:
        return self._node.type

    @property
    def start(self) -> int:
        return self._source.char_offset(self._node.start_byte)

    @property
    def end(self) -> int:
        return self._source.char_offset(self._node.end_byte)

    @property
    def text(self) -> str:
        return self._source.text[self.start : self.end]

    @property
    def is_named(self) -> bool:
        return self._node.is_named

    @property
    def is_extra(self) -> bool:
        return self.kind in EXTRA_KINDS

    @property
    def has_error(self) -> bool:
        return self._node.has_error

    @property
    def line(self) -> int:
        return self._source.line_column(self.start)[0]

    @property
    def column(self) -> int:
        return self._source.line_column(self.start)[1]

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        if self._children is None:
            items: List[SyntaxNode] = []
            cursor = self._node.walk()
            if cursor.goto_first_child():
                while True:
                    items.append(SyntaxNode(cursor.node, self._source, cursor.field_name))
                    if not cursor.goto_next_sibling():
                        break
            self._children = tuple(items)
        return self._children

    @property
    def significant_children(self) -> Tuple["SyntaxNode", ...]:
        return tuple(child for child in self.children if not child.is_extra)

    @property
    def named_children(self) -> Tuple["SyntaxNode", ...]:
        return tuple(child for child in self.children if child.is_named and not child.is_extra)

    def child(self, field: str) -> Optional["SyntaxNode"]:
        for child in self.children:
            if child.field == field:
                return child
        return None

    def has_token(self, token: str) -> bool:
        """True when an anonymous child token (``async``, ``*``) is present."""
        return any(not child.is_named and child.kind == token for child in self.children)

    def descendants(self) -> Iterator["SyntaxNode"]:
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return self._node == other._node

    def __hash__(self) -> int:
        return hash((self.kind, self._node.start_byte, self._node.end_byte))

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind}, {self.start}:{self.end})"


@dataclass
class SyntaxTree:
    source: SourceText
    root: SyntaxNode

    @property
    def text(self) -> str:
        return self.source.text

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    @property
    def statements(self) -> Tuple[SyntaxNode, ...]:
        """Top-level declarations in file order, comments excluded."""
        return self.root.named_children


def parse_source(text: str) -> SyntaxTree:
    source = SourceText(text)
    tree = _parser().parse(source.data)
    return SyntaxTree(source=source, root=SyntaxNode(tree.root_node, source))


def is_valid_source(text: str) -> bool:
    """Full-grammar parse check used to validate inputs and generated output."""
    return not parse_source(text).has_error


def unwrap_statement(node: SyntaxNode) -> SyntaxNode:
    """Return the expression of an expression statement, else the node itself."""
    if node.kind == "expression_statement":
        inner = node.named_children
        if len(inner) == 1:
            return inner[0]
    return node
