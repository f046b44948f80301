"""
Structural matcher: compile a small template into a reusable matcher.

A template is ordinary JavaScript in which identifiers act as wildcards:

``_``
    matches any single subtree and captures it.
``_Kind_``
    matches only a subtree of syntax kind ``Kind`` and captures it. ``Kind``
    is a tree-sitter kind (``_object_``) or one of the ESTree names in
    ``KIND_ALIASES`` (``_ObjectExpression_``).

Matching a candidate returns the captured subtrees in traversal order, or
``None``. Matching never mutates the tree.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, List, Optional, Sequence

from .errors import TemplateError
from .syntax import SyntaxNode, parse_source, unwrap_statement

Bindings = List[SyntaxNode]

WILDCARD = "_"
_TYPED_WILDCARD = re.compile(r"^_(\w+)_$")
_WILDCARD_KINDS = frozenset({"identifier", "property_identifier", "shorthand_property_identifier"})

KIND_ALIASES: Dict[str, str] = {
    "ArrayExpression": "array",
    "ArrowFunctionExpression": "arrow_function",
    "AssignmentExpression": "assignment_expression",
    "BlockStatement": "statement_block",
    "CallExpression": "call_expression",
    "ClassExpression": "class",
    "ExpressionStatement": "expression_statement",
    "FunctionDeclaration": "function_declaration",
    "FunctionExpression": "function_expression",
    "Identifier": "identifier",
    "MemberExpression": "member_expression",
    "NewExpression": "new_expression",
    "ObjectExpression": "object",
    "Property": "pair",
    "ThisExpression": "this",
}


def resolve_kind(name: str) -> str:
    return KIND_ALIASES.get(name, name)


def _member_key(member: SyntaxNode) -> Optional[str]:
    if member.kind == "pair":
        key = member.child("key")
        return key.text if key is not None else None
    if member.kind == "method_definition":
        name = member.child("name")
        return name.text if name is not None else None
    if member.kind == "shorthand_property_identifier":
        return member.text
    return None


def _is_wildcard_key(key: Optional[str]) -> bool:
    return key is None or key == WILDCARD or bool(_TYPED_WILDCARD.match(key))


class Matcher:
    def __init__(self, template: str, pattern: SyntaxNode) -> None:
        self.template = template
        self.pattern = pattern

    def __call__(self, candidate: Optional[SyntaxNode]) -> Optional[Bindings]:
        if candidate is None:
            return None
        bindings: Bindings = []
        if self._match(self.pattern, unwrap_statement(candidate), bindings):
            return bindings
        return None

    def __repr__(self) -> str:
        return f"Matcher({self.template!r})"

    def _match(self, pattern: SyntaxNode, candidate: SyntaxNode, bindings: Bindings) -> bool:
        if pattern.kind in _WILDCARD_KINDS:
            name = pattern.text
            if name == WILDCARD:
                bindings.append(candidate)
                return True
            typed = _TYPED_WILDCARD.match(name)
            if typed:
                if candidate.kind != resolve_kind(typed.group(1)):
                    return False
                bindings.append(candidate)
                return True

        if pattern.kind != candidate.kind:
            return False

        pattern_children = pattern.significant_children
        candidate_children = candidate.significant_children
        if not pattern_children or not candidate_children:
            if pattern_children or candidate_children:
                return False
            return pattern.text == candidate.text

        if pattern.kind == "object":
            return self._match_members(pattern, candidate, bindings)
        return self._match_children(pattern_children, candidate_children, bindings)

    def _match_children(
        self,
        pattern_children: Sequence[SyntaxNode],
        candidate_children: Sequence[SyntaxNode],
        bindings: Bindings,
    ) -> bool:
        if len(pattern_children) != len(candidate_children):
            return False
        for expected, actual in zip(pattern_children, candidate_children):
            if expected.field != actual.field:
                return False
            if not self._match(expected, actual, bindings):
                return False
        return True

    def _match_members(self, pattern: SyntaxNode, candidate: SyntaxNode, bindings: Bindings) -> bool:
        expected_members = pattern.named_children
        actual_members = candidate.named_children
        if len(expected_members) != len(actual_members):
            return False
        keys = [_member_key(member) for member in expected_members]
        if any(_is_wildcard_key(key) for key in keys) or len(set(keys)) != len(keys):
            return self._match_children(expected_members, actual_members, bindings)

        by_key = dict(zip(keys, expected_members))
        # Walk the candidate's members in its own order so captures follow the source.
        for actual in actual_members:
            expected = by_key.pop(_member_key(actual), None)
            if expected is None:
                return False
            if not self._match(expected, actual, bindings):
                return False
        return True


@lru_cache(maxsize=None)
def compile_template(template: str) -> Matcher:
    tree = parse_source(template)
    statements = tree.statements
    if tree.has_error or len(statements) != 1:
        raise TemplateError.from_code("PC-1001", template=template)
    return Matcher(template, unwrap_statement(statements[0]))
