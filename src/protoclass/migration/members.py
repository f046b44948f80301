"""
Member extraction: turn object-literal method bags into class-body members.

Handles ``Object.assign(Name.prototype, {...})``, ``Object.assign(Name, {...})``
(static members), ``Name.prototype = {...}`` and the combined
``Name.prototype = Object.assign(Object.create(Super.prototype), {...})``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..matcher import compile_template
from ..syntax import SyntaxNode, unwrap_statement
from .context import ClassRecord, ConversionContext, PropertyRecord
from .inheritance import SUBCLASS_WITH_MEMBERS, split_prototype

logger = logging.getLogger("protoclass.migration")

ASSIGN_MEMBERS = compile_template("Object.assign(_, _ObjectExpression_)")
PROTOTYPE_LITERAL = compile_template("_.prototype = _ObjectExpression_")

FUNCTION_KINDS = frozenset({"function_expression", "generator_function"})
MEMBER_KINDS = frozenset({"pair", "method_definition", "shorthand_property_identifier"})


def match_member_bag(node: SyntaxNode) -> Optional[Tuple[str, bool, SyntaxNode]]:
    """(owner name, is_static, object literal) for a method-bag statement."""
    bindings = ASSIGN_MEMBERS(node)
    if bindings:
        target, members = bindings
        owner, is_prototype = split_prototype(target)
        return owner, not is_prototype, members

    bindings = PROTOTYPE_LITERAL(node)
    if bindings:
        target, members = bindings
        return target.text, False, members

    bindings = SUBCLASS_WITH_MEMBERS(node)
    if bindings:
        target, _, members = bindings
        owner, is_prototype = split_prototype(target)
        return owner, not is_prototype, members
    return None


def _is_accessor(member: SyntaxNode) -> bool:
    return member.kind == "method_definition" and (member.has_token("get") or member.has_token("set"))


def _is_convertible(members: SyntaxNode) -> bool:
    """Spreads and get/set accessors keep the bag as written: ``Object.assign`` reads getters once and skips setters."""
    return all(member.kind in MEMBER_KINDS and not _is_accessor(member) for member in members.named_children)


def replaces_prototype(node: SyntaxNode) -> bool:
    """``Name.prototype = ...``: such a statement cannot follow a class declaration of ``Name``."""
    inner = unwrap_statement(node)
    if inner.kind != "assignment_expression":
        return False
    return split_prototype(inner.child("left"))[1]


def _key_text(member: SyntaxNode) -> str:
    if member.kind == "shorthand_property_identifier":
        return member.text
    key = member.child("key") or member.child("name")
    return key.text if key is not None else ""


def _method_text(ctx: ConversionContext, member: SyntaxNode, function: SyntaxNode, is_static: bool) -> str:
    """``foo: function (a) {}`` -> ``foo (a) {}``, keeping async/generator markers."""
    key = member.child("key")
    parameters = function.child("parameters")
    ctx.buffer.overwrite(key.end, parameters.start, " ")
    prefix = "static " if is_static else ""
    if function.has_token("async"):
        prefix += "async "
    if function.kind == "generator_function":
        prefix += "*"
    return prefix + ctx.buffer.slice(member.start, member.end)


def _with_comments(ctx: ConversionContext, comments: List[SyntaxNode], text: str, member: SyntaxNode) -> str:
    if not comments:
        return text
    indent = ctx.line_indent(member.start)
    lines = [comment.text for comment in comments] + [text]
    return (ctx.newline + indent).join(lines)


def convert_members(ctx: ConversionContext, record: ClassRecord, members: SyntaxNode, is_static: bool) -> None:
    methods = record.static_methods if is_static else record.methods
    pending: List[SyntaxNode] = []
    position = 0
    for member in members.children:
        if member.is_extra:
            pending.append(member)
            continue
        if not member.is_named:
            continue
        key = _key_text(member)
        index = position
        position += 1

        if member.kind in ("pair", "method_definition") and key == "constructor":
            if index != 0:
                raise ctx.invariant("PC-2004", member, name=record.name, position=index)
            pending = []
            continue

        value = member.child("value")
        if member.kind == "pair" and value is not None and value.kind in FUNCTION_KINDS:
            methods.append(_with_comments(ctx, pending, _method_text(ctx, member, value, is_static), member))
        elif member.kind == "method_definition":
            text = ("static " if is_static else "") + member.text
            methods.append(_with_comments(ctx, pending, text, member))
        else:
            key_node = member if member.kind == "shorthand_property_identifier" else member.child("key")
            record.properties.append(
                PropertyRecord(
                    name=key,
                    value_text=value.text if value is not None else member.text,
                    is_static=is_static,
                    key_kind=key_node.kind,
                    comments=[comment.text for comment in pending],
                )
            )
        pending = []

    if pending:
        # Trailing comments stay at the end of the class body.
        methods.append(_with_comments(ctx, pending[:-1], pending[-1].text, pending[-1]))


def extract_members(ctx: ConversionContext) -> None:
    for node in ctx.statements:
        match = match_member_bag(node)
        if match is None:
            continue
        name, is_static, members = match
        if not ctx.owns_class(name):
            continue
        reason = None
        if ctx.is_example and ctx.superclass_of(name) is None:
            reason = "example file"
        elif not _is_convertible(members):
            reason = "unsupported member in object literal"
        if reason is not None:
            if replaces_prototype(node):
                raise ctx.invariant("PC-2006", node, name=name)
            logger.debug("Leaving members of %s: %s", name, reason)
            continue
        convert_members(ctx, ctx.record(name), members, is_static)
        ctx.remove_statement(node)
