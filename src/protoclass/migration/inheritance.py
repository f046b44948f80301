"""
Inheritance discovery: find prototype-chain wiring and record superclasses.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..matcher import compile_template
from ..naming import is_qualified_name
from ..syntax import SyntaxNode
from .context import ConversionContext

logger = logging.getLogger("protoclass.migration")

PROTOTYPE_CHAIN = compile_template("_.prototype = Object.create(_.prototype)")
CONSTRUCTOR_RESET = compile_template("_.prototype.constructor = _")
SUBCLASS_WITH_MEMBERS = compile_template("_ = Object.assign(Object.create(_), _ObjectExpression_)")
PROTOTYPE_OF = compile_template("_.prototype")


def split_prototype(node: SyntaxNode) -> Tuple[str, bool]:
    """``Name.prototype`` -> (``Name``, True); anything else -> (text, False)."""
    bindings = PROTOTYPE_OF(node)
    if bindings:
        return bindings[0].text, True
    return node.text, False


def resolve_subclass_edge(ctx: ConversionContext, target: SyntaxNode, superclass: SyntaxNode) -> Optional[Tuple[str, str]]:
    """Names of the ``Target = Object.assign(Object.create(Super.prototype), {...})`` edge."""
    name, _ = split_prototype(target)
    if not ctx.owns_class(name):
        return None
    parent, is_prototype = split_prototype(superclass)
    if not is_prototype or not is_qualified_name(parent):
        raise ctx.invariant("PC-2003", superclass, name=name, expression=superclass.text)
    return name, parent


def discover_inheritance(ctx: ConversionContext) -> None:
    for node in ctx.statements:
        bindings = PROTOTYPE_CHAIN(node)
        if bindings:
            target, superclass = bindings
            name = target.text
            if not ctx.owns_class(name):
                continue
            if not is_qualified_name(superclass.text):
                raise ctx.invariant("PC-2005", superclass, expression=superclass.text)
            ctx.record(name).set_superclass(superclass.text, node=node, file=ctx.path)
            logger.debug("%s extends %s", name, superclass.text)
            ctx.remove_statement(node)
            continue

        bindings = CONSTRUCTOR_RESET(node)
        if bindings:
            target, _ = bindings
            if ctx.owns_class(target.text):
                ctx.remove_statement(node)
            continue

        bindings = SUBCLASS_WITH_MEMBERS(node)
        if bindings:
            target, superclass, _ = bindings
            edge = resolve_subclass_edge(ctx, target, superclass)
            if edge is None:
                continue
            name, parent = edge
            ctx.record(name).set_superclass(parent, node=node, file=ctx.path)
            logger.debug("%s extends %s", name, parent)
