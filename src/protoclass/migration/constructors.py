"""
Constructor reconstruction: replace constructor functions with class
declarations assembled from the records of the earlier passes.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..matcher import compile_template
from ..naming import ClassNamePredicate
from ..syntax import SyntaxNode
from .context import ClassRecord, ConstructorSite, ConversionContext

logger = logging.getLogger("protoclass.migration")

NAMESPACE_CONSTRUCTOR = compile_template("_._ = _FunctionExpression_")
SUPER_CALL = compile_template("_.call")
SUPER_APPLY = compile_template("_.apply")


def find_constructors(statements: Sequence[SyntaxNode], is_class_name: ClassNamePredicate) -> Dict[str, ConstructorSite]:
    """Class-named constructor functions declared at the top level, in file order."""
    sites: Dict[str, ConstructorSite] = {}
    for node in statements:
        site = _constructor_site(node)
        if site is None or not is_class_name(site.name):
            continue
        if site.function.has_token("async"):
            continue
        if site.name in sites:
            logger.debug("Ignoring repeated declaration of %s", site.name)
            continue
        sites[site.name] = site
    return sites


def _constructor_site(node: SyntaxNode) -> Optional[ConstructorSite]:
    declaration = node
    if node.kind == "export_statement":
        declaration = node.child("declaration")
        if declaration is None:
            return None
    if declaration.kind == "function_declaration":
        name = declaration.child("name")
        if name is None:
            return None
        return ConstructorSite(name=name.text, function=declaration, replace=declaration)

    bindings = NAMESPACE_CONSTRUCTOR(node)
    if bindings:
        namespace, identifier, function = bindings
        segments = [part.strip() for part in namespace.text.split(".")] + [identifier.text]
        if "prototype" in segments:
            # ``Foo.prototype.Make = function`` is a method, not a constructor.
            return None
        return ConstructorSite(
            name=f"{namespace.text}.{identifier.text}",
            function=function,
            replace=node,
            is_assignment=True,
        )
    return None


def _super_call(statement: SyntaxNode, superclass: str) -> Optional[SyntaxNode]:
    """The call node when ``statement`` is exactly ``Super.call(this, ...)`` or ``Super.apply(this, ...)``."""
    if statement.kind != "expression_statement":
        return None
    inner = statement.named_children
    if len(inner) != 1 or inner[0].kind != "call_expression":
        return None
    call = inner[0]
    callee = call.child("function")
    bindings = SUPER_CALL(callee) or SUPER_APPLY(callee)
    if not bindings or bindings[0].text != superclass:
        return None
    arguments = call.child("arguments")
    if arguments is None:
        return None
    values = arguments.named_children
    if not values or values[0].kind != "this":
        return None
    if callee.child("property").text == "apply" and len(values) > 2:
        return None
    return call


def _rewrite_super_call(ctx: ConversionContext, call: SyntaxNode) -> None:
    """``Super.call(this, a, b)`` -> ``super(a, b)``; ``Super.apply(this, args)`` -> ``super(...args)``."""
    callee = call.child("function")
    arguments = call.child("arguments")
    values = arguments.named_children
    receiver = values[0]
    ctx.buffer.overwrite(callee.start, callee.end, "super")
    if len(values) == 1:
        ctx.buffer.overwrite(arguments.start, arguments.end, "()")
    elif callee.child("property").text == "apply":
        ctx.buffer.overwrite(receiver.start, values[1].start, "...")
    else:
        ctx.buffer.remove(receiver.start, values[1].start)


def _close_empty_body(ctx: ConversionContext, body: SyntaxNode) -> None:
    """Insert ``super();`` on its own line inside a body with no statements."""
    closing = body.end - 1
    anchor = ctx.whitespace_before(closing, body.start + 1)
    closing_indent = ctx.line_indent(closing) if "\n" in ctx.source[anchor:closing] else ""
    text = f"{ctx.newline}{closing_indent}{ctx.indent}super();"
    if "\n" not in ctx.source[anchor:closing]:
        text += ctx.newline
    ctx.buffer.append(anchor, text)


def make_valid_constructor(ctx: ConversionContext, function: SyntaxNode, superclass: Optional[str]) -> Optional[str]:
    """
    Build the ``constructor (...) {...}`` member, or return ``None`` when the
    class needs no explicit constructor.

    Without a superclass the constructor is kept only when its body is not
    empty. With one, the first ``Super.call(this, ...)`` statement becomes
    ``super(...)`` and every earlier statement mentioning ``this`` moves
    after it; when there is no such call ``super();`` is inserted before the
    first statement.
    """
    parameters = function.child("parameters")
    body = function.child("body")
    statements = body.named_children

    if superclass is None:
        if not any(child.is_named for child in body.children):
            return None
        return "constructor" + ctx.buffer.slice(parameters.start, body.end)

    if not statements:
        _close_empty_body(ctx, body)
        return "constructor" + ctx.buffer.slice(parameters.start, body.end)

    for index, statement in enumerate(statements):
        call = _super_call(statement, superclass)
        if call is None:
            continue
        _rewrite_super_call(ctx, call)
        # Textual check, not data flow: any statement containing "this" moves.
        relocated = [earlier for earlier in statements[:index] if "this" in earlier.text]
        if relocated:
            separator = ctx.separator_before(statement)
            for earlier in relocated:
                ctx.buffer.remove(ctx.whitespace_before(earlier.start, body.start + 1), earlier.end)
            ctx.buffer.append(statement.end, "".join(separator + earlier.text for earlier in relocated))
        break
    else:
        first = statements[0]
        ctx.buffer.prepend(first.start, "super();" + ctx.separator_before(first))

    return "constructor" + ctx.buffer.slice(parameters.start, body.end)


def _has_multiline_template(function: SyntaxNode) -> bool:
    return any(node.kind == "template_string" and "\n" in node.text for node in function.descendants())


def _indent_continuation(text: str, indent: str) -> str:
    lines = text.split("\n")
    return "\n".join([lines[0]] + [indent + line if line.strip() else line for line in lines[1:]])


def assemble_class(header: str, members: List[str], indent: str, newline: str = "\n") -> str:
    if not members:
        return header + " {" + newline + "}"
    body = (newline * 2).join(indent + member for member in members)
    return header + " {" + newline + body + newline + "}"


def build_class(ctx: ConversionContext, site: ConstructorSite, record: ClassRecord) -> str:
    header = f"class {site.local_name}"
    # Only the class name drops its namespace. The superclass is emitted as
    # recorded (``extends THREE.Object3D``) so it resolves where the class is used.
    if record.superclass:
        header += f" extends {record.superclass}"

    members: List[str] = []
    constructor = make_valid_constructor(ctx, site.function, record.superclass)
    if constructor is not None:
        if not _has_multiline_template(site.function):
            constructor = _indent_continuation(constructor, ctx.indent)
        members.append(constructor)
    members.extend(record.methods)
    members.extend(record.static_methods)

    declaration = assemble_class(header, members, ctx.indent, ctx.newline)
    if site.is_assignment:
        declaration = f"{site.name} = {declaration};"
    statements = [prop.statement(site.name, ctx.newline) for prop in record.properties]
    return ctx.newline.join([declaration] + statements)


def reconstruct_constructors(ctx: ConversionContext) -> None:
    for site in ctx.constructors.values():
        record = ctx.classes.get(site.name) or ClassRecord(name=site.name)
        logger.info("Converting constructor %s", site.name)
        text = build_class(ctx, site, record)
        ctx.buffer.overwrite(site.replace.start, site.replace.end, text)
