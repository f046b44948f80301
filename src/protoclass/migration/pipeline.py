"""
Per-file conversion: run the three rewrite passes and validate the output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import ConverterConfig
from ..errors import InputParseError, OutputValidationError
from ..naming import ClassNamePredicate
from ..syntax import SyntaxTree, is_valid_source, parse_source
from .constructors import find_constructors, reconstruct_constructors
from .context import ConversionContext
from .inheritance import discover_inheritance
from .members import extract_members

logger = logging.getLogger("protoclass.migration")


@dataclass
class ConversionResult:
    path: Optional[str]
    source: str
    classes: List[str] = field(default_factory=list)
    superclasses: Dict[str, str] = field(default_factory=dict)
    methods: int = 0
    static_methods: int = 0
    properties: int = 0
    removed_statements: int = 0
    changed: bool = False

    def summary(self) -> Dict[str, Any]:
        return {
            "classes_converted": list(self.classes),
            "superclasses": dict(self.superclasses),
            "methods_moved": self.methods,
            "static_methods_moved": self.static_methods,
            "properties_reattached": self.properties,
            "statements_removed": self.removed_statements,
            "changed": self.changed,
        }


def build_context(
    source: str,
    *,
    path: Optional[str] = None,
    is_example: bool = False,
    is_class_name: Optional[ClassNamePredicate] = None,
    tree: Optional[SyntaxTree] = None,
) -> ConversionContext:
    """Fresh per-file context with the constructor sites already located."""
    ctx = ConversionContext.create(source, path=path, is_example=is_example, is_class_name=is_class_name, tree=tree)
    ctx.constructors = find_constructors(ctx.statements, ctx.is_class_name)
    return ctx


def run_passes(ctx: ConversionContext) -> str:
    """Inheritance first: both later passes read the recorded superclasses."""
    discover_inheritance(ctx)
    extract_members(ctx)
    reconstruct_constructors(ctx)
    return ctx.render()


def convert_source(
    source: str,
    *,
    path: Optional[str] = None,
    is_example: bool = False,
    is_class_name: Optional[ClassNamePredicate] = None,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    if is_class_name is None:
        is_class_name = (config or ConverterConfig()).class_name_predicate()

    tree = parse_source(source)
    if tree.has_error:
        raise InputParseError.from_code("PC-4002", file=path)

    ctx = build_context(source, path=path, is_example=is_example, is_class_name=is_class_name, tree=tree)
    output = run_passes(ctx)

    if not is_valid_source(output):
        raise OutputValidationError.from_code("PC-4001", file=path)

    records = [ctx.classes[name] for name in ctx.constructors if name in ctx.classes]
    result = ConversionResult(
        path=path,
        source=output,
        classes=list(ctx.constructors),
        superclasses={record.name: record.superclass for record in records if record.superclass},
        methods=sum(len(record.methods) for record in records),
        static_methods=sum(len(record.static_methods) for record in records),
        properties=sum(len(record.properties) for record in records),
        removed_statements=ctx.removed_statements,
        changed=output != source,
    )
    logger.debug("Converted %s: %s", path or "<source>", result.summary())
    return result
