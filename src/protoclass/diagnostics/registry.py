from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .models import Diagnostic


@dataclass(frozen=True)
class DiagnosticDefinition:
    code: str
    category: str
    default_severity: str
    message_template: str
    doc_url: Optional[str] = None


_DEFINITIONS: Dict[str, DiagnosticDefinition] = {
    # Templates
    "PC-1001": DiagnosticDefinition(
        code="PC-1001",
        category="template",
        default_severity="error",
        message_template="Could not parse template '{template}'",
    ),
    # Invariants
    "PC-2001": DiagnosticDefinition(
        code="PC-2001",
        category="invariant",
        default_severity="error",
        message_template="Class '{name}' already extends '{existing}', cannot also extend '{superclass}'",
    ),
    "PC-2002": DiagnosticDefinition(
        code="PC-2002",
        category="invariant",
        default_severity="error",
        message_template="Class '{name}' cannot extend itself",
    ),
    "PC-2003": DiagnosticDefinition(
        code="PC-2003",
        category="invariant",
        default_severity="error",
        message_template="Superclass of '{name}' must be written as 'Name.prototype', found '{expression}'",
    ),
    "PC-2004": DiagnosticDefinition(
        code="PC-2004",
        category="invariant",
        default_severity="error",
        message_template="'constructor' entry for '{name}' must be the first member, found at position {position}",
    ),
    "PC-2005": DiagnosticDefinition(
        code="PC-2005",
        category="invariant",
        default_severity="error",
        message_template="'{expression}' is not a class name or 'Name.prototype'",
    ),
    "PC-2006": DiagnosticDefinition(
        code="PC-2006",
        category="invariant",
        default_severity="error",
        message_template="Class '{name}' keeps a '{name}.prototype = ...' assignment that cannot follow a class declaration",
    ),
    # Splicing
    "PC-3001": DiagnosticDefinition(
        code="PC-3001",
        category="edit",
        default_severity="error",
        message_template="Edit {edit} overlaps existing edit {existing}",
    ),
    # Oracle
    "PC-4001": DiagnosticDefinition(
        code="PC-4001",
        category="validation",
        default_severity="error",
        message_template="Generated code does not parse",
    ),
    "PC-4002": DiagnosticDefinition(
        code="PC-4002",
        category="validation",
        default_severity="error",
        message_template="Source does not parse",
    ),
}


def get_definition(code: str) -> Optional[DiagnosticDefinition]:
    return _DEFINITIONS.get(code)


def all_definitions() -> Iterable[DiagnosticDefinition]:
    return _DEFINITIONS.values()


def create_diagnostic(
    code: str,
    *,
    message_kwargs: Optional[Dict[str, Any]] = None,
    file: Optional[str] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
    hint: Optional[str] = None,
) -> Diagnostic:
    definition = get_definition(code)
    if not definition:
        raise ValueError(f"Unknown diagnostic code '{code}'")
    kwargs = message_kwargs or {}
    message = definition.message_template.format(**kwargs)
    return Diagnostic(
        code=definition.code,
        category=definition.category,
        severity=definition.default_severity,
        message=message,
        hint=hint,
        file=file,
        line=line,
        column=column,
        doc_url=definition.doc_url,
    )
