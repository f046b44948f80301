"""
Custom error types for the protoclass converter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .diagnostics import Diagnostic, create_diagnostic, get_definition


@dataclass
class ProtoclassError(Exception):
    """Base error with optional location metadata."""

    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    file: Optional[str] = None
    code: str = "PC-0000"

    def __str__(self) -> str:  # pragma: no cover - trivial
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.message}{location}"

    def to_diagnostic(self) -> Diagnostic:
        definition = get_definition(self.code)
        return Diagnostic(
            code=self.code,
            category=definition.category if definition else "internal",
            severity="error",
            message=self.message,
            file=self.file,
            line=self.line,
            column=self.column,
        )

    @classmethod
    def from_code(
        cls,
        code: str,
        *,
        file: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        **message_kwargs: Any,
    ) -> "ProtoclassError":
        diagnostic = create_diagnostic(code, message_kwargs=message_kwargs, file=file, line=line, column=column)
        return cls(diagnostic.message, line=line, column=column, file=file, code=code)


@dataclass
class TemplateError(ProtoclassError):
    """A match template could not be parsed."""

    code: str = "PC-1001"


@dataclass
class InvariantViolation(ProtoclassError):
    """A conversion invariant was broken; the file is abandoned."""

    code: str = "PC-2000"


@dataclass
class EditConflictError(ProtoclassError):
    """Two splices touched overlapping ranges of the original text."""

    code: str = "PC-3001"


@dataclass
class OutputValidationError(ProtoclassError):
    """The rendered output failed to re-parse."""

    code: str = "PC-4001"


@dataclass
class InputParseError(ProtoclassError):
    """The input text failed to parse."""

    code: str = "PC-4002"
