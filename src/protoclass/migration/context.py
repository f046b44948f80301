"""
Per-file conversion state shared by the rewrite passes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..edits import EditBuffer
from ..errors import InvariantViolation
from ..naming import ClassNamePredicate, make_class_name_predicate, unqualified
from ..syntax import SyntaxNode, SyntaxTree, parse_source

DEFAULT_INDENT = "\t"


@dataclass
class PropertyRecord:
    """A non-function member re-attached after the class declaration."""

    name: str
    value_text: str
    is_static: bool = False
    key_kind: str = "property_identifier"
    comments: List[str] = field(default_factory=list)

    @property
    def accessor(self) -> str:
        if self.key_kind == "computed_property_name":
            return self.name
        if self.key_kind in {"property_identifier", "identifier", "shorthand_property_identifier"}:
            return f".{self.name}"
        return f"[{self.name}]"

    def statement(self, owner: str, newline: str = "\n") -> str:
        target = owner if self.is_static else f"{owner}.prototype"
        return "".join(comment + newline for comment in self.comments) + f"{target}{self.accessor} = {self.value_text};"


@dataclass
class ClassRecord:
    name: str
    superclass: Optional[str] = None
    methods: List[str] = field(default_factory=list)
    static_methods: List[str] = field(default_factory=list)
    properties: List[PropertyRecord] = field(default_factory=list)

    def set_superclass(self, superclass: str, *, node: Optional[SyntaxNode] = None, file: Optional[str] = None) -> None:
        """Record the superclass once; repeating it is a no-op, changing it is an error."""
        location = _location(node)
        if superclass == self.name:
            raise InvariantViolation.from_code("PC-2002", file=file, name=self.name, **location)
        if self.superclass is None:
            self.superclass = superclass
            return
        if self.superclass != superclass:
            raise InvariantViolation.from_code(
                "PC-2001",
                file=file,
                name=self.name,
                existing=self.superclass,
                superclass=superclass,
                **location,
            )


@dataclass
class ConstructorSite:
    """A constructor function that becomes a class declaration."""

    name: str
    function: SyntaxNode
    replace: SyntaxNode
    is_assignment: bool = False

    @property
    def local_name(self) -> str:
        return unqualified(self.name)


def _location(node: Optional[SyntaxNode]) -> Dict[str, Any]:
    if node is None:
        return {}
    return {"line": node.line, "column": node.column}


def _leading_breaks(text: str) -> int:
    return text[: len(text) - len(text.lstrip())].count("\n")


def detect_newline(source: str) -> str:
    return "\r\n" if "\r\n" in source else "\n"


def detect_indent(source: str) -> str:
    """Indentation unit of a source file: a tab, or the narrowest space run."""
    widths: List[int] = []
    for line in source.splitlines():
        stripped = line.lstrip(" \t")
        if not stripped or stripped == line or stripped.startswith("*"):
            continue
        if line.startswith("\t"):
            return "\t"
        widths.append(len(line) - len(line.lstrip(" ")))
    if not widths:
        return DEFAULT_INDENT
    return " " * min(widths)


@dataclass
class ConversionContext:
    """
    Everything one file's conversion needs: the tree, the edit buffer, the
    class-record table and the injected class-name predicate. Built fresh per
    file and discarded after rendering.
    """

    tree: SyntaxTree
    buffer: EditBuffer
    is_class_name: ClassNamePredicate
    path: Optional[str] = None
    is_example: bool = False
    indent: str = DEFAULT_INDENT
    newline: str = "\n"
    classes: Dict[str, ClassRecord] = field(default_factory=dict)
    constructors: Dict[str, ConstructorSite] = field(default_factory=dict)
    removed_statements: int = 0

    @classmethod
    def create(
        cls,
        source: str,
        *,
        path: Optional[str] = None,
        is_example: bool = False,
        is_class_name: Optional[ClassNamePredicate] = None,
        tree: Optional[SyntaxTree] = None,
    ) -> "ConversionContext":
        return cls(
            tree=tree or parse_source(source),
            buffer=EditBuffer(source),
            is_class_name=is_class_name or make_class_name_predicate(),
            path=path,
            is_example=is_example,
            indent=detect_indent(source),
            newline=detect_newline(source),
        )

    @property
    def source(self) -> str:
        return self.tree.text

    @property
    def statements(self):
        return self.tree.statements

    def record(self, name: str) -> ClassRecord:
        if name not in self.classes:
            self.classes[name] = ClassRecord(name=name)
        return self.classes[name]

    def superclass_of(self, name: str) -> Optional[str]:
        record = self.classes.get(name)
        return record.superclass if record else None

    def owns_class(self, name: str) -> bool:
        """A class-named target whose constructor is declared in this file."""
        return self.is_class_name(name) and name in self.constructors

    def invariant(self, code: str, node: Optional[SyntaxNode] = None, **message_kwargs: Any) -> InvariantViolation:
        return InvariantViolation.from_code(code, file=self.path, **_location(node), **message_kwargs)

    def whitespace_before(self, offset: int, floor: int = 0) -> int:
        """Start of the whitespace run that ends at ``offset``."""
        source = self.source
        while offset > floor and source[offset - 1].isspace():
            offset -= 1
        return offset

    def remove_statement(self, node: SyntaxNode, floor: int = 0) -> None:
        """Remove a statement together with the whitespace leading up to it."""
        self.buffer.remove(self.whitespace_before(node.start, floor), node.end)
        self.removed_statements += 1

    def render(self) -> str:
        """
        Rendered output. Statements removed from the top of the file leave no
        blank lines ahead of the first kept line.
        """
        output = self.buffer.render()
        while _leading_breaks(output) > _leading_breaks(self.source):
            output = output.split("\n", 1)[1]
        return output

    def line_indent(self, offset: int) -> str:
        source = self.source
        line_start = source.rfind("\n", 0, offset) + 1
        end = line_start
        while end < len(source) and source[end] in " \t":
            end += 1
        return source[line_start:end]

    def separator_before(self, node: SyntaxNode) -> str:
        """How ``node`` is separated from what precedes it: a newline plus indent, or a space."""
        leading = self.source[self.whitespace_before(node.start) : node.start]
        if "\n" in leading:
            return self.newline + self.line_indent(node.start)
        return " "
