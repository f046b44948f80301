import pytest

from protoclass.diagnostics import all_definitions, create_diagnostic, get_definition
from protoclass.errors import EditConflictError, ProtoclassError


def test_codes_are_unique_and_categorised():
    codes = [definition.code for definition in all_definitions()]
    assert len(codes) == len(set(codes))
    assert all(code.startswith("PC-") for code in codes)
    assert get_definition("PC-2001").category == "invariant"
    assert get_definition("PC-9999") is None


def test_create_diagnostic_formats_message():
    diagnostic = create_diagnostic(
        "PC-2002",
        message_kwargs={"name": "Foo"},
        file="core/Foo.js",
        line=3,
        column=1,
    )
    assert diagnostic.message == "Class 'Foo' cannot extend itself"
    assert diagnostic.format() == "core/Foo.js:3:1: error PC-2002: Class 'Foo' cannot extend itself"
    assert "hint" not in diagnostic.to_dict()


def test_unknown_code_raises():
    with pytest.raises(ValueError):
        create_diagnostic("PC-9999")


def test_error_string_includes_location():
    error = ProtoclassError("Something broke", line=4, column=2)
    assert str(error) == "Something broke (line 4, column 2)"
    assert error.to_diagnostic().category == "internal"


def test_error_from_code_keeps_subclass():
    error = EditConflictError.from_code("PC-3001", edit="[1, 3)", existing="[0, 2)")
    assert isinstance(error, EditConflictError)
    assert error.message == "Edit [1, 3) overlaps existing edit [0, 2)"
    assert error.to_diagnostic().category == "edit"
