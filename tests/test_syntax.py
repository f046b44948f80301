from protoclass.syntax import is_valid_source, parse_source, unwrap_statement


def test_statements_skip_comments():
    tree = parse_source("// header\nfunction Foo() {}\n/* trailing */\nvar x = 1;\n")
    kinds = [node.kind for node in tree.statements]
    assert kinds == ["function_declaration", "variable_declaration"]


def test_offsets_are_characters_not_bytes():
    source = "var s = 'héllo';\nfunction Foo() {}"
    tree = parse_source(source)
    function = tree.statements[1]
    assert function.text == "function Foo() {}"
    assert source[function.start : function.end] == function.text
    assert function.line == 2
    assert function.column == 1


def test_children_carry_field_names():
    tree = parse_source("Foo.prototype.bar = 1;")
    assignment = unwrap_statement(tree.statements[0])
    assert assignment.kind == "assignment_expression"
    assert assignment.child("left").text == "Foo.prototype.bar"
    assert assignment.child("right").text == "1"


def test_has_token_detects_async():
    tree = parse_source("async function load() {}\nfunction plain() {}")
    first, second = tree.statements
    assert first.has_token("async")
    assert not second.has_token("async")


def test_validity_oracle():
    assert is_valid_source("class Foo extends Bar {\n\tconstructor() {\n\t\tsuper();\n\t}\n}")
    assert not is_valid_source("function (")
    assert not is_valid_source("class Foo {")
