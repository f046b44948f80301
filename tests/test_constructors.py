from protoclass.migration import build_context, convert_source
from protoclass.migration.constructors import assemble_class, find_constructors
from protoclass.naming import make_class_name_predicate
from protoclass.syntax import parse_source


def _convert(source: str, **kwargs) -> str:
    return convert_source(source, **kwargs).source


def test_find_constructors_in_declaration_order():
    tree = parse_source(
        "function Foo() {}\n"
        "export function Bar() {}\n"
        "THREE.Mesh = function () {};\n"
        "function helper() {}\n"
        "async function Loader() {}\n"
        "var Baz = function () {};\n"
    )
    sites = find_constructors(tree.statements, make_class_name_predicate())
    assert list(sites) == ["Foo", "Bar", "THREE.Mesh"]
    assert sites["THREE.Mesh"].is_assignment
    assert sites["THREE.Mesh"].local_name == "Mesh"
    assert sites["Bar"].replace.kind == "function_declaration"


def test_repeated_declaration_keeps_first():
    tree = parse_source("function Foo() { a(); }\nfunction Foo() { b(); }")
    sites = find_constructors(tree.statements, make_class_name_predicate())
    assert sites["Foo"].function.text == "function Foo() { a(); }"


def test_assemble_empty_class():
    assert assemble_class("class Foo", [], "\t") == "class Foo {\n}"
    assert assemble_class("class Foo", ["a () {}", "b () {}"], "  ") == "class Foo {\n  a () {}\n\n  b () {}\n}"


def test_empty_constructor_without_superclass_is_dropped():
    assert _convert("function Foo() {}") == "class Foo {\n}"


def test_constructor_body_is_kept_without_superclass():
    source = "function Foo( a ) {\n\tthis.a = a;\n}"
    assert _convert(source) == "class Foo {\n\tconstructor( a ) {\n\t\tthis.a = a;\n\t}\n}"


def test_super_call_moves_before_this_statements():
    source = (
        "function Bar() {}\n"
        "function Foo() { this.x = 1; Bar.call(this); this.y = 2; }\n"
        "Foo.prototype = Object.create(Bar.prototype);\n"
        "Foo.prototype.constructor = Foo;"
    )
    output = _convert(source)
    assert output == (
        "class Bar {\n}\n"
        "class Foo extends Bar {\n"
        "\tconstructor() { super(); this.x = 1; this.y = 2; }\n"
        "}"
    )
    assert output.index("super()") < output.index("this.x") < output.index("this.y")


def test_super_call_arguments_drop_receiver():
    source = (
        "function Foo( a, b ) {\n"
        "\tthis.a = a;\n"
        "\tBar.call( this, b );\n"
        "\tthis.b = b;\n"
        "}\n"
        "Foo.prototype = Object.create( Bar.prototype );"
    )
    assert _convert(source) == (
        "class Foo extends Bar {\n"
        "\tconstructor( a, b ) {\n"
        "\t\tsuper( b );\n"
        "\t\tthis.a = a;\n"
        "\t\tthis.b = b;\n"
        "\t}\n"
        "}"
    )


def test_statements_without_this_stay_before_super():
    source = (
        "function Foo( a ) {\n"
        "\tvar b = a * 2;\n"
        "\tthis.a = a;\n"
        "\tBar.call( this, b );\n"
        "}\n"
        "Foo.prototype = Object.create( Bar.prototype );"
    )
    assert _convert(source) == (
        "class Foo extends Bar {\n"
        "\tconstructor( a ) {\n"
        "\t\tvar b = a * 2;\n"
        "\t\tsuper( b );\n"
        "\t\tthis.a = a;\n"
        "\t}\n"
        "}"
    )


def test_apply_becomes_spread_super_call():
    source = (
        "function Foo() {\n"
        "\tBar.apply( this, arguments );\n"
        "}\n"
        "Foo.prototype = Object.create( Bar.prototype );"
    )
    assert "super( ...arguments );" in _convert(source)


def test_missing_super_call_is_inserted_first():
    source = "function Foo( a ) {\n\tthis.a = a;\n}\nFoo.prototype = Object.create( Bar.prototype );"
    assert _convert(source) == (
        "class Foo extends Bar {\n"
        "\tconstructor( a ) {\n"
        "\t\tsuper();\n"
        "\t\tthis.a = a;\n"
        "\t}\n"
        "}"
    )


def test_empty_subclass_constructor_calls_super():
    source = "function Foo() {}\nFoo.prototype = Object.create( Bar.prototype );"
    assert _convert(source) == "class Foo extends Bar {\n\tconstructor() {\n\t\tsuper();\n\t}\n}"


def test_call_to_other_function_is_not_a_super_call():
    source = "function Foo() {\n\tOther.call( this );\n}\nFoo.prototype = Object.create( Bar.prototype );"
    output = _convert(source)
    assert "\t\tsuper();\n\t\tOther.call( this );" in output


def test_members_are_assembled_in_order():
    source = (
        "function Foo() {\n"
        "\tthis.x = 0;\n"
        "}\n"
        "Object.assign( Foo.prototype, {\n"
        "\tbar: function () {\n"
        "\t\treturn this.x;\n"
        "\t},\n"
        "\tisFoo: true\n"
        "} );\n"
        "Object.assign( Foo, {\n"
        "\tmake: function () {\n"
        "\t\treturn new Foo();\n"
        "\t}\n"
        "} );"
    )
    assert _convert(source) == (
        "class Foo {\n"
        "\tconstructor() {\n"
        "\t\tthis.x = 0;\n"
        "\t}\n"
        "\n"
        "\tbar () {\n"
        "\t\treturn this.x;\n"
        "\t}\n"
        "\n"
        "\tstatic make () {\n"
        "\t\treturn new Foo();\n"
        "\t}\n"
        "}\n"
        "Foo.prototype.isFoo = true;"
    )


def test_namespace_constructor_becomes_class_expression():
    source = (
        "THREE.Mesh = function ( geometry ) {\n"
        "\tTHREE.Object3D.call( this );\n"
        "\tthis.geometry = geometry;\n"
        "};\n"
        "THREE.Mesh.prototype = Object.create( THREE.Object3D.prototype );"
    )
    assert _convert(source) == (
        "THREE.Mesh = class Mesh extends THREE.Object3D {\n"
        "\tconstructor( geometry ) {\n"
        "\t\tsuper();\n"
        "\t\tthis.geometry = geometry;\n"
        "\t}\n"
        "};"
    )


def test_exported_constructor_stays_exported():
    assert _convert("export function Foo() {}") == "export class Foo {\n}"


def test_space_indented_files_keep_their_unit():
    source = "function Foo( a ) {\n  this.a = a;\n}\nFoo.prototype = Object.create( Bar.prototype );"
    assert _convert(source) == (
        "class Foo extends Bar {\n"
        "  constructor( a ) {\n"
        "    super();\n"
        "    this.a = a;\n"
        "  }\n"
        "}"
    )


def test_multiline_template_literal_is_not_reindented():
    source = "function Foo() {\n\tthis.html = `\n<div></div>\n`;\n}"
    output = _convert(source)
    assert "`\n<div></div>\n`" in output


def test_context_is_per_file():
    first = build_context("function Foo() {}")
    second = build_context("function Bar() {}")
    assert list(first.constructors) == ["Foo"]
    assert list(second.constructors) == ["Bar"]


def test_prototype_method_assignment_is_not_a_constructor():
    tree = parse_source("function Foo() {}\nFoo.prototype.Make = function () { return 1; };\nNS.Foo.prototype.Build = function () {};")
    assert list(find_constructors(tree.statements, make_class_name_predicate())) == ["Foo"]
    source = "function Foo() {}\nFoo.prototype.Make = function () { return 1; };"
    assert _convert(source) == "class Foo {\n}\nFoo.prototype.Make = function () { return 1; };"


def test_crlf_sources_keep_crlf_line_endings():
    source = (
        "function Foo( a ) { // c\r\n"
        "\tthis.x = a;\r\n"
        "}\r\n"
        "Foo.prototype = Object.create( Bar.prototype );\r\n"
        "Object.assign( Foo.prototype, {\r\n"
        "\t// Size.\r\n"
        "\tsize: 1,\r\n"
        "\tbar: function () {}\r\n"
        "} );\r\n"
    )
    output = _convert(source)
    assert "\n" not in output.replace("\r\n", "")
    assert output == (
        "class Foo extends Bar {\r\n"
        "\tconstructor( a ) { // c\r\n"
        "\t\tsuper();\r\n"
        "\t\tthis.x = a;\r\n"
        "\t}\r\n"
        "\r\n"
        "\tbar () {}\r\n"
        "}\r\n"
        "// Size.\r\n"
        "Foo.prototype.size = 1;\r\n"
    )


def test_crlf_empty_subclass_body():
    source = "function Foo() {\r\n}\r\nFoo.prototype = Object.create( Bar.prototype );\r\n"
    assert _convert(source) == "class Foo extends Bar {\r\n\tconstructor() {\r\n\t\tsuper();\r\n\t}\r\n}\r\n"
