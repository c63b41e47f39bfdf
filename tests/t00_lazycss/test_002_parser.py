import os

import pytest

from lazycss.stylesheet.exceptions import ParseError, ReadError
from lazycss.stylesheet.models import ImportNode, RuleNode
from lazycss.stylesheet.parser import StylesheetParser, is_plain_css_import, scan_imports


@pytest.fixture
def parser():
    return StylesheetParser()


def test_plain_rules_have_no_imports(parser, write_file):
    path = write_file("a.scss", ".a { color: red; }\n.b { color: blue; }\n")

    sheet = parser.parse_file(path)

    assert sheet.path == path
    assert sheet.imports == []
    assert len(sheet.nodes) == 2
    assert all(isinstance(node, RuleNode) and not node.has_import for node in sheet.nodes)


def test_import_is_resolved_with_subtree(parser, write_file):
    a = write_file("a.scss", '@import "b";\n.a { color: red; }\n')
    b = write_file("b.scss", ".b { color: blue; }\n")

    sheet = parser.parse_file(a)

    [node] = sheet.imports
    assert isinstance(node, ImportNode)
    assert node.has_import
    assert node.path == "b.scss"
    assert node.line == 1
    assert node.subtree.path == b


def test_partial_and_index_lookup(parser, write_file):
    a = write_file("a.scss", '@import "colors";\n@import "theme";\n')
    write_file("_colors.scss", ".c { color: red; }\n")
    write_file("theme/_index.scss", ".t { color: red; }\n")

    sheet = parser.parse_file(a)

    assert [node.path for node in sheet.imports] == [
        "_colors.scss",
        os.path.join("theme", "_index.scss"),
    ]


def test_nested_import_resolves_against_importer_directory(parser, write_file):
    a = write_file("a.scss", '@import "sub/b";\n')
    write_file("sub/b.scss", '@import "c";\n')
    nested_c = write_file("sub/c.scss", ".c { color: red; }\n")
    write_file("c.scss", ".wrong { color: red; }\n")

    [b_node] = parser.parse_file(a).imports
    [c_node] = b_node.subtree.imports

    assert c_node.path == "c.scss"
    assert c_node.subtree.path == nested_c


def test_unresolved_imports_are_rule_nodes(parser, write_file):
    # Plain CSS and missing files are not followed
    a = write_file("a.scss", '@import "missing";\n'
                             '@import "print.css";\n'
                             '@import url("http://example.com/x.css");\n')

    sheet = parser.parse_file(a)

    assert sheet.imports == []
    assert [node.kind for node in sheet.nodes] == ["import", "import", "import"]


def test_import_cycle_is_not_followed(parser, write_file):
    a = write_file("a.scss", '@import "b";\n')
    write_file("b.scss", '@import "a";\n')

    [b_node] = parser.parse_file(a).imports

    assert b_node.subtree.imports == []


def test_malformed_syntax(parser, write_file):
    path = write_file("broken.scss", ".a { color: red; }\n}\n")

    with pytest.raises(ParseError) as exc_info:
        parser.parse_file(path)

    assert exc_info.value.path == path
    assert exc_info.value.line == 2


def test_malformed_import_propagates(parser, write_file):
    a = write_file("a.scss", '@import "b";\n')
    b = write_file("b.scss", "}\n")

    with pytest.raises(ParseError) as exc_info:
        parser.parse_file(a)

    assert exc_info.value.path == b


def test_missing_file(parser, tmp_path):
    with pytest.raises(ReadError) as exc_info:
        parser.parse_file(str(tmp_path / "nope.scss"))
    assert exc_info.value.is_not_found


def test_plain_css_targets():
    assert is_plain_css_import("theme.css")
    assert is_plain_css_import("https://fonts.example.com/font")
    assert is_plain_css_import("//cdn.example.com/x")
    assert not is_plain_css_import("theme")
    assert not is_plain_css_import("_theme.scss")


SASS_FEATURES = {
    "default_flag": "$c: red !default;\n.x { color: $c; }\n",
    "map": "$sizes: (small: 1px, large: 2px);\n",
    "each_over_map": "$m: (a: 1px);\n@each $k, $v in $m { .#{$k} { width: $v; } }\n",
    "for_through": "@for $i from 1 through 3 { .m-#{$i} { margin: $i * 1px; } }\n",
    "placeholder": "%base { color: red; }\n.x { @extend %base; }\n",
    "nested_properties": ".x { font: { family: serif; size: 2px; } }\n",
}


@pytest.mark.parametrize("snippet", SASS_FEATURES.values(), ids=list(SASS_FEATURES))
def test_sass_features_are_not_syntax_errors(parser, write_file, snippet):
    a = write_file("a.scss", snippet + '@import "b";\n')
    b = write_file("b.scss", snippet)

    [node] = parser.parse_file(a).imports

    assert node.path == "b.scss"
    assert node.subtree.path == b
    assert node.subtree.imports == []


def test_imports_around_unparsed_code(parser, write_file):
    a = write_file("a.scss", '@import "b";\n'
                             '$c: red !default;\n'
                             '// @import "commented";\n'
                             '@import "c", "print.css";\n'
                             '.x { @import "nested"; }\n')
    write_file("b.scss")
    write_file("c.scss")
    write_file("commented.scss")
    write_file("nested.scss")

    sheet = parser.parse_file(a)

    assert [(node.path, node.line) for node in sheet.imports] == [("b.scss", 1), ("c.scss", 4)]


def test_scan_imports():
    text = ('@import "a";\n'
            '/* @import "x"; */\n'
            '@import url("http://example.com/x.css"), \'b\';\n'
            '.x { background: url(//cdn.example.com/y.png); @import "y"; }\n'
            '@import "c"')

    assert scan_imports(text) == [(1, ["a"]), (3, ["b"]), (5, ["c"])]


@pytest.mark.parametrize("text, line", [
    (".a {\n  color: red;\n", 1),
    ("\n/* open comment\n", 2),
    ('@import "b;\n', 1),
])
def test_scan_rejects_malformed_text(text, line):
    with pytest.raises(ParseError) as exc_info:
        scan_imports(text, "x.scss")

    assert exc_info.value.line == line
    assert exc_info.value.path == "x.scss"
