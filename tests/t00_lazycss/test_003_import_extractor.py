import os

import pytest

from lazycss.core.imports import ImportGraphExtractor, find_imports
from lazycss.stylesheet.exceptions import ReadError, ParseError
from lazycss.stylesheet.models import Stylesheet, ImportNode, RuleNode


@pytest.fixture
def extractor():
    return ImportGraphExtractor()


def test_find_imports_walks_pre_order():
    # Hand-built tree, no parser involved
    d = Stylesheet("/src/lib/d.scss", (RuleNode("rule_set"),))
    b = Stylesheet("/src/lib/b.scss", (ImportNode("d.scss", d),))
    c = Stylesheet("/src/c.scss")
    root = Stylesheet("/src/a.scss", (
        RuleNode("comment"),
        ImportNode("lib/b.scss", b),
        RuleNode("rule_set"),
        ImportNode("c.scss", c),
    ))

    assert find_imports(root, "/src") == [
        os.path.normpath("/src/lib/b.scss"),
        os.path.normpath("/src/lib/d.scss"),
        os.path.normpath("/src/c.scss"),
    ]


def test_find_imports_keeps_absolute_paths():
    other = Stylesheet("/shared/x.scss")
    root = Stylesheet("/src/a.scss", (ImportNode("/shared/x.scss", other),))

    assert find_imports(root, "/src") == [os.path.normpath("/shared/x.scss")]


def test_no_imports(extractor, write_file):
    a = write_file("a.scss", ".a { color: red; }\n")
    assert extractor.extract(a) == []


def test_transitive_dependencies_in_order(extractor, write_file):
    a = write_file("a.scss", '@import "b";\n@import "c";\n')
    b = write_file("b.scss", '@import "lib/d";\n')
    d = write_file("lib/_d.scss", ".d { color: red; }\n")
    c = write_file("c.scss", ".c { color: red; }\n")

    assert extractor.extract(a) == [b, d, c]


def test_shared_dependency_listed_once(extractor, write_file):
    a = write_file("a.scss", '@import "b";\n@import "c";\n')
    b = write_file("b.scss", ".b { color: red; }\n")
    c = write_file("c.scss", '@import "b";\n')

    assert extractor.extract(a) == [b, c]


def test_absolute_import(extractor, write_file):
    shared = write_file("shared/vars.scss", ".v { color: red; }\n")
    a = write_file("site/a.scss", f'@import "{shared}";\n')

    assert extractor.extract(a) == [shared]


def test_unresolved_import_is_omitted(extractor, write_file):
    # Known limitation: only imports the parser could resolve are reported
    a = write_file("a.scss", '@import "not-there";\n@import "b";\n')
    b = write_file("b.scss", ".b { color: red; }\n")

    assert extractor.extract(a) == [b]


def test_read_error(extractor, tmp_path):
    with pytest.raises(ReadError):
        extractor.extract(str(tmp_path / "missing.scss"))


def test_parse_error(extractor, write_file):
    a = write_file("a.scss", "}\n")
    with pytest.raises(ParseError):
        extractor.extract(a)
