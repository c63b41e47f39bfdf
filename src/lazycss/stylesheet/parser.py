"""
SCSS parser producing the ``Stylesheet`` tree walked by the import extractor.

The syntax tree comes from tree-sitter. Top-level ``@import`` targets are
resolved against the importing file's directory the way Sass looks them up
(plain name, ``.scss`` suffix, ``_`` partial, ``_index``/``index`` in a
directory) and parsed recursively. Targets which do not resolve to a file are
kept as plain rule nodes, so they never show up as dependencies.

The tree-sitter grammar does not cover all of SCSS (``!default`` flags, maps,
``@each``/``@for``, placeholders, nested properties). Parts it can't parse
are not errors: the imports of such a file are found by ``scan_imports``,
which only understands strings, comments and blocks. A stylesheet is
malformed when that scan fails.
"""

import os
import re
from typing import Any

from tree_sitter_language_pack import get_parser

from .exceptions import ReadError, ParseError
from .models import Stylesheet, RuleNode, ImportNode, Node

__all__ = ['StylesheetParser', 'is_plain_css_import', 'scan_imports']

PLAIN_CSS_PREFIXES = ('http://', 'https://', '//')

_TOKENS = re.compile(r"""
    (?P<url>url\(\s*(?:"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'|(?:[^()"'\\\s]|\\.)*)\s*\))
  | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
  | (?P<comment>/\*.*?\*/|//[^\n]*)
  | (?P<unterminated>/\*|["'])
  | (?P<import>@import(?![\w-]))
  | (?P<open>\{)
  | (?P<close>\})
  | (?P<end>;)
""", re.S | re.X)


def is_plain_css_import(target: str) -> bool:
    """
    Check if an import target is left to the browser instead of being inlined

    :param target: The unquoted import target
    :return: True for remote URLs and ``.css`` files
    """
    return target.startswith(PLAIN_CSS_PREFIXES) or target.endswith('.css')


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        return text[1:-1]
    return text


def scan_imports(text: str, path: str = '<string>') -> list[tuple[int, list[str]]]:
    """
    Find the top-level ``@import`` statements of SCSS text without a grammar

    :param text: The SCSS source
    :param path: Path the text was read from, used in errors
    :return: ``(line, targets)`` of every top-level import, ``url(...)`` targets excluded
    :raises ParseError: On an unterminated string or comment, or unbalanced braces
    """
    statements: list[tuple[int, list[str]]] = []
    current: tuple[int, list[str]] | None = None
    open_lines: list[int] = []
    line, pos = 1, 0

    for match in _TOKENS.finditer(text):
        line += text.count('\n', pos, match.start())
        pos = match.start()
        kind = match.lastgroup

        if kind == 'unterminated':
            what = 'comment' if match.group() == '/*' else 'string'
            raise ParseError(f"Unterminated {what} in {path} at line {line}", line=line, path=path)
        if kind == 'string':
            if current is not None:
                current[1].append(_unquote(match.group()))
        elif kind == 'import':
            if not open_lines:
                current = (line, [])
        elif kind in ('end', 'open', 'close'):
            if current is not None:
                statements.append(current)
                current = None
            if kind == 'open':
                open_lines.append(line)
            elif kind == 'close':
                if not open_lines:
                    raise ParseError(f"Unexpected '}}' in {path} at line {line}", line=line, path=path)
                open_lines.pop()

    if current is not None:
        statements.append(current)
    if open_lines:
        line = open_lines[-1]
        raise ParseError(f"Unclosed block in {path} at line {line}", line=line, path=path)
    return statements


def _import_targets(node: Any) -> list[str]:
    """Quoted targets of an import statement, ``url(...)`` arguments excluded."""
    targets = []
    for child in node.children:
        if child.type == 'string_value':
            targets.append(_unquote(child.text.decode('utf-8')))
        elif child.type != 'call_expression':
            targets.extend(_import_targets(child))
    return targets


class StylesheetParser:
    """
    Parse SCSS sources into ``Stylesheet`` trees

    A parser instance wraps one tree-sitter parser, so it must not be shared
    between threads.
    """

    def __init__(self, source_ext: str = '.scss', encoding: str = 'utf-8'):
        self.source_ext = source_ext
        self.encoding = encoding
        self._parser = get_parser('scss')

    def parse_file(self, path: str, _chain: tuple[str, ...] = ()) -> Stylesheet:
        """
        Read and parse a stylesheet with its resolved imports

        :param path: Path of the stylesheet
        :return: The parsed stylesheet
        :raises ReadError: If the file can't be read
        :raises ParseError: If the file, or a resolved import of it, is malformed
        """
        path = os.path.normpath(os.path.abspath(path))
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Error reading stylesheet {path}: {e}", path=path, cause=e)

        return self.parse(text, os.path.dirname(path), path, _chain)

    def parse(self, text: str, base_dir: str, path: str = '<string>',
              _chain: tuple[str, ...] = ()) -> Stylesheet:
        """
        Parse stylesheet text

        :param text: The SCSS source
        :param base_dir: Directory relative imports are resolved against
        :param path: Path the text was read from, used for cycle detection and errors
        :return: The parsed stylesheet
        :raises ParseError: On unterminated strings or comments and unbalanced braces
        """
        statements = scan_imports(text, path)
        root = self._parser.parse(text.encode(self.encoding)).root_node
        chain = _chain + (path,)

        if not root.has_error:
            nodes: list[Node] = []
            for child in root.named_children:
                line = child.start_point[0] + 1
                if child.type == 'import_statement':
                    nodes.extend(self._import_nodes(_import_targets(child), line, base_dir, chain))
                else:
                    nodes.append(RuleNode(kind=child.type, line=line))
            return Stylesheet(path=path, nodes=tuple(nodes))

        # Imports come from the scan when the grammar gave up on part of the file
        entries: list[tuple[int, Node]] = []
        for child in root.named_children:
            if child.type != 'import_statement':
                kind = 'unparsed' if child.is_error else child.type
                entries.append((child.start_point[0] + 1, RuleNode(kind=kind, line=child.start_point[0] + 1)))
        for line, targets in statements:
            entries.extend((line, node) for node in self._import_nodes(targets, line, base_dir, chain))
        entries.sort(key=lambda entry: entry[0])
        return Stylesheet(path=path, nodes=tuple(node for _, node in entries))

    def _import_nodes(self, targets: list[str], line: int, base_dir: str,
                      chain: tuple[str, ...]) -> list[Node]:
        if not targets:
            return [RuleNode(kind='import', line=line)]

        nodes: list[Node] = []
        for target in targets:
            found = self.resolve_import(target, base_dir)
            if found is None or found in chain:
                nodes.append(RuleNode(kind='import', line=line, text=target))
                continue
            subtree = self.parse_file(found, chain)
            rel = found if os.path.isabs(target) else os.path.relpath(found, base_dir)
            nodes.append(ImportNode(path=rel, subtree=subtree, line=line))
        return nodes

    def resolve_import(self, target: str, base_dir: str) -> str | None:
        """
        Find the file an import target refers to

        :param target: The unquoted import target
        :param base_dir: Directory of the importing stylesheet
        :return: Normalized absolute path of the file, or None if it can't be resolved
        """
        if not target or is_plain_css_import(target):
            return None

        base = target if os.path.isabs(target) else os.path.join(base_dir, target)
        head, name = os.path.split(base)
        ext = self.source_ext
        if name.endswith(ext):
            candidates = [base, os.path.join(head, '_' + name)]
        else:
            candidates = [
                base + ext,
                os.path.join(head, '_' + name + ext),
                os.path.join(base, '_index' + ext),
                os.path.join(base, 'index' + ext),
            ]

        for candidate in candidates:
            if os.path.isfile(candidate):
                return os.path.normpath(os.path.abspath(candidate))
        return None
