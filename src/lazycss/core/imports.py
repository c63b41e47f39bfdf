"""
Import graph extraction: the transitive list of files a stylesheet imports.
"""

import os

from ..stylesheet.models import Stylesheet, ImportNode, RuleNode, Node
from ..stylesheet.parser import StylesheetParser
from ..utils.log_utils import log_event

__all__ = ['ImportGraphExtractor', 'ImportCollector', 'find_imports']


class ImportCollector:
    """
    Depth-first, pre-order visitor collecting resolved import paths

    Only ``ImportNode`` contributes to the result. Anything else (including
    imports the parser could not resolve) is skipped.
    """

    def __init__(self):
        self.files: list[str] = []
        self._seen: set[str] = set()

    def visit(self, node: Node | Stylesheet, base_dir: str) -> None:
        if isinstance(node, Stylesheet):
            for child in node.nodes:
                self.visit(child, base_dir)
        elif node.has_import:
            self.visit_import(node, base_dir)
        else:
            self.visit_rule(node, base_dir)

    def visit_import(self, node: ImportNode, base_dir: str) -> None:
        path = node.path if os.path.isabs(node.path) else os.path.join(base_dir, node.path)
        path = os.path.normpath(path)
        if path not in self._seen:
            self._seen.add(path)
            self.files.append(path)
        self.visit(node.subtree, os.path.dirname(path))

    def visit_rule(self, node: RuleNode, base_dir: str) -> None:
        pass


def find_imports(stylesheet: Stylesheet, base_dir: str) -> list[str]:
    """
    Flatten the import tree of a parsed stylesheet

    :param stylesheet: The parsed stylesheet
    :param base_dir: Directory relative import paths are joined to
    :return: Imported file paths, each dependency before its own dependencies
    """
    collector = ImportCollector()
    collector.visit(stylesheet, base_dir)
    return collector.files


class ImportGraphExtractor:
    """
    Parse a stylesheet and list every file it imports, directly or transitively
    """

    def __init__(self, source_ext: str = '.scss', encoding: str = 'utf-8'):
        self.source_ext = source_ext
        self.encoding = encoding

    def parse(self, source_path: str) -> Stylesheet:
        """
        Parse a stylesheet together with its resolved imports

        :raises ReadError: If the file can't be read
        :raises ParseError: On malformed syntax
        """
        log_event("reading", source_path)
        # A new parser per call, tree-sitter parsers are not thread-safe
        parser = StylesheetParser(source_ext=self.source_ext, encoding=self.encoding)
        return parser.parse_file(source_path)

    def extract(self, source_path: str) -> list[str]:
        """
        Get the transitive dependencies of a stylesheet

        :param source_path: Path of the stylesheet
        :return: Normalized paths of imported files in depth-first, pre-order
        :raises ReadError: If the file can't be read
        :raises ParseError: On malformed syntax
        """
        source_path = os.path.normpath(os.path.abspath(source_path))
        stylesheet = self.parse(source_path)
        return find_imports(stylesheet, os.path.dirname(source_path))
