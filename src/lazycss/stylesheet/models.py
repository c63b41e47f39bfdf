"""
Data models for parsed stylesheets and compilation results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class Decision(Enum):
    """Outcome of a staleness check."""
    UP_TO_DATE = "up-to-date"
    STALE = "stale"


@dataclass(frozen=True)
class RuleNode:
    """Any top-level statement which does not lead to another parsed stylesheet."""
    has_import: ClassVar[bool] = False

    kind: str
    line: int = 0
    text: str = ""


@dataclass(frozen=True)
class ImportNode:
    """A resolved ``@import`` with the parsed stylesheet it points to."""
    has_import: ClassVar[bool] = True

    path: str
    subtree: "Stylesheet"
    line: int = 0


Node = Union[RuleNode, ImportNode]


@dataclass(frozen=True)
class Stylesheet:
    """Parsed stylesheet: the source path and its top-level nodes in order."""
    path: str
    nodes: tuple[Node, ...] = field(default_factory=tuple)

    @property
    def imports(self) -> list[ImportNode]:
        """Resolved imports of this stylesheet (not recursive)."""
        return [node for node in self.nodes if node.has_import]


@dataclass
class CompileResult:
    """Result of a compile request for one source/output pair."""
    source_path: str
    output_path: str
    decision: Decision
    compiled: bool = False

    @property
    def is_up_to_date(self) -> bool:
        """Check if the existing output was served as is."""
        return not self.compiled
