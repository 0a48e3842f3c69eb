from __future__ import annotations
from typing import List, Optional


class ConvoError(Exception):
    """Base class for every failure raised by convo."""


# --- Tree structure -----------------------------------------------------------

class TreeError(ConvoError):
    """A tree breaks one of the structural rules checked by the validator."""


class MissingRoot(TreeError):
    def __init__(self) -> None:
        super().__init__("Tree has no 'root' set")


class EmptyTree(TreeError):
    def __init__(self) -> None:
        super().__init__("Tree 'nodes' must contain at least one node")


class RootNotFound(TreeError):
    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(f"Root '{root}' does not index a node in 'nodes'")


class MissingDialogue(TreeError):
    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' is missing 'dialogue'")


class DanglingLink(TreeError):
    def __init__(self, node_id: str, link_name: str, target: str) -> None:
        self.node_id = node_id
        self.link_name = link_name
        self.target = target
        super().__init__(
            f"Link '{link_name}' on node '{node_id}' targets unknown node '{target}'"
        )


class UnreachableNode(TreeError):
    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' is not reachable from the root")


class TreeValidationError(TreeError):
    """
    Raised when a tree is refused. `errors` holds every rule failure found,
    in the order the rules were checked.
    """
    def __init__(self, errors: List[TreeError]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"Tree failed validation ({len(self.errors)} error(s)):\n{lines}")

    @property
    def first(self) -> Optional[TreeError]:
        return self.errors[0] if self.errors else None


# --- Traversal ----------------------------------------------------------------

class WalkError(ConvoError):
    """A walker could not move. Its position is left untouched."""


class NodeNotFound(WalkError):
    def __init__(self, node_id: Optional[str]) -> None:
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' does not exist")


class LinkNotFound(WalkError):
    def __init__(self, link_name: str, node_id: Optional[str] = None) -> None:
        self.link_name = link_name
        self.node_id = node_id
        where = f" on node '{node_id}'" if node_id is not None else ""
        super().__init__(f"Link '{link_name}' does not exist{where}")


class TargetNotFound(WalkError):
    def __init__(self, target: str, link_name: Optional[str] = None) -> None:
        self.target = target
        self.link_name = link_name
        via = f" (via link '{link_name}')" if link_name is not None else ""
        super().__init__(f"Link target '{target}' does not exist{via}")


# --- Import / export ----------------------------------------------------------

class LoadError(ConvoError):
    """The source text could not be turned into a tree."""


class SchemaError(LoadError):
    """The YAML parsed, but its shape is not a dialogue tree."""


class MultipleDocumentsError(LoadError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Expected a single YAML document, found {count}")


class ExportError(ConvoError):
    """The tree could not be emitted as YAML."""
