from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, List, ItemsView

from convo.narrative.errors import NodeNotFound, TreeError, TreeValidationError
from convo.narrative.validator import validate_tree
from convo.settings import ValidationCfg

logger = logging.getLogger(__name__)


@dataclass
class Link:
    name: str                       # Unique among the owning node's links
    dialogue: str = ""              # Text shown for this choice
    target: Optional[str] = None    # Node id; defaults to `name`

    def __post_init__(self) -> None:
        if self.target is None:
            self.target = self.name

    def retarget(self, target: str) -> None:
        self.target = target


@dataclass
class Node:
    dialogue: str = ""
    links: Dict[str, Link] = field(default_factory=dict)   # name -> Link, insertion ordered

    def add_link(self, name: str, dialogue: str = "", target: Optional[str] = None) -> Link:
        """
        Add an outgoing choice. An existing link with the same name is replaced
        (last write wins) and keeps its original position in the ordering.
        """
        if name in self.links:
            logger.debug("Overwriting link '%s'", name)
        link = Link(name=name, dialogue=dialogue, target=target)
        self.links[name] = link
        return link

    def remove_link(self, name: str) -> None:
        self.links.pop(name, None)

    def get_link(self, name: str) -> Optional[Link]:
        return self.links.get(name)

    def link_items(self) -> ItemsView[str, Link]:
        """ Live (name, Link) view in insertion order; iterate it as often as needed. """
        return self.links.items()

    def set_dialogue(self, text: str) -> None:
        self.dialogue = text

    def is_terminal(self) -> bool:
        return not self.links

    def __len__(self) -> int:
        return len(self.links)

    def __bool__(self) -> bool:
        # A terminal node is still a node
        return True


@dataclass
class Tree:
    """
    The whole conversation graph. Nodes are addressed by string id and links
    refer to their targets by id, so nodes can come and go freely; nothing is
    checked until `validate()` runs.
    """
    nodes: Dict[str, Node] = field(default_factory=dict)   # id -> Node, insertion ordered
    root: Optional[str] = None                              # Entry node id

    # ----- root -------------------------------------------------------------
    def set_root(self, node_id: Optional[str]) -> None:
        self.root = node_id

    def root_node(self) -> Optional[Node]:
        if self.root is None:
            return None
        return self.nodes.get(self.root)

    # ----- nodes ------------------------------------------------------------
    def add_node(self, node_id: str, node: Optional[Node] = None) -> Node:
        if node is None:
            node = Node()
        if node_id in self.nodes:
            logger.debug("Overwriting node '%s'", node_id)
        self.nodes[node_id] = node
        return node

    def remove_node(self, node_id: str) -> Optional[Node]:
        # Links elsewhere that point here are left dangling on purpose.
        return self.nodes.pop(node_id, None)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def node_items(self) -> ItemsView[str, Node]:
        return self.nodes.items()

    def link(self, from_id: str, to_id: str, dialogue: str = "", name: Optional[str] = None) -> Link:
        """ Add a link on an existing node. `to_id` may name a node not added yet. """
        node = self.nodes.get(from_id)
        if node is None:
            raise NodeNotFound(from_id)
        return node.add_link(name if name is not None else to_id, dialogue, to_id)

    def clear(self) -> None:
        self.nodes.clear()
        self.root = None

    # ----- validation -------------------------------------------------------
    def check(self, validation: Optional[ValidationCfg] = None) -> List[TreeError]:
        return validate_tree(self, validation)

    def validate(self, validation: Optional[ValidationCfg] = None) -> None:
        errors = self.check(validation)
        if errors:
            raise TreeValidationError(errors)

    def is_valid(self, validation: Optional[ValidationCfg] = None) -> bool:
        return not self.check(validation)

    def __len__(self) -> int:
        return len(self.nodes)

    def __bool__(self) -> bool:
        return True

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes
