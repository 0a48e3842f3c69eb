from __future__ import annotations
import logging
from typing import Iterator, Optional, Tuple

from convo.narrative.errors import LinkNotFound, NodeNotFound, TargetNotFound
from convo.narrative.types import Node, Tree

logger = logging.getLogger(__name__)


class Walker:
    """
    A cursor over a Tree. The walker only holds the id of the node it is on;
    every query re-reads the tree, so edits made between steps show up on the
    next call. Failed moves leave the cursor where it was.

    Several walkers can read the same tree at once as long as nobody edits it.
    """
    def __init__(self, tree: Tree, start: Optional[str] = None):
        self.tree = tree
        node_id = tree.root if start is None else start
        if node_id is None or node_id not in tree.nodes:
            raise NodeNotFound(node_id)
        self._current: str = node_id

    # ----- state ------------------------------------------------------------
    @property
    def current(self) -> str:
        return self._current

    @property
    def current_node(self) -> Node:
        node = self.tree.nodes.get(self._current)
        if node is None:
            # The tree was edited under us
            raise NodeNotFound(self._current)
        return node

    def current_dialogue(self) -> str:
        return self.current_node.dialogue

    def available_links(self) -> Iterator[Tuple[str, str, str]]:
        """ Yield (name, dialogue, target) for each choice on the current node, in order. """
        for name, link in self.current_node.links.items():
            yield name, link.dialogue, link.target

    def is_terminal(self) -> bool:
        return self.current_node.is_terminal()

    # ----- moves ------------------------------------------------------------
    def advance(self, link_name: str) -> str:
        """ Follow `link_name` from the current node and return the new node's dialogue. """
        link = self.current_node.links.get(link_name)
        if link is None:
            raise LinkNotFound(link_name, self._current)
        nxt = self.tree.nodes.get(link.target)
        if nxt is None:
            raise TargetNotFound(link.target, link_name)
        logger.debug("Walk '%s' -[%s]-> '%s'", self._current, link_name, link.target)
        self._current = link.target
        return nxt.dialogue

    def choose(self, index: int) -> str:
        """ Follow the choice at position `index` (0-based) of the current node. """
        names = list(self.current_node.links)
        if index < 0 or index >= len(names):
            raise LinkNotFound(str(index), self._current)
        return self.advance(names[index])

    def reset(self, node_id: Optional[str]) -> None:
        if node_id is None or node_id not in self.tree.nodes:
            raise NodeNotFound(node_id)
        self._current = node_id

    def rewind(self) -> None:
        self.reset(self.tree.root)
