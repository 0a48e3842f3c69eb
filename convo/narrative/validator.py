"""
Structural rules for dialogue trees.

Rules are checked in a fixed order:
  1. root is set               -> MissingRoot
  2. nodes is non-empty        -> EmptyTree
  3. root indexes a node       -> RootNotFound
  4. every node has dialogue   -> MissingDialogue
  5. link targets exist        -> DanglingLink      (only with check_links)
  6. nodes reachable from root -> UnreachableNode   (only with check_reachability)

By default every failure is collected; `fail_fast` returns after the first.
"""
from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING, Iterator, List, Optional, Set

from convo.narrative.errors import (
    DanglingLink, EmptyTree, MissingDialogue, MissingRoot,
    RootNotFound, TreeError, UnreachableNode,
)
from convo.settings import ValidationCfg

if TYPE_CHECKING:
    from convo.narrative.types import Tree


def validate_tree(tree: "Tree", validation: Optional[ValidationCfg] = None) -> List[TreeError]:
    """ Return every rule failure for `tree` (empty list when it is valid). Never mutates. """
    cfg = validation or ValidationCfg()
    errors: List[TreeError] = []
    for err in _iter_errors(tree, cfg):
        errors.append(err)
        if cfg.fail_fast:
            break
    return errors


def _iter_errors(tree: "Tree", cfg: ValidationCfg) -> Iterator[TreeError]:
    root = tree.root
    if not root:
        yield MissingRoot()
    if not tree.nodes:
        yield EmptyTree()
    elif root and root not in tree.nodes:
        yield RootNotFound(root)

    for node_id, node in tree.nodes.items():
        if not node.dialogue:
            yield MissingDialogue(node_id)

    if cfg.check_links:
        for node_id, node in tree.nodes.items():
            for name, link in node.links.items():
                if link.target not in tree.nodes:
                    yield DanglingLink(node_id, name, link.target)

    # Needs a root that exists
    if cfg.check_reachability and root and root in tree.nodes:
        seen = reachable_from(tree, root)
        for node_id in tree.nodes:
            if node_id not in seen:
                yield UnreachableNode(node_id)


def reachable_from(tree: "Tree", start: str) -> Set[str]:
    """ Breadth-first set of node ids reachable from `start`. Dangling targets are skipped. """
    seen = {start}
    queue = deque([start])
    while queue:
        node = tree.nodes.get(queue.popleft())
        if node is None:
            continue
        for link in node.links.values():
            if link.target in tree.nodes and link.target not in seen:
                seen.add(link.target)
                queue.append(link.target)
    return seen
