from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import yaml

from convo.narrative.errors import (
    LoadError, MultipleDocumentsError, SchemaError, TreeValidationError,
)
from convo.narrative.types import Link, Node, Tree
from convo.settings import ValidationCfg

logger = logging.getLogger(__name__)

# Keys that mark a link entry as the expanded {name, dialogue, target} form
_EXPANDED_KEYS = {"name", "target"}


def _text(raw: Any, where: str) -> str:
    """
    Accepts None, a string, or a list of lines (joined into one block).
    Other scalars are stringified; mappings and nested sequences are refused.
    """
    if raw is None:
        return ""
    if isinstance(raw, list):
        if any(isinstance(s, (dict, list)) for s in raw):
            raise SchemaError(f"{where} must be text or a list of lines")
        return "\n".join(str(s) for s in raw)
    if isinstance(raw, dict):
        raise SchemaError(f"{where} must be text or a list of lines")
    return raw if isinstance(raw, str) else str(raw)


def _parse_links(node_id: str, raw: Any) -> List[Link]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise SchemaError(f"node '{node_id}': 'links' must be a sequence")

    links: List[Link] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise SchemaError(f"node '{node_id}': link #{idx} must be a mapping")
        if _EXPANDED_KEYS <= set(entry):
            # - {name: leave, dialogue: "Bye.", target: end}
            links.append(Link(
                name=str(entry["name"]),
                dialogue=_text(entry.get("dialogue"), f"node '{node_id}': link #{idx} 'dialogue'"),
                target=str(entry["target"]),
            ))
            continue
        # - end: "Bye."     (name and target are the same key)
        for key, dialogue in entry.items():
            links.append(Link(name=str(key), dialogue=_text(dialogue, f"node '{node_id}': link '{key}'")))
    return links


def tree_from_dict(data: Optional[Dict[str, Any]]) -> Tree:
    """
    Convert a parsed document:
        root: <str>
        nodes: { <id>: {dialogue: <str or list>, links: [...] } }
    into a Tree. Only the shape is checked here; see `load_tree` for rules.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaError("Top level of a dialogue tree must be a mapping")

    tree = Tree()
    root = data.get("root")
    if isinstance(root, (dict, list)):
        raise SchemaError("'root' must be a single node id")
    if root is not None:
        tree.set_root(str(root))

    raw_nodes = data.get("nodes") or {}
    if not isinstance(raw_nodes, dict):
        raise SchemaError("'nodes' must be a mapping of node id to node")

    # YAML preserves order
    for key, body in raw_nodes.items():
        node_id = str(key)
        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise SchemaError(f"node '{node_id}' must be a mapping")
        node = Node(dialogue=_text(body.get("dialogue"), f"node '{node_id}': 'dialogue'"))
        for link in _parse_links(node_id, body.get("links")):
            if link.name in node.links:
                logger.debug("node '%s': duplicate link '%s', keeping the last", node_id, link.name)
            node.links[link.name] = link
        tree.add_node(node_id, node)

    return tree


def load_tree(source: str, validation: Optional[ValidationCfg] = None) -> Tree:
    """
    Parse YAML text into a validated Tree.

    Raises LoadError for text that is not YAML, SchemaError / MultipleDocumentsError
    for YAML that is not a single dialogue tree, and TreeValidationError when
    the tree breaks a structural rule.
    """
    try:
        docs = list(yaml.safe_load_all(source))
    except yaml.YAMLError as e:
        raise LoadError(f"Invalid YAML: {e}") from e
    if len(docs) > 1:
        raise MultipleDocumentsError(len(docs))

    tree = tree_from_dict(docs[0] if docs else None)
    errors = tree.check(validation)
    if errors:
        logger.warning("Refusing to import tree: %d validation error(s)", len(errors))
        raise TreeValidationError(errors)

    logger.debug("Imported tree: root '%s', %d node(s)", tree.root, len(tree))
    return tree


def load_tree_file(path: str, validation: Optional[ValidationCfg] = None) -> Tree:
    """ Load a single `*.convo.yml` file. OSError from opening the file propagates. """
    with open(path, "r", encoding="utf-8") as f:
        try:
            source = f.read()
        except UnicodeDecodeError as e:
            raise LoadError(f"{path}: not valid UTF-8: {e}") from e
    return load_tree(source, validation)
