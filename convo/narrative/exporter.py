from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import yaml

from convo.narrative.errors import ExportError, TreeValidationError
from convo.narrative.types import Link, Node, Tree
from convo.settings import ExportCfg, ValidationCfg

logger = logging.getLogger(__name__)


def _link_to_dict(link: Link) -> Dict[str, Any]:
    if link.target == link.name:
        return {link.name: link.dialogue}
    return {"name": link.name, "dialogue": link.dialogue, "target": link.target}


def _node_to_dict(node: Node) -> Dict[str, Any]:
    body: Dict[str, Any] = {"dialogue": node.dialogue}
    if node.links:
        links: List[Dict[str, Any]] = [_link_to_dict(link) for link in node.links.values()]
        body["links"] = links
    return body


def tree_to_dict(tree: Tree) -> Dict[str, Any]:
    """ Plain-data form of `tree`, in insertion order. Does not validate. """
    return {
        "root": tree.root,
        "nodes": {node_id: _node_to_dict(node) for node_id, node in tree.nodes.items()},
    }


def dump_tree(tree: Tree,
              validation: Optional[ValidationCfg] = None,
              export: Optional[ExportCfg] = None) -> str:
    """ Validate `tree` and render it as YAML text. An invalid tree is never rendered. """
    errors = tree.check(validation)
    if errors:
        logger.warning("Refusing to export tree: %d validation error(s)", len(errors))
        raise TreeValidationError(errors)

    cfg = export or ExportCfg()
    try:
        text = yaml.safe_dump(
            tree_to_dict(tree),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=cfg.allow_unicode,
            indent=cfg.indent,
            width=cfg.width,
            explicit_start=cfg.explicit_start,
        )
    except yaml.YAMLError as e:
        raise ExportError(f"Could not emit YAML: {e}") from e

    logger.debug("Exported tree: root '%s', %d node(s)", tree.root, len(tree))
    return text


def export_tree_file(tree: Tree, path: str,
                     validation: Optional[ValidationCfg] = None,
                     export: Optional[ExportCfg] = None) -> None:
    """ Write `tree` to `path` (preferred extension `.convo.yml`). """
    # Render first so a refused tree never truncates an existing file
    text = dump_tree(tree, validation, export)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
