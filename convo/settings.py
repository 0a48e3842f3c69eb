from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ValidationCfg:
    check_links: bool = False           # Reject links whose target is not a node
    check_reachability: bool = False    # Reject nodes the root can never reach
    fail_fast: bool = False             # Stop at the first failure instead of collecting all


@dataclass
class ExportCfg:
    indent: int = 2
    width: int = 80                     # Line width before PyYAML folds long dialogue
    allow_unicode: bool = True
    explicit_start: bool = True         # Lead with '---'


@dataclass
class LoggingCfg:
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ConvoCfg:
    validation: ValidationCfg = field(default_factory=ValidationCfg)
    export: ExportCfg = field(default_factory=ExportCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(path: str = "config/defaults.yaml") -> ConvoCfg:
    """
    Read settings from YAML. A missing file gives all defaults, and any key
    left out of the file falls back to its default individually.
    """
    data = {}
    p = Path(path)
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    return ConvoCfg(
        validation=ValidationCfg(
            check_links=bool(_get(data, "validation.check_links", False)),
            check_reachability=bool(_get(data, "validation.check_reachability", False)),
            fail_fast=bool(_get(data, "validation.fail_fast", False)),
        ),
        export=ExportCfg(
            indent=int(_get(data, "export.indent", 2)),
            width=int(_get(data, "export.width", 80)),
            allow_unicode=bool(_get(data, "export.allow_unicode", True)),
            explicit_start=bool(_get(data, "export.explicit_start", True)),
        ),
        logging=LoggingCfg(
            level=str(_get(data, "logging.level", "WARNING")).upper(),
            format=str(_get(data, "logging.format", LoggingCfg.format)),
        ),
    )


def configure_logging(cfg: LoggingCfg) -> None:
    """ For applications embedding convo; the library itself never calls this. """
    logging.basicConfig(
        level=getattr(logging, cfg.level, logging.WARNING),
        format=cfg.format,
    )
