"""
Project inspection: layout detection and pipeline preconditions.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import MANIFEST_FILE, TSCONFIG_FILE
from .errors import ConfigurationError
from .utils import logger, get_project_root, read_json


class ProjectLayout(Enum):
    """How the documented sources are organised."""
    SINGLE = "single"
    MONOREPO = "monorepo"


@dataclass(frozen=True)
class Preconditions:
    """Facts about the project, captured once before the pipeline starts.

    Every step receives the same instance, so steps never observe a
    different view of the project than the one the run started with.
    """
    root: Path
    layout: ProjectLayout
    has_tsconfig: bool
    manifest: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def exports_map(self) -> Optional[Any]:
        return self.manifest.get('exports')


def detect_layout(manifest: Dict[str, Any]) -> ProjectLayout:
    """A manifest declaring workspaces is the parent of a monorepo."""
    if manifest.get('workspaces'):
        return ProjectLayout.MONOREPO
    return ProjectLayout.SINGLE


def load_manifest(root: Path) -> Dict[str, Any]:
    """Read the package manifest at ``root``.

    A missing manifest yields an empty mapping; the resolver decides
    whether that is fatal for the current layout.
    """
    manifest_path = root / MANIFEST_FILE
    if not manifest_path.exists():
        logger.debug(f"No {MANIFEST_FILE} found in {root}")
        return {}

    try:
        manifest = read_json(manifest_path)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Cannot parse {manifest_path}: {e}") from e

    if not isinstance(manifest, dict):
        raise ConfigurationError(f"{manifest_path} must contain a JSON object")
    return manifest


def inspect_project(start: Optional[Union[str, Path]] = None) -> Preconditions:
    """Compute the preconditions for a documentation run."""
    root = get_project_root(start)
    manifest = load_manifest(root)
    preconditions = Preconditions(
        root=root,
        layout=detect_layout(manifest),
        has_tsconfig=(root / TSCONFIG_FILE).exists(),
        manifest=manifest,
    )
    logger.debug(
        f"Project {root}: layout={preconditions.layout.value}, "
        f"tsconfig={preconditions.has_tsconfig}"
    )
    return preconditions
