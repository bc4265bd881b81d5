"""Aggregate per-asset inspections into one report for a worktree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wrktr.core.inspector import inspect_asset
from wrktr.core.link_types import AssetCheck
from wrktr.core.manifest import AssetKind, Manifest
from wrktr.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusReport:
    """Ordered inspection results for every declared asset.

    Checks are grouped by kind (hardlink, softlink, copy) and keep the
    manifest's declaration order within each group.
    """

    worktree_dir: Path
    checks: tuple[AssetCheck, ...]

    @property
    def is_healthy(self) -> bool:
        return all(check.status.is_ok for check in self.checks)

    def for_kind(self, kind: AssetKind) -> tuple[AssetCheck, ...]:
        return tuple(check for check in self.checks if check.asset.kind is kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "worktree": str(self.worktree_dir),
            "healthy": self.is_healthy,
            "assets": [
                {
                    "path": check.asset.path,
                    "kind": check.asset.kind.value,
                    "status": check.status.value,
                    "error": check.error,
                }
                for check in self.checks
            ],
        }


def check_worktree(project: ProjectContext, manifest: Manifest) -> StatusReport:
    """Inspect every asset in the manifest without modifying anything."""
    checks: list[AssetCheck] = []
    for asset in manifest.assets:
        check = inspect_asset(project, asset)
        logger.debug("%s %s: %s", asset.kind.value, asset.path, check.status.value)
        checks.append(check)
    return StatusReport(worktree_dir=project.worktree_dir, checks=tuple(checks))
