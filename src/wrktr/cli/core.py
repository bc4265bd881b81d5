"""Shared helpers for worktree-scoped commands."""

from __future__ import annotations

from wrktr_shared.output.output import user_output

from wrktr.cli.ensure import UserFacingCliError
from wrktr.core.context import WrktrContext
from wrktr.core.manifest import Manifest, ManifestError, load_manifest
from wrktr.core.project_discovery import (
    ProjectContext,
    ProjectDiscoveryError,
    resolve_project_context,
)


def discover_project(ctx: WrktrContext, worktree_name: str | None) -> ProjectContext:
    """Resolve the project context or exit with a user-facing error."""
    try:
        return resolve_project_context(ctx.cwd, worktree_name)
    except ProjectDiscoveryError as e:
        raise UserFacingCliError(str(e)) from e


def load_project_manifest(project: ProjectContext) -> Manifest:
    """Load wrktr.conf, printing warnings, or exit with a user-facing error."""
    try:
        result = load_manifest(project.config_path)
    except ManifestError as e:
        raise UserFacingCliError(str(e)) from e
    for warning in result.warnings:
        user_output(warning)
    return result.manifest
