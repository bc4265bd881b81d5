"""Render status and reconcile reports for the terminal."""

from __future__ import annotations

import click

from wrktr_shared.output.output import user_output

from wrktr.core.link_types import AssetCheck, LinkStatus
from wrktr.core.reconcile import AssetAction, ReconcileReport
from wrktr.core.status_report import StatusReport

_STATUS_LABELS: dict[LinkStatus, str] = {
    LinkStatus.MISSING: "missing",
    LinkStatus.HARDLINKED: "hardlinked",
    LinkStatus.NOT_HARDLINKED: "not hardlinked",
    LinkStatus.SOFTLINKED: "softlinked",
    LinkStatus.NOT_SOFTLINKED: "not softlinked",
    LinkStatus.COPY_MATCHES: "copy matches",
    LinkStatus.COPY_MISMATCH: "copy mismatch",
}

_ACTION_LABELS: dict[AssetAction, str] = {
    AssetAction.CREATED: "created",
    AssetAction.SKIPPED_EXISTING: "already present, left untouched",
    AssetAction.COPIED: "copied",
    AssetAction.REMOVED: "removed",
    AssetAction.RESTORED: "restored with git",
    AssetAction.ALREADY_ABSENT: "already absent",
    AssetAction.FAILED: "failed",
}


def format_check_lines(check: AssetCheck, worktree_path: str) -> list[str]:
    """Lines for one asset: presence first, then the link status."""
    if check.status is LinkStatus.MISSING:
        return [click.style("✘ MISSING: ", fg="red") + worktree_path]
    icon = "✅" if check.status.is_ok else "❌"
    detail = f"  {icon} {_STATUS_LABELS[check.status]}: {worktree_path}"
    if check.error is not None:
        detail += click.style(f" ({check.error})", dim=True)
    return [click.style("✓ FOUND: ", fg="green") + worktree_path, detail]


def render_status_report(report: StatusReport, *, summary: bool = True) -> None:
    if not report.checks:
        user_output(click.style("No assets declared in wrktr.conf", dim=True))
        return
    for check in report.checks:
        for line in format_check_lines(check, str(report.worktree_dir / check.asset.path)):
            user_output(line)
    if not summary:
        return
    user_output()
    if report.is_healthy:
        user_output(click.style("All shared resources are linked.", fg="green"))
    else:
        problems = sum(1 for check in report.checks if not check.status.is_ok)
        noun = "asset needs" if problems == 1 else "assets need"
        user_output(click.style(f"{problems} {noun} attention.", fg="yellow"))


def render_reconcile_failures(report: ReconcileReport) -> None:
    """Show per-asset failures from a link or cleanup run."""
    for outcome in report.failures:
        user_output(
            click.style("❗ ", fg="yellow")
            + f"{outcome.asset.kind.value} {outcome.asset.path}: {outcome.error}"
        )
    if report.failures:
        user_output()


def render_reconcile_actions(report: ReconcileReport) -> None:
    for outcome in report.outcomes:
        if outcome.action is AssetAction.FAILED:
            continue
        user_output(
            click.style(f"  {outcome.asset.path}", fg="cyan")
            + f" {_ACTION_LABELS[outcome.action]}"
        )
