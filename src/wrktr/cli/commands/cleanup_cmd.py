import click

from wrktr_shared.output.output import user_output

from wrktr.cli.core import discover_project, load_project_manifest
from wrktr.cli.report_display import (
    render_reconcile_actions,
    render_reconcile_failures,
    render_status_report,
)
from wrktr.core.context import WrktrContext
from wrktr.core.reconcile import cleanup_worktree


@click.command("cleanup")
@click.argument("worktree", metavar="[WORKTREE]", required=False)
@click.option("-v", "--verbose", is_flag=True, help="List what was done for each asset.")
@click.pass_obj
def cleanup_cmd(ctx: WrktrContext, worktree: str | None, verbose: bool) -> None:
    """Remove links to shared resources (before deleting a worktree).

    Unlinks hardlinks and softlinks without touching .SHARED/, and restores
    copied files to their committed content with git.
    """
    project = discover_project(ctx, worktree)
    manifest = load_project_manifest(project)

    report = cleanup_worktree(project, manifest, ctx.git)

    dir_text = click.style(str(project.worktree_dir), fg="cyan")
    user_output(f"\n✂️ Shared local resources unlinked in 📁 {dir_text}\n")
    if verbose:
        render_reconcile_actions(report)
        user_output()
    render_reconcile_failures(report)
    render_status_report(report.status, summary=False)
