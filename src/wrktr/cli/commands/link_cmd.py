import click

from wrktr_shared.output.output import user_output

from wrktr.cli.core import discover_project, load_project_manifest
from wrktr.cli.report_display import (
    render_reconcile_actions,
    render_reconcile_failures,
    render_status_report,
)
from wrktr.core.context import WrktrContext
from wrktr.core.reconcile import link_worktree


@click.command("link")
@click.argument("worktree", metavar="[WORKTREE]", required=False)
@click.option("-v", "--verbose", is_flag=True, help="List what was done for each asset.")
@click.pass_obj
def link_cmd(ctx: WrktrContext, worktree: str | None, verbose: bool) -> None:
    """Link shared resources into a worktree.

    From the project root pass the worktree directory; from inside a worktree
    the argument is ignored. Hardlinks and softlinks are only created where
    nothing exists yet. Copies are always refreshed from .SHARED/.
    """
    project = discover_project(ctx, worktree)
    manifest = load_project_manifest(project)

    report = link_worktree(project, manifest)

    dir_text = click.style(str(project.worktree_dir), fg="cyan")
    user_output(f"\n🔗 Shared local resources linked in 📁 {dir_text}\n")
    if verbose:
        render_reconcile_actions(report)
        user_output()
    render_reconcile_failures(report)
    render_status_report(report.status)
