import json

import click

from wrktr_shared.output.output import machine_output, user_output

from wrktr.cli.core import discover_project, load_project_manifest
from wrktr.cli.report_display import render_status_report
from wrktr.core.context import WrktrContext
from wrktr.core.status_report import check_worktree


@click.command("check")
@click.argument("worktree", metavar="[WORKTREE]", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output the report as JSON on stdout.")
@click.pass_obj
def check_cmd(ctx: WrktrContext, worktree: str | None, output_json: bool) -> None:
    """Verify that shared resources are correctly linked.

    Reports each configured asset without changing anything. Always exits 0
    once the project has been found, whatever the asset states are.
    """
    project = discover_project(ctx, worktree)
    manifest = load_project_manifest(project)

    report = check_worktree(project, manifest)

    if output_json:
        machine_output(json.dumps(report.to_dict(), indent=2))
        return

    dir_text = click.style(str(project.worktree_dir), fg="cyan")
    user_output(f"\n🔎 Checking for shared local resources in 📁 {dir_text}...\n")
    render_status_report(report)
