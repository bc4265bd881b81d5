from pathlib import Path

import click

from wrktr_shared.output.output import user_output

from wrktr.cli.ensure import UserFacingCliError
from wrktr.core.context import WrktrContext
from wrktr.core.init_project import ProjectInitError, initialize_project


def _emit_step(message: str) -> None:
    user_output(f"** {message}")


@click.command("init")
@click.argument("repo_url", metavar="REPO_URL")
@click.argument("project_dir", metavar="PROJECT_DIR", type=click.Path(path_type=Path))
@click.pass_obj
def init_cmd(ctx: WrktrContext, repo_url: str, project_dir: Path) -> None:
    """Initialize a new worktree-enabled project.

    Clones REPO_URL as a bare repository into PROJECT_DIR/.bare, creates
    PROJECT_DIR/.SHARED for centralized resources, adds a `main` worktree and
    writes an initial wrktr.conf.
    """
    if not project_dir.is_absolute():
        project_dir = ctx.cwd / project_dir

    try:
        main_worktree = initialize_project(
            ctx.git,
            repo_url=repo_url,
            project_dir=project_dir,
            emit=_emit_step,
        )
    except (ProjectInitError, RuntimeError, OSError) as e:
        raise UserFacingCliError(str(e)) from e

    user_output(
        click.style("✅ Project ready. ", fg="green")
        + "Edit wrktr.conf, populate .SHARED/, then run `wrktr link` in "
        + click.style(str(main_worktree), fg="cyan")
    )
