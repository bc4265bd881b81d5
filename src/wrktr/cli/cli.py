import logging

import click

from wrktr.cli.commands.check_cmd import check_cmd
from wrktr.cli.commands.cleanup_cmd import cleanup_cmd
from wrktr.cli.commands.help_cmd import COMMANDS_TEXT, commands_cmd, help_cmd
from wrktr.cli.commands.init_cmd import init_cmd
from wrktr.cli.commands.link_cmd import link_cmd
from wrktr.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.version_option(package_name="wrktr")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Share gitignored resources across git worktrees."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()

    if ctx.invoked_subcommand is None:
        click.echo(COMMANDS_TEXT)


cli.add_command(init_cmd)
cli.add_command(link_cmd)
cli.add_command(check_cmd)
cli.add_command(cleanup_cmd)
cli.add_command(help_cmd)
cli.add_command(commands_cmd)


def main() -> None:
    """CLI entry point used by the `wrktr` console script."""
    cli()
