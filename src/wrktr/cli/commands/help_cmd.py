"""Static usage text: `wrktr help` and `wrktr commands`."""

import click

COMMANDS_TEXT = """\
wrktr commands reference
========================

  init REPO_URL PROJECT_DIR   Initialize a new worktree-enabled project
  link [WORKTREE]             Link shared resources into a worktree; ignored inside a worktree
  check [WORKTREE]            Verify that shared resources are correctly linked
  cleanup [WORKTREE]          Remove links to shared resources
  help                        Show the full guide
  commands                    Show this text
"""

HELP_TEXT = """\
wrktr - Git Worktree Resource Manager
======================================

Share gitignored configuration files across multiple git worktrees using
hardlinks, softlinks, and copies.

When using git worktrees, each worktree needs its own copy of gitignored
files (like .env, .claude/, IDE settings). wrktr centralizes them in
.SHARED/ and links them into each worktree.

COMMANDS
--------

  wrktr init REPO_URL PROJECT_DIR

    Clones a bare repository to PROJECT_DIR/.bare, sets up .SHARED/,
    creates the main worktree and writes an initial wrktr.conf.

  wrktr link [WORKTREE]

    From project root:  wrktr link feature-branch/
    From worktree:      wrktr link

  wrktr check [WORKTREE] [--json]

    Shows the status of each configured asset.

  wrktr cleanup [WORKTREE]

    Unlinks hardlinks/softlinks and restores copied files with git.
    Run it before deleting a worktree.

CONFIGURATION (wrktr.conf)
--------------------------

  hardlink_assets=(
    "CLAUDE.local.md"
    ".claude/settings.local.json"
  )
    Individual gitignored files. Every worktree shares the same inode, so
    changes in any worktree show up in all of them.

  softlink_assets=(
    ".claude/commands"
  )
    Gitignored directories, symlinked to their location in .SHARED/.

  copy_assets=(
    ".vscode/settings.json"
  )
    Tracked files that need local modifications. Refreshed from .SHARED/ on
    every `wrktr link`; `wrktr cleanup` restores them with git.

DIRECTORY STRUCTURE
-------------------

  project/
  ├── .bare/              # Bare git repository
  ├── .git                # Points to .bare
  ├── .SHARED/            # Centralized shared resources
  ├── wrktr.conf          # Defines what to share
  ├── main/               # First worktree
  └── feature-xyz/        # Additional worktrees
"""


@click.command("help")
def help_cmd() -> None:
    """Show the full guide."""
    click.echo(HELP_TEXT)


@click.command("commands")
def commands_cmd() -> None:
    """Show the commands reference."""
    click.echo(COMMANDS_TEXT)
