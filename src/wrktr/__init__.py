"""wrktr: share gitignored configuration across git worktrees.

Files kept in a project's `.SHARED/` directory are hardlinked, symlinked or
copied into each worktree according to `wrktr.conf`. See `wrktr help`.
"""
