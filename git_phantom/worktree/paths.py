"""Locations of managed worktrees."""

import os
from typing import Optional

from git_phantom.constants import DEFAULT_PHANTOM_DIR


def get_phantom_directory(git_root, worktrees_directory: Optional[str] = None) -> str:
    """Get the directory managed worktrees are created in.

    Args:
        git_root: Root of the main working tree
        worktrees_directory: Configured directory; relative paths are taken
            relative to `git_root`. Defaults to ``.git/phantom/worktrees``.
    """
    directory = worktrees_directory or DEFAULT_PHANTOM_DIR
    return os.path.join(str(git_root), directory)


def get_worktree_path(git_root, name: str, worktrees_directory: Optional[str] = None) -> str:
    """Get the path of the managed worktree called `name`."""
    return os.path.join(get_phantom_directory(git_root, worktrees_directory), name)


def managed_worktree_name(path: str, phantom_dir: str) -> Optional[str]:
    """Name of the worktree at `path` relative to the managed directory.

    Both paths are canonicalized first. Returns None when `path` does not lie
    strictly under `phantom_dir`.
    """
    canonical_dir = os.path.realpath(phantom_dir)
    canonical_path = os.path.realpath(path)

    if not canonical_path.startswith(canonical_dir.rstrip(os.sep) + os.sep):
        return None
    return os.path.relpath(canonical_path, canonical_dir)
