"""Worktree name and existence checks."""

import os
import re
from typing import Optional

from git_phantom.constants import MAX_WORKTREE_NAME_LENGTH
from git_phantom.exceptions import InvalidWorktreeNameError, WorktreeNotFoundError
from git_phantom.worktree.paths import get_worktree_path

_VALID_NAME = re.compile(r"^[A-Za-z0-9._/-]+$")


def validate_worktree_name(name: str) -> None:
    """Check that `name` is usable as a worktree name and branch name.

    Raises:
        InvalidWorktreeNameError: If the name is empty, too long, contains
            characters outside ``[A-Za-z0-9._/-]`` or contains ``..``
    """
    if not name or not name.strip():
        raise InvalidWorktreeNameError(name, "name cannot be empty")
    if len(name) > MAX_WORKTREE_NAME_LENGTH:
        raise InvalidWorktreeNameError(name, f"name cannot exceed {MAX_WORKTREE_NAME_LENGTH} characters")
    if ".." in name:
        raise InvalidWorktreeNameError(name, "name cannot contain '..'")
    if not _VALID_NAME.match(name):
        raise InvalidWorktreeNameError(
            name, "only letters, numbers, '-', '_', '.' and '/' are allowed"
        )


def validate_worktree_exists(git_root, name: str, worktrees_directory: Optional[str] = None) -> str:
    """Check that the managed worktree `name` exists on disk.

    Returns:
        Path of the worktree

    Raises:
        InvalidWorktreeNameError: If the name is not valid
        WorktreeNotFoundError: If no such directory exists
    """
    validate_worktree_name(name)
    path = get_worktree_path(git_root, name, worktrees_directory)
    if not os.path.isdir(path):
        raise WorktreeNotFoundError(name)
    return path
