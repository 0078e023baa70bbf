"""Managed worktree operations for git-phantom."""

from .concurrent import (
    check_worktrees_status_concurrent,
    get_worktrees_info_concurrent,
    list_worktrees_concurrent,
)
from .delete import delete_worktree
from .listing import get_worktree_info, list_worktrees, where_worktree
from .paths import get_phantom_directory, get_worktree_path
from .status import get_worktree_branch, get_worktree_status, get_worktree_status_details
from .validate import validate_worktree_exists, validate_worktree_name

__all__ = [
    "list_worktrees",
    "list_worktrees_concurrent",
    "get_worktree_info",
    "get_worktrees_info_concurrent",
    "check_worktrees_status_concurrent",
    "get_worktree_status",
    "get_worktree_status_details",
    "get_worktree_branch",
    "where_worktree",
    "delete_worktree",
    "get_phantom_directory",
    "get_worktree_path",
    "validate_worktree_name",
    "validate_worktree_exists",
]
