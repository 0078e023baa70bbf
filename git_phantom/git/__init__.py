"""Git adapter, porcelain parsers and git operations for git-phantom."""

from .executor import GitExecutor
from .parse import parse_status_porcelain, parse_worktree_list

__all__ = [
    "GitExecutor",
    "parse_worktree_list",
    "parse_status_porcelain",
]
