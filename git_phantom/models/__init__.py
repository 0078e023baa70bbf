"""Data models for git-phantom."""

from .command import CommandConfig, CommandOutput, SpawnConfig, SpawnOutput
from .worktree import (
    DeleteWorktreeResult,
    ListWorktreesResult,
    StatusResult,
    Worktree,
    WorktreeInfo,
    WorktreeStatusDetails,
)

__all__ = [
    "CommandConfig",
    "CommandOutput",
    "SpawnConfig",
    "SpawnOutput",
    "Worktree",
    "WorktreeInfo",
    "ListWorktreesResult",
    "StatusResult",
    "WorktreeStatusDetails",
    "DeleteWorktreeResult",
]
