"""
git-phantom - Ephemeral git worktree management
"""

from .__version__ import __version__
from .executors import CommandExecutor, create_mock_executor, create_real_executor
from .git.executor import GitExecutor

__all__ = [
    "CommandExecutor",
    "GitExecutor",
    "create_mock_executor",
    "create_real_executor",
    "__version__",
]
