"""Parsers for git porcelain output."""

import posixpath
from typing import Optional

from git_phantom.constants import BRANCH_REF_PREFIX
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import Worktree, WorktreeStatusDetails

logger = get_logger(__name__)


class _WorktreeAccumulator:
    """Fields collected for the worktree record currently being read."""

    def __init__(self, path: str):
        self.path = path
        self.commit: Optional[str] = None
        self.branch: Optional[str] = None
        self.is_bare = False
        self.is_detached = False
        self.is_prunable = False

    def build(self) -> Optional[Worktree]:
        """Build the worktree, or None if the record is incomplete."""
        name = posixpath.basename(self.path.rstrip("/"))
        if not name or self.commit is None:
            logger.debug(f"Dropping incomplete worktree record for '{self.path}'")
            return None
        return Worktree(
            name=name,
            path=self.path,
            commit=self.commit,
            branch=self.branch,
            is_bare=self.is_bare,
            is_detached=self.is_detached,
            is_prunable=self.is_prunable,
        )


def parse_worktree_list(output: str) -> list[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Format (records separated by blank lines, no trailing blank line
    guaranteed)::

        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/<name>     (or: detached)
        bare / prunable              (optional flags)

    Records missing a path or a commit are dropped. Unknown keys are ignored.

    Args:
        output: Raw porcelain text

    Returns:
        Worktrees in the order git reported them
    """
    worktrees: list[Worktree] = []
    current: Optional[_WorktreeAccumulator] = None

    def flush():
        nonlocal current
        if current is not None:
            worktree = current.build()
            if worktree is not None:
                worktrees.append(worktree)
        current = None

    for line in output.split("\n"):
        line = line.rstrip("\r")
        if not line:
            flush()
            continue

        key, sep, value = line.partition(" ")
        has_value = bool(sep)

        if key == "worktree":
            flush()
            if has_value:
                current = _WorktreeAccumulator(value)
        elif current is None:
            continue
        elif key == "HEAD":
            if has_value:
                current.commit = value
        elif key == "branch":
            # A detached HEAD never carries a branch
            if has_value and not current.is_detached:
                if value.startswith(BRANCH_REF_PREFIX):
                    value = value[len(BRANCH_REF_PREFIX):]
                current.branch = value
        elif key == "bare":
            current.is_bare = True
        elif key == "detached":
            current.is_detached = True
            current.branch = None
        elif key == "prunable":
            current.is_prunable = True

    flush()
    return worktrees


def parse_status_porcelain(output: str) -> WorktreeStatusDetails:
    """Parse ``git status --porcelain`` output.

    Each line is ``XY filename`` where X is the index status and Y the
    working tree status; ``??`` marks an untracked file.
    """
    details = WorktreeStatusDetails()

    for line in output.split("\n"):
        if not line.strip():
            continue
        details.changed_files += 1

        if len(line) < 2:
            continue

        if line.startswith("??"):
            details.untracked = True
            continue

        index_status = line[0]  # Staged changes
        worktree_status = line[1]  # Working tree changes

        if index_status != " ":
            details.staged = True
        if worktree_status != " ":
            details.modified = True

    return details
