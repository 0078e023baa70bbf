"""Worktree data models."""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Worktree:
    """A git worktree as reported by ``git worktree list --porcelain``."""

    name: str  # Last path segment
    path: str
    commit: str
    branch: Optional[str] = None  # None when detached
    is_bare: bool = False
    is_detached: bool = False
    is_prunable: bool = False

    def __post_init__(self):
        if self.is_detached and self.branch is not None:
            raise ValueError(f"Detached worktree {self.path} cannot carry branch '{self.branch}'")

    def __str__(self) -> str:
        """String representation of worktree."""
        head = self.branch if self.branch is not None else f"detached at {self.commit[:7]}"
        return f"{self.name} ({head}) @ {self.path}"


@dataclass
class WorktreeInfo:
    """A managed worktree whose status has been checked."""

    name: str
    path: str
    branch: Optional[str]
    is_clean: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ListWorktreesResult:
    """Result of listing managed worktrees."""

    worktrees: list[WorktreeInfo] = field(default_factory=list)
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "worktrees": [wt.to_dict() for wt in self.worktrees],
            "message": self.message,
        }


@dataclass(frozen=True)
class StatusResult:
    """Outcome of one status check: either a clean/dirty verdict or the error."""

    is_clean: Optional[bool] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> bool:
        """Return the verdict, raising the captured error if the check failed."""
        if self.error is not None:
            raise self.error
        return bool(self.is_clean)


@dataclass
class WorktreeStatusDetails:
    """File-level status of a worktree parsed from ``git status --porcelain``."""

    modified: bool = False
    untracked: bool = False
    staged: bool = False
    changed_files: int = 0

    @property
    def is_clean(self) -> bool:
        return self.changed_files == 0


@dataclass
class DeleteWorktreeResult:
    """Outcome of deleting a managed worktree."""

    message: str
    branch_deleted: bool
    had_uncommitted_changes: bool
