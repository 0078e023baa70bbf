"""Configuration handling for git-phantom"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Configuration for git-phantom with validation."""

    # Managed worktree directory (None = <git root>/.git/phantom/worktrees)
    worktrees_directory: Optional[str] = None

    # Execution modes
    sequential: bool = False  # Check worktree status one at a time
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_worktrees_directory()

    def _validate_worktrees_directory(self):
        """Validate worktrees_directory is not blank when given."""
        if self.worktrees_directory is None:
            return
        if not self.worktrees_directory.strip():
            raise ValueError("worktrees_directory cannot be empty")
        self.worktrees_directory = self.worktrees_directory.strip()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "worktrees_directory": self.worktrees_directory,
            "sequential": self.sequential,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "worktrees_directory",
            "sequential",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
