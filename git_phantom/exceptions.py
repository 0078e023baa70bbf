"""Custom exceptions for git-phantom"""

from typing import List, Optional, Sequence


class PhantomError(Exception):
    """Base exception for all git-phantom errors."""
    pass


class ExecutionError(PhantomError):
    """Exception raised when a program could not be run at all.

    Covers a missing binary, a spawn failure and a timeout. The process either
    never started or was killed, so there is no meaningful exit code.
    """

    def __init__(self, program: str, message: Optional[str] = None):
        self.program = program
        self.message = message

        error_msg = f"Process execution failed for '{program}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitError(PhantomError):
    """Exception raised when git ran but exited with a nonzero status."""

    def __init__(self, message: str, exit_code: int):
        self.message = message
        self.exit_code = exit_code
        super().__init__(f"Git operation failed: {message}")


class MockMismatchError(PhantomError):
    """Exception raised when a mock executor receives a call it was not told to expect.

    Not an ExecutionError, so handlers of failed commands never catch it.
    """

    def __init__(self, program: str, args: Sequence[str], cwd: Optional[str] = None):
        self.program = program
        self.command_args = list(args)
        self.cwd = cwd

        message = f"Unexpected command execution: {program} {self.command_args!r}"
        if cwd:
            message += f" in {cwd}"

        super().__init__(message)


class VerificationError(PhantomError):
    """Exception raised when registered mock expectations were not satisfied."""

    def __init__(self, failures: List[str]):
        self.failures = failures
        lines = "\n".join(f"  - {failure}" for failure in failures)
        super().__init__(f"{len(failures)} expectation(s) not satisfied:\n{lines}")


class NotInGitRepositoryError(PhantomError):
    """Exception raised when the working directory is not inside a git repository."""

    def __init__(self):
        super().__init__("Not in a git repository")


class WorktreeError(PhantomError):
    """Base exception for worktree operations."""
    pass


class WorktreeNotFoundError(WorktreeError):
    """Exception raised when a named worktree does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Worktree '{name}' not found")


class InvalidWorktreeNameError(WorktreeError):
    """Exception raised when a worktree name fails validation."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid worktree name '{name}': {reason}")


class WorktreeDirtyError(WorktreeError):
    """Exception raised when deleting a worktree with uncommitted changes."""

    def __init__(self, name: str, changed_files: int):
        self.name = name
        self.changed_files = changed_files
        super().__init__(
            f"Worktree '{name}' has uncommitted changes ({changed_files} files). "
            "Use --force to delete anyway."
        )
