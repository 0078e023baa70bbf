"""Git command adapter over a CommandExecutor."""

from typing import Optional, Sequence

from git_phantom.constants import GIT, GIT_EXIT_NOT_A_REPOSITORY, GIT_OPERATION_TIMEOUT
from git_phantom.exceptions import GitError
from git_phantom.executors.base import CommandExecutor
from git_phantom.logging_config import get_logger
from git_phantom.models.command import CommandConfig

logger = get_logger(__name__)


class GitExecutor:
    """Runs git through a CommandExecutor.

    Fixes the program to ``git``, applies a default timeout and an optional
    working directory, and turns nonzero exits into ``GitError``. Adapters are
    immutable; ``with_cwd`` and ``with_timeout`` return new ones.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        cwd: Optional[str] = None,
        timeout: float = GIT_OPERATION_TIMEOUT,
    ):
        """Initialize the adapter.

        Args:
            executor: Executor that runs the git process
            cwd: Directory git runs in (None = inherit the current directory)
            timeout: Per-invocation timeout in seconds
        """
        self.executor = executor
        self.cwd = str(cwd) if cwd is not None else None
        self.timeout = timeout

    def with_cwd(self, cwd) -> "GitExecutor":
        return GitExecutor(self.executor, cwd=str(cwd), timeout=self.timeout)

    def with_timeout(self, timeout: float) -> "GitExecutor":
        return GitExecutor(self.executor, cwd=self.cwd, timeout=timeout)

    async def run(self, args: Sequence[str]) -> str:
        """Run git and return stdout without trailing whitespace.

        Raises:
            GitError: If git exits with a nonzero status
            ExecutionError: If git could not be run or timed out
        """
        args = [str(arg) for arg in args]
        logger.debug(f"Running git command: git {' '.join(args)}")

        config = CommandConfig(GIT).with_args(args).with_timeout(self.timeout)
        if self.cwd is not None:
            config = config.with_cwd(self.cwd)

        output = await self.executor.execute(config)

        if output.success():
            return output.stdout.rstrip()

        stderr = output.stderr.strip()
        if stderr:
            message = stderr
        else:
            message = f"git {' '.join(args)} failed with exit code {output.exit_code}"
        raise GitError(message, output.exit_code)

    async def run_lines(self, args: Sequence[str]) -> list[str]:
        """Run git and return the non-empty lines of its output."""
        output = await self.run(args)
        return [line for line in output.split("\n") if line]

    async def is_in_git_repo(self) -> bool:
        """Check whether the working directory is inside a git repository.

        Only the "not a git repository" status (128) maps to False; any other
        failure is raised.
        """
        try:
            await self.run(["rev-parse", "--git-dir"])
            return True
        except GitError as e:
            if e.exit_code == GIT_EXIT_NOT_A_REPOSITORY:
                logger.debug(f"Not in a git repository: {e.message}")
                return False
            raise
