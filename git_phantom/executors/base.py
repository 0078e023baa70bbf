"""Command executor interface."""

from abc import ABC, abstractmethod

from git_phantom.models.command import CommandConfig, CommandOutput, SpawnConfig, SpawnOutput


class CommandExecutor(ABC):
    """The single seam between git-phantom and the operating system.

    Callers program against this type. Concrete executors are obtained from
    ``create_real_executor()`` or ``create_mock_executor()``.

    Implementations must be safe to share between concurrently running tasks.
    """

    @abstractmethod
    async def execute(self, config: CommandConfig) -> CommandOutput:
        """Run a process to completion and capture its output.

        The exit code is reported as-is; deciding whether a nonzero status is
        a failure is left to the caller.

        Raises:
            ExecutionError: If the program could not be run or timed out
        """

    @abstractmethod
    async def spawn(self, config: SpawnConfig) -> SpawnOutput:
        """Start a process without waiting for it.

        Raises:
            ExecutionError: If the program could not be started
        """
