"""Subprocess invocation data models."""

from dataclasses import dataclass, replace
from typing import Mapping, Optional, Sequence


@dataclass(frozen=True)
class CommandConfig:
    """Description of a single subprocess invocation.

    Instances are immutable. The ``with_*`` methods return a modified copy so a
    config can be assembled fluently::

        config = CommandConfig("git").with_args(["status"]).with_cwd("/repo")
    """

    program: str
    args: tuple[str, ...] = ()
    cwd: Optional[str] = None
    env: Optional[Mapping[str, str]] = None
    timeout: Optional[float] = None  # Seconds
    stdin: Optional[str] = None

    def with_args(self, args: Sequence[str]) -> "CommandConfig":
        return replace(self, args=tuple(str(arg) for arg in args))

    def with_cwd(self, cwd) -> "CommandConfig":
        return replace(self, cwd=str(cwd))

    def with_env(self, env: Mapping[str, str]) -> "CommandConfig":
        return replace(self, env=dict(env))

    def with_timeout(self, timeout: float) -> "CommandConfig":
        return replace(self, timeout=timeout)

    def with_stdin(self, stdin: str) -> "CommandConfig":
        return replace(self, stdin=stdin)

    def __str__(self) -> str:
        """Shell-like rendering used in log messages."""
        return " ".join([self.program, *self.args])


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of a finished process."""

    stdout: str
    stderr: str
    exit_code: int

    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class SpawnConfig:
    """Description of a fire-and-forget process.

    Streams that are not inherited from the parent are connected to devnull.
    """

    program: str
    args: tuple[str, ...] = ()
    cwd: Optional[str] = None
    env: Optional[Mapping[str, str]] = None
    inherit_stdin: bool = False
    inherit_stdout: bool = False
    inherit_stderr: bool = False

    def with_args(self, args: Sequence[str]) -> "SpawnConfig":
        return replace(self, args=tuple(str(arg) for arg in args))

    def with_cwd(self, cwd) -> "SpawnConfig":
        return replace(self, cwd=str(cwd))

    def with_env(self, env: Mapping[str, str]) -> "SpawnConfig":
        return replace(self, env=dict(env))

    def inheriting_stdio(self) -> "SpawnConfig":
        return replace(self, inherit_stdin=True, inherit_stdout=True, inherit_stderr=True)


@dataclass(frozen=True)
class SpawnOutput:
    """Handle for a spawned process."""

    pid: int
