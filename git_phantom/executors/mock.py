"""Scripted command executor for tests.

Expectations are registered per program and matched by content (program,
arguments, working directory, environment and stdin), never by call order
across different commands, so the same script works whether the code under
test issues its calls sequentially or concurrently::

    mock = create_mock_executor()
    mock.expect("git").with_args("status", "--porcelain").in_dir("/w1").returns_success()
    mock.expect("git").with_args("status", "--porcelain").in_dir("/w2").returns_output("M f.txt\\n")
    ...
    mock.verify()

A call that no expectation accepts raises ``MockMismatchError`` immediately
and is also reported by ``verify()``.
"""

import asyncio
import os
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Mapping, Optional, Sequence

from git_phantom.exceptions import ExecutionError, MockMismatchError, VerificationError
from git_phantom.executors.base import CommandExecutor
from git_phantom.logging_config import get_logger
from git_phantom.models.command import CommandConfig, CommandOutput, SpawnConfig, SpawnOutput

logger = get_logger(__name__)


def _normalize_dir(path) -> Optional[str]:
    if path is None:
        return None
    return os.path.normpath(str(path))


@dataclass(frozen=True)
class CommandCall:
    """A call observed by the mock."""

    program: str
    args: tuple[str, ...]
    cwd: Optional[str] = None
    env: Optional[Mapping[str, str]] = None
    stdin: Optional[str] = None


@dataclass
class Expectation:
    """A registered rule describing a call the mock recognizes and its response."""

    program: str
    args: Optional[tuple[str, ...]] = None
    args_prefix: Optional[tuple[str, ...]] = None
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    stdin: Optional[str] = None

    # Call-count policy: exact when `times` is set, otherwise unbounded
    # unless `at_least_once` is set
    times: Optional[int] = None
    at_least_once: bool = False

    output: CommandOutput = field(default_factory=lambda: CommandOutput("", "", 0))
    error: Optional[str] = None
    pid: Optional[int] = None
    delay: float = 0.0

    calls: int = 0

    def matches(self, call: CommandCall) -> bool:
        """Check whether every narrowing matcher accepts the call."""
        if call.program != self.program:
            return False
        if self.args is not None and call.args != self.args:
            return False
        if self.args_prefix is not None and call.args[:len(self.args_prefix)] != self.args_prefix:
            return False
        if self.cwd is not None and _normalize_dir(call.cwd) != self.cwd:
            return False
        if self.env is not None and dict(call.env or {}) != self.env:
            return False
        if self.stdin is not None and call.stdin != self.stdin:
            return False
        return True

    def has_budget(self) -> bool:
        return self.times is None or self.calls < self.times

    def unmet_reason(self) -> Optional[str]:
        """Describe why the call-count policy is not satisfied, or None."""
        if self.times is not None and self.calls != self.times:
            return (
                f"Expected command '{self.describe()}' to be called {self.times} times, "
                f"but was called {self.calls} times"
            )
        if self.at_least_once and self.calls == 0:
            return f"Expected command '{self.describe()}' to be called at least once, but it was never called"
        return None

    def describe(self) -> str:
        parts = [self.program]
        if self.args is not None:
            parts.extend(self.args)
        elif self.args_prefix is not None:
            parts.extend(self.args_prefix)
            parts.append("...")
        text = " ".join(parts)
        if self.cwd is not None:
            text += f" (in {self.cwd})"
        return text


class _ExpectationBuilder:
    """Narrowing methods shared by command and spawn expectation builders."""

    def __init__(self, mock: "MockCommandExecutor", registry: Dict[str, List[Expectation]], program: str):
        self._mock = mock
        self._registry = registry
        self._expectation = Expectation(program=program)

    def with_args(self, *args: str) -> "_ExpectationBuilder":
        self._expectation.args = tuple(str(arg) for arg in args)
        return self

    def with_args_prefix(self, *args: str) -> "_ExpectationBuilder":
        self._expectation.args_prefix = tuple(str(arg) for arg in args)
        return self

    def in_dir(self, path) -> "_ExpectationBuilder":
        self._expectation.cwd = _normalize_dir(path)
        return self

    def with_env(self, env: Mapping[str, str]) -> "_ExpectationBuilder":
        self._expectation.env = dict(env)
        return self

    def with_stdin(self, stdin: str) -> "_ExpectationBuilder":
        self._expectation.stdin = stdin
        return self

    def times(self, count: int) -> "_ExpectationBuilder":
        if count < 0:
            raise ValueError(f"times must not be negative, got {count}")
        self._expectation.times = count
        self._expectation.at_least_once = False
        return self

    def at_least_once(self) -> "_ExpectationBuilder":
        self._expectation.at_least_once = True
        self._expectation.times = None
        return self

    def after_delay(self, seconds: float) -> "_ExpectationBuilder":
        """Suspend the calling task for `seconds` before responding."""
        self._expectation.delay = seconds
        return self

    def _register(self) -> Expectation:
        with self._mock._lock:
            self._registry.setdefault(self._expectation.program, []).append(self._expectation)
        return self._expectation


class ExpectationBuilder(_ExpectationBuilder):
    """Builds an expectation for ``execute``; a ``returns_*`` call registers it."""

    def returns_output(self, stdout: str = "", stderr: str = "", exit_code: int = 0) -> Expectation:
        self._expectation.output = CommandOutput(stdout, stderr, exit_code)
        return self._register()

    def returns_success(self, stdout: str = "") -> Expectation:
        return self.returns_output(stdout, "", 0)

    def returns_error(self, message: str) -> Expectation:
        """Make matching calls raise ``ExecutionError`` as if the program could not run."""
        self._expectation.error = message
        return self._register()


class SpawnExpectationBuilder(_ExpectationBuilder):
    """Builds an expectation for ``spawn``."""

    def returns_pid(self, pid: int) -> Expectation:
        self._expectation.pid = pid
        return self._register()

    def returns_error(self, message: str) -> Expectation:
        self._expectation.error = message
        return self._register()


class MockCommandExecutor(CommandExecutor):
    """Deterministic stand-in for subprocess execution.

    The expectation registry is owned by the instance and guarded by a lock,
    so independent mocks can coexist and one mock can serve concurrent tasks.
    """

    def __init__(self):
        self._lock = Lock()
        self._expectations: Dict[str, List[Expectation]] = {}
        self._spawn_expectations: Dict[str, List[Expectation]] = {}
        self._calls: List[CommandCall] = []
        self._spawn_calls: List[CommandCall] = []
        self._unexpected: List[CommandCall] = []

    def __enter__(self) -> "MockCommandExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        # Don't mask the original failure with a verification error
        if exc_type is None:
            self.verify()
        return False

    def expect(self, program: str) -> ExpectationBuilder:
        """Begin registering an expectation for `program`."""
        return ExpectationBuilder(self, self._expectations, program)

    def expect_spawn(self, program: str) -> SpawnExpectationBuilder:
        return SpawnExpectationBuilder(self, self._spawn_expectations, program)

    async def execute(self, config: CommandConfig) -> CommandOutput:
        call = CommandCall(
            program=config.program,
            args=tuple(config.args),
            cwd=config.cwd,
            env=config.env,
            stdin=config.stdin,
        )
        expectation = self._consume(self._expectations, self._calls, call)
        logger.debug(f"Mock matched '{expectation.describe()}' for {config}")

        if expectation.delay:
            await asyncio.sleep(expectation.delay)
        if expectation.error is not None:
            raise ExecutionError(config.program, expectation.error)
        return expectation.output

    async def spawn(self, config: SpawnConfig) -> SpawnOutput:
        call = CommandCall(
            program=config.program,
            args=tuple(config.args),
            cwd=config.cwd,
            env=config.env,
        )
        expectation = self._consume(self._spawn_expectations, self._spawn_calls, call)

        if expectation.delay:
            await asyncio.sleep(expectation.delay)
        if expectation.error is not None:
            raise ExecutionError(config.program, expectation.error)
        return SpawnOutput(pid=expectation.pid or 0)

    def _consume(
        self,
        registry: Dict[str, List[Expectation]],
        calls: List[CommandCall],
        call: CommandCall,
    ) -> Expectation:
        """Record the call and select the expectation that answers it.

        The first accepting expectation with remaining budget wins. When every
        accepting expectation is exhausted the first one is charged anyway so
        that ``verify()`` reports the over-call.
        """
        with self._lock:
            calls.append(call)
            accepting = [exp for exp in registry.get(call.program, []) if exp.matches(call)]
            if not accepting:
                self._unexpected.append(call)
                raise MockMismatchError(call.program, call.args, call.cwd)

            selected = next((exp for exp in accepting if exp.has_budget()), accepting[0])
            selected.calls += 1
            return selected

    def verify(self) -> None:
        """Check that every expectation's call-count policy was met.

        Raises:
            VerificationError: Enumerating every unmet expectation and every
                call that matched nothing
        """
        failures = []
        with self._lock:
            for registry in (self._expectations, self._spawn_expectations):
                for expectations in registry.values():
                    for expectation in expectations:
                        reason = expectation.unmet_reason()
                        if reason:
                            failures.append(reason)
            for call in self._unexpected:
                failures.append(f"Unexpected command execution: {call.program} {list(call.args)!r}")

        if failures:
            raise VerificationError(failures)

    def calls(self) -> List[CommandCall]:
        """Snapshot of every ``execute`` call seen so far, in arrival order."""
        with self._lock:
            return list(self._calls)

    def spawn_calls(self) -> List[CommandCall]:
        with self._lock:
            return list(self._spawn_calls)

    def expectations(self, program: Optional[str] = None) -> List[Expectation]:
        """Registered ``execute`` expectations, optionally for one program."""
        with self._lock:
            if program is not None:
                return list(self._expectations.get(program, []))
            return [exp for exps in self._expectations.values() for exp in exps]
