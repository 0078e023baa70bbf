"""Subprocess-backed command executor."""

import asyncio
import os
import signal
import subprocess
import threading
from typing import Optional

from git_phantom.constants import SIGNAL_EXIT_CODE
from git_phantom.exceptions import ExecutionError
from git_phantom.executors.base import CommandExecutor
from git_phantom.logging_config import get_logger
from git_phantom.models.command import CommandConfig, CommandOutput, SpawnConfig, SpawnOutput

logger = get_logger(__name__)


def _merge_env(overlay) -> Optional[dict]:
    """Overlay the given variables on the current environment."""
    if overlay is None:
        return None
    return {**os.environ, **overlay}


class RealCommandExecutor(CommandExecutor):
    """Runs commands as OS processes.

    Holds no mutable state; every call spawns an independent process.
    """

    async def execute(self, config: CommandConfig) -> CommandOutput:
        logger.debug(f"Executing command: {config}" + (f" (cwd={config.cwd})" if config.cwd else ""))

        try:
            process = await asyncio.create_subprocess_exec(
                config.program,
                *config.args,
                cwd=config.cwd,
                env=_merge_env(config.env),
                stdin=asyncio.subprocess.PIPE if config.stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                # Own process group so a timeout can stop hooks and helpers git started
                start_new_session=True,
            )
        except OSError as e:
            raise ExecutionError(config.program, f"Failed to execute command: {e}") from e

        stdin_data = config.stdin.encode() if config.stdin is not None else None
        try:
            if config.timeout is not None:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(stdin_data), timeout=config.timeout
                )
            else:
                stdout, stderr = await process.communicate(stdin_data)
        except asyncio.TimeoutError:
            logger.error(f"Command '{config}' timed out after {config.timeout}s, killing process")
            await self._kill(process)
            raise ExecutionError(config.program, f"Command timed out after {config.timeout}s")
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        exit_code = process.returncode
        if exit_code is None or exit_code < 0:
            exit_code = SIGNAL_EXIT_CODE

        output = CommandOutput(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=exit_code,
        )
        logger.debug(
            f"Command '{config.program}' exited with code {exit_code}, "
            f"stdout: {len(output.stdout)} chars, stderr: {len(output.stderr)} chars"
        )
        return output

    async def spawn(self, config: SpawnConfig) -> SpawnOutput:
        logger.info(f"Spawning process: {config.program} {list(config.args)}")

        try:
            process = subprocess.Popen(
                [config.program, *config.args],
                cwd=config.cwd,
                env=_merge_env(config.env),
                stdin=None if config.inherit_stdin else subprocess.DEVNULL,
                stdout=None if config.inherit_stdout else subprocess.DEVNULL,
                stderr=None if config.inherit_stderr else subprocess.DEVNULL,
            )
        except OSError as e:
            raise ExecutionError(config.program, f"Failed to spawn process: {e}") from e

        logger.debug(f"Process spawned with PID: {process.pid}")

        # Nobody waits on a spawned process, so reap it in the background
        threading.Thread(target=process.wait, name=f"reap-{process.pid}", daemon=True).start()
        return SpawnOutput(pid=process.pid)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        """Kill a running process together with its process group and reap it.

        Descendants still holding the output pipes would otherwise keep
        ``wait()`` from returning until they exit on their own.
        """
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            # Group already gone; the leader may still need a direct kill
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()
