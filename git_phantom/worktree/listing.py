"""Listing and locating managed worktrees."""

import asyncio
from typing import Optional

from git_phantom.constants import NO_WORKTREES_MESSAGE
from git_phantom.executors.base import CommandExecutor
from git_phantom.git.commands import list_worktrees as git_list_worktrees
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import ListWorktreesResult, Worktree, WorktreeInfo
from git_phantom.worktree.paths import get_phantom_directory, get_worktree_path, managed_worktree_name
from git_phantom.worktree.status import get_worktree_branch, get_worktree_status_or_clean
from git_phantom.worktree.validate import validate_worktree_exists, validate_worktree_name

logger = get_logger(__name__)


async def gather_all(*aws) -> list:
    """Await every awaitable, then re-raise the first failure, if any.

    Unlike a plain ``asyncio.gather``, a failure never leaves siblings running
    unobserved after the call returns.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


def filter_managed_worktrees(worktrees: list[Worktree], phantom_dir: str) -> list[tuple[str, Worktree]]:
    """Keep the worktrees that live under the managed directory.

    Returns:
        (name, worktree) pairs in listing order, where name is the path
        relative to `phantom_dir`
    """
    managed = []
    for worktree in worktrees:
        name = managed_worktree_name(worktree.path, phantom_dir)
        if name is not None:
            managed.append((name, worktree))
    return managed


def build_list_result(worktrees: list[WorktreeInfo]) -> ListWorktreesResult:
    return ListWorktreesResult(
        worktrees=worktrees,
        message=NO_WORKTREES_MESSAGE if not worktrees else None,
    )


async def list_worktrees(
    executor: CommandExecutor,
    git_root,
    worktrees_directory: Optional[str] = None,
) -> ListWorktreesResult:
    """List managed worktrees, probing their status one at a time.

    See ``list_worktrees_concurrent`` for the parallel variant.
    """
    logger.debug(f"Listing worktrees from git root: {git_root}")
    git_worktrees = await git_list_worktrees(executor, git_root)
    phantom_dir = get_phantom_directory(git_root, worktrees_directory)

    infos = []
    for name, worktree in filter_managed_worktrees(git_worktrees, phantom_dir):
        is_clean = await get_worktree_status_or_clean(executor, worktree.path)
        infos.append(WorktreeInfo(name=name, path=worktree.path, branch=worktree.branch, is_clean=is_clean))

    return build_list_result(infos)


async def get_worktree_info(
    executor: CommandExecutor,
    git_root,
    name: str,
    worktrees_directory: Optional[str] = None,
) -> WorktreeInfo:
    """Get branch and status of one managed worktree.

    Branch and status are fetched concurrently. A failed branch lookup reports
    ``unknown`` and a failed status check reports clean.

    Raises:
        InvalidWorktreeNameError: If `name` is not a valid worktree name
    """
    validate_worktree_name(name)
    worktree_path = get_worktree_path(git_root, name, worktrees_directory)

    branch, is_clean = await gather_all(
        get_worktree_branch(executor, worktree_path),
        get_worktree_status_or_clean(executor, worktree_path),
    )
    return WorktreeInfo(name=name, path=worktree_path, branch=branch, is_clean=is_clean)


def where_worktree(git_root, name: str, worktrees_directory: Optional[str] = None) -> str:
    """Get the path of the managed worktree `name`.

    Raises:
        WorktreeNotFoundError: If the worktree does not exist
    """
    return validate_worktree_exists(git_root, name, worktrees_directory)
