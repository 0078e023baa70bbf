"""Concurrent operations over many worktrees.

Each operation dispatches one task per worktree and waits for all of them
(``asyncio.gather``). Every task carries the index or name of the worktree it
was created for, so results are associated with their source regardless of
the order in which tasks finish.
"""

from typing import Optional, Sequence

from git_phantom.exceptions import ExecutionError, GitError, WorktreeError
from git_phantom.executors.base import CommandExecutor
from git_phantom.git.commands import list_worktrees as git_list_worktrees
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import ListWorktreesResult, StatusResult, Worktree, WorktreeInfo
from git_phantom.worktree.listing import build_list_result, filter_managed_worktrees, gather_all, get_worktree_info
from git_phantom.worktree.paths import get_phantom_directory
from git_phantom.worktree.status import get_worktree_status, get_worktree_status_or_clean

logger = get_logger(__name__)


async def list_worktrees_concurrent(
    executor: CommandExecutor,
    git_root,
    worktrees_directory: Optional[str] = None,
) -> ListWorktreesResult:
    """List managed worktrees, probing all their statuses in parallel.

    A status check that fails is reported as clean so that one broken
    worktree does not hide the rest of the list.

    Raises:
        GitError: If the worktree listing itself fails
        ExecutionError: If git could not be run for the listing
    """
    logger.debug(f"Listing worktrees concurrently from git root: {git_root}")
    git_worktrees = await git_list_worktrees(executor, git_root)
    phantom_dir = get_phantom_directory(git_root, worktrees_directory)
    managed = filter_managed_worktrees(git_worktrees, phantom_dir)

    async def describe(name: str, worktree: Worktree) -> WorktreeInfo:
        is_clean = await get_worktree_status_or_clean(executor, worktree.path)
        return WorktreeInfo(name=name, path=worktree.path, branch=worktree.branch, is_clean=is_clean)

    infos = await gather_all(*(describe(name, worktree) for name, worktree in managed))
    logger.debug(f"Described {len(infos)} managed worktrees")
    return build_list_result(list(infos))


async def get_worktrees_info_concurrent(
    executor: CommandExecutor,
    git_root,
    names: Sequence[str],
    worktrees_directory: Optional[str] = None,
) -> list[WorktreeInfo]:
    """Get info for several worktrees in parallel.

    Best effort: worktrees whose lookup fails are left out. The remaining
    results keep the order of `names`.
    """

    async def fetch(name: str) -> Optional[WorktreeInfo]:
        try:
            return await get_worktree_info(executor, git_root, name, worktrees_directory)
        except (WorktreeError, GitError, ExecutionError) as e:
            logger.warning(f"Skipping worktree '{name}': {e}")
            return None

    results = await gather_all(*(fetch(name) for name in names))
    return [info for info in results if info is not None]


async def check_worktrees_status_concurrent(
    executor: CommandExecutor,
    worktree_paths: Sequence,
) -> list[tuple[int, StatusResult]]:
    """Check whether each worktree is clean, in parallel.

    Failures are reported per item, never downgraded.

    Returns:
        (index, result) pairs where index is the position of the path in
        `worktree_paths`, in index order
    """

    async def check(index: int, path) -> tuple[int, StatusResult]:
        try:
            is_clean = await get_worktree_status(executor, path)
        except (GitError, ExecutionError) as e:
            logger.debug(f"Status check failed for {path}: {e}")
            return index, StatusResult(error=e)
        return index, StatusResult(is_clean=is_clean)

    return await gather_all(*(check(index, path) for index, path in enumerate(worktree_paths)))
