"""Status checks for individual worktrees."""

from git_phantom.constants import DETACHED_HEAD_LABEL, UNKNOWN_BRANCH_LABEL
from git_phantom.exceptions import ExecutionError, GitError
from git_phantom.executors.base import CommandExecutor
from git_phantom.git.executor import GitExecutor
from git_phantom.git.parse import parse_status_porcelain
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import WorktreeStatusDetails

logger = get_logger(__name__)


async def get_worktree_status(executor: CommandExecutor, worktree_path) -> bool:
    """Check whether a worktree is clean.

    Returns:
        True if ``git status --porcelain`` prints nothing

    Raises:
        GitError: If git status fails
        ExecutionError: If git could not be run
    """
    git = GitExecutor(executor).with_cwd(worktree_path)
    output = await git.run(["status", "--porcelain"])
    return not output.strip()


async def get_worktree_status_or_clean(executor: CommandExecutor, worktree_path) -> bool:
    """Like ``get_worktree_status`` but reports a failed check as clean.

    A worktree removed behind git's back also reports clean here.
    """
    try:
        return await get_worktree_status(executor, worktree_path)
    except (GitError, ExecutionError) as e:
        logger.warning(f"Could not check worktree status for {worktree_path}, assuming clean: {e}")
        return True


async def get_worktree_status_details(executor: CommandExecutor, worktree_path) -> WorktreeStatusDetails:
    """Get file-level status of a worktree.

    Raises:
        GitError: If git status fails
        ExecutionError: If git could not be run
    """
    git = GitExecutor(executor).with_cwd(worktree_path)
    output = await git.run(["status", "--porcelain"])
    return parse_status_porcelain(output)


async def get_worktree_branch(executor: CommandExecutor, worktree_path) -> str:
    """Get the branch checked out in a worktree.

    Returns:
        The branch name, ``(detached HEAD)`` when detached, or ``unknown``
        when git fails
    """
    git = GitExecutor(executor).with_cwd(worktree_path)
    try:
        branch = (await git.run(["branch", "--show-current"])).strip()
    except (GitError, ExecutionError) as e:
        logger.debug(f"Could not read branch of {worktree_path}: {e}")
        return UNKNOWN_BRANCH_LABEL
    return branch or DETACHED_HEAD_LABEL
