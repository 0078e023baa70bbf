"""Deleting managed worktrees."""

from typing import Optional

from git_phantom.exceptions import ExecutionError, GitError, WorktreeDirtyError
from git_phantom.executors.base import CommandExecutor
from git_phantom.git.commands import delete_branch, remove_worktree
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import DeleteWorktreeResult, WorktreeStatusDetails
from git_phantom.worktree.status import get_worktree_status_details
from git_phantom.worktree.validate import validate_worktree_exists

logger = get_logger(__name__)


async def delete_worktree(
    executor: CommandExecutor,
    git_root,
    name: str,
    force: bool = False,
    worktrees_directory: Optional[str] = None,
) -> DeleteWorktreeResult:
    """Remove a managed worktree and its branch of the same name.

    Args:
        executor: Executor to run git with
        git_root: Root of the main working tree
        name: Worktree name
        force: Delete even if the worktree has uncommitted changes
        worktrees_directory: Configured managed directory, if any

    Raises:
        WorktreeNotFoundError: If the worktree does not exist
        WorktreeDirtyError: If it has uncommitted changes and `force` is not set
        GitError: If ``git worktree remove`` fails
    """
    worktree_path = validate_worktree_exists(git_root, name, worktrees_directory)

    try:
        status = await get_worktree_status_details(executor, worktree_path)
    except (GitError, ExecutionError) as e:
        logger.warning(f"Could not check status of '{name}', assuming no changes: {e}")
        status = WorktreeStatusDetails()

    if not status.is_clean and not force:
        raise WorktreeDirtyError(name, status.changed_files)

    logger.info(f"Removing worktree '{name}' at {worktree_path}")
    try:
        await remove_worktree(executor, git_root, worktree_path)
    except GitError:
        if not force:
            raise
        logger.debug(f"Plain removal of '{name}' failed, retrying with --force")
        await remove_worktree(executor, git_root, worktree_path, force=True)

    try:
        await delete_branch(executor, git_root, name)
        branch_deleted = True
    except GitError as e:
        logger.debug(f"Failed to delete branch '{name}': {e}")
        branch_deleted = False

    if branch_deleted:
        message = f"Deleted worktree '{name}' and its branch '{name}'"
    else:
        message = f"Deleted worktree '{name}'"

    if not status.is_clean:
        message = (
            f"Warning: Worktree '{name}' had uncommitted changes ({status.changed_files} files)\n"
            f"{message}"
        )

    return DeleteWorktreeResult(
        message=message,
        branch_deleted=branch_deleted,
        had_uncommitted_changes=not status.is_clean,
    )
