"""Git operations used by the worktree layer.

Every function takes the CommandExecutor to run git with, so the same code
runs against real processes and against a scripted mock.
"""

import os
from typing import Optional

from git_phantom.constants import GIT_EXIT_NOT_A_REPOSITORY, GIT_EXIT_REF_NOT_FOUND
from git_phantom.exceptions import GitError
from git_phantom.executors.base import CommandExecutor
from git_phantom.git.executor import GitExecutor
from git_phantom.git.parse import parse_worktree_list
from git_phantom.logging_config import get_logger
from git_phantom.models.worktree import Worktree

logger = get_logger(__name__)


async def list_worktrees(executor: CommandExecutor, repo_path) -> list[Worktree]:
    """List all git worktrees of the repository at `repo_path`."""
    git = GitExecutor(executor).with_cwd(repo_path)

    logger.debug(f"Listing worktrees in {repo_path}")
    output = await git.run(["worktree", "list", "--porcelain"])
    worktrees = parse_worktree_list(output)

    logger.debug(f"Found {len(worktrees)} worktrees")
    for wt in worktrees:
        logger.debug(f"  {wt}")
    return worktrees


async def get_git_root(executor: CommandExecutor, cwd=None) -> str:
    """Get the root of the main working tree, even from inside a linked worktree.

    Returns:
        Canonical absolute path of the repository root
    """
    git = GitExecutor(executor, cwd=cwd)
    base = str(cwd) if cwd is not None else os.getcwd()

    common_dir = (await git.run(["rev-parse", "--git-common-dir"])).strip()
    logger.debug(f"Git common dir: {common_dir}")

    if common_dir == ".git" or common_dir.endswith("/.git"):
        parent = os.path.dirname(common_dir)
        root = os.path.join(base, parent) if not os.path.isabs(parent) else parent
        return os.path.realpath(root)

    # Bare repositories and unusual layouts: fall back to the toplevel
    toplevel = (await git.run(["rev-parse", "--show-toplevel"])).strip()
    return os.path.realpath(toplevel)


async def is_inside_work_tree(executor: CommandExecutor, cwd=None) -> bool:
    """Check whether `cwd` is inside a git working tree."""
    git = GitExecutor(executor, cwd=cwd)
    try:
        output = await git.run(["rev-parse", "--is-inside-work-tree"])
    except GitError as e:
        if e.exit_code == GIT_EXIT_NOT_A_REPOSITORY:
            logger.debug("Not in a git repository")
            return False
        raise
    return output.strip() == "true"


async def branch_exists(executor: CommandExecutor, git_root, branch_name: str) -> bool:
    """Check whether a local branch exists."""
    git = GitExecutor(executor).with_cwd(git_root)
    try:
        await git.run(["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"])
    except GitError as e:
        if e.exit_code == GIT_EXIT_REF_NOT_FOUND:
            logger.debug(f"Branch '{branch_name}' does not exist")
            return False
        raise
    logger.debug(f"Branch '{branch_name}' exists")
    return True


async def current_commit(executor: CommandExecutor, repo_path) -> str:
    """Get the commit HEAD points at."""
    git = GitExecutor(executor).with_cwd(repo_path)
    return (await git.run(["rev-parse", "HEAD"])).strip()


async def get_current_branch(executor: CommandExecutor, repo_path) -> str:
    """Get the checked-out branch name (empty when detached)."""
    git = GitExecutor(executor).with_cwd(repo_path)
    branch = (await git.run(["branch", "--show-current"])).strip()
    logger.debug(f"Current branch in {repo_path}: {branch or '(detached)'}")
    return branch


async def list_branches(executor: CommandExecutor, cwd) -> list[str]:
    """List local branch names."""
    git = GitExecutor(executor).with_cwd(cwd)
    lines = await git.run_lines(["branch", "--format=%(refname:short)"])
    branches = [line.strip() for line in lines if line.strip()]
    logger.debug(f"Found {len(branches)} branches")
    return branches


async def create_branch(executor: CommandExecutor, git_root, branch_name: str) -> None:
    git = GitExecutor(executor).with_cwd(git_root)
    await git.run(["branch", branch_name])
    logger.debug(f"Created branch '{branch_name}'")


async def delete_branch(executor: CommandExecutor, git_root, branch_name: str) -> None:
    """Force-delete a local branch."""
    git = GitExecutor(executor).with_cwd(git_root)
    await git.run(["branch", "-D", branch_name])
    logger.debug(f"Deleted branch '{branch_name}'")


async def add_worktree(
    executor: CommandExecutor,
    repo_path,
    worktree_path,
    branch: Optional[str] = None,
    new_branch: bool = False,
    commitish: Optional[str] = None,
) -> None:
    """Create a worktree at `worktree_path`.

    Args:
        executor: Executor to run git with
        repo_path: Repository the worktree belongs to
        worktree_path: Directory for the new worktree
        branch: Branch to check out, or to create when `new_branch` is set
        new_branch: Create `branch` (``-b``) instead of checking out an existing one
        commitish: Starting point for the new branch
    """
    args = ["worktree", "add"]
    if new_branch:
        if not branch:
            raise ValueError("Branch name required when creating new branch")
        args.extend(["-b", branch, str(worktree_path)])
        if commitish:
            args.append(commitish)
    else:
        args.append(str(worktree_path))
        if branch:
            args.append(branch)

    logger.info(f"Creating worktree at {worktree_path} for branch {branch} from base {commitish}")
    await GitExecutor(executor).with_cwd(repo_path).run(args)


async def attach_worktree(executor: CommandExecutor, git_root, worktree_path, branch_name: str) -> None:
    """Create a worktree for an existing branch."""
    logger.info(f"Attaching worktree at {worktree_path} to branch '{branch_name}'")
    await add_worktree(executor, git_root, worktree_path, branch=branch_name)


async def remove_worktree(executor: CommandExecutor, cwd, worktree_path, force: bool = False) -> None:
    git = GitExecutor(executor).with_cwd(cwd)
    args = ["worktree", "remove"]
    if force:
        args.append("--force")
    args.append(str(worktree_path))

    logger.debug(f"Removing worktree at {worktree_path}")
    await git.run(args)


async def get_current_worktree(executor: CommandExecutor, git_root, cwd=None) -> Optional[str]:
    """Get the branch of the worktree `cwd` is in.

    Returns:
        The branch name, or None when in the main worktree, a detached
        worktree, or a directory git does not list
    """
    toplevel = (await GitExecutor(executor, cwd=cwd).run(["rev-parse", "--show-toplevel"])).strip()
    current_path = os.path.realpath(toplevel)

    for wt in await list_worktrees(executor, git_root):
        if os.path.realpath(wt.path) != current_path:
            continue
        if current_path == os.path.realpath(str(git_root)):
            logger.debug("In main worktree")
            return None
        return wt.branch

    logger.debug(f"Worktree for {current_path} not found")
    return None
