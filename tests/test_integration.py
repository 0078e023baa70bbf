"""Integration tests running the real git binary"""
import shutil
from pathlib import Path

import pytest

from git_phantom.exceptions import GitError, WorktreeDirtyError
from git_phantom.executors import create_real_executor
from git_phantom.git import GitExecutor
from git_phantom.git.commands import branch_exists, get_git_root, is_inside_work_tree, list_worktrees
from git_phantom.worktree import (
    check_worktrees_status_concurrent,
    delete_worktree,
    get_worktrees_info_concurrent,
    list_worktrees_concurrent,
    where_worktree,
)
from git_phantom.worktree import list_worktrees as list_managed_worktrees

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("git") is None, reason="requires git"),
]


@pytest.fixture
def executor():
    return create_real_executor()


@pytest.fixture
def repo_root(phantom_repo):
    return str(Path(phantom_repo.working_dir).resolve())


def managed(repo_root, name):
    return str(Path(repo_root) / ".git" / "phantom" / "worktrees" / name)


class TestRealRepository:
    """Test git operations against a real repository."""

    @pytest.mark.asyncio
    async def test_git_root_from_linked_worktree(self, executor, repo_root):
        assert await get_git_root(executor, managed(repo_root, "feature-a")) == repo_root
        assert await get_git_root(executor, repo_root) == repo_root

    @pytest.mark.asyncio
    async def test_not_a_repository(self, executor, temp_dir):
        outside = temp_dir / "plain"
        outside.mkdir()

        assert await is_inside_work_tree(executor, str(outside)) is False
        assert await GitExecutor(executor, cwd=str(outside)).is_in_git_repo() is False

    @pytest.mark.asyncio
    async def test_list_all_worktrees(self, executor, repo_root):
        worktrees = await list_worktrees(executor, repo_root)

        by_name = {wt.name: wt for wt in worktrees}
        assert by_name["test_repo"].branch == "main"
        assert by_name["feature-a"].branch == "feature-a"
        assert by_name["detached"].is_detached is True
        assert by_name["detached"].branch is None
        assert by_name["outside-worktree"].branch == "outside"

    @pytest.mark.asyncio
    async def test_list_managed_worktrees(self, executor, repo_root):
        result = await list_worktrees_concurrent(executor, repo_root)

        assert result.message is None
        assert sorted((info.name, info.branch, info.is_clean) for info in result.worktrees) == [
            ("detached", None, True),
            ("feature-a", "feature-a", True),
            ("feature-b", "feature-b", False),
        ]

    @pytest.mark.asyncio
    async def test_sequential_and_concurrent_listing_agree(self, executor, repo_root):
        sequential = await list_managed_worktrees(executor, repo_root)
        concurrent = await list_worktrees_concurrent(executor, repo_root)

        assert sequential == concurrent

    @pytest.mark.asyncio
    async def test_bulk_status(self, executor, repo_root, temp_dir):
        paths = [
            managed(repo_root, "feature-a"),
            managed(repo_root, "feature-b"),
            str(temp_dir),
        ]

        results = await check_worktrees_status_concurrent(executor, paths)

        assert [index for index, _ in results] == [0, 1, 2]
        assert results[0][1].is_clean is True
        assert results[1][1].is_clean is False
        assert results[2][0] == 2
        assert isinstance(results[2][1].error, GitError)

    @pytest.mark.asyncio
    async def test_bulk_info(self, executor, repo_root):
        infos = await get_worktrees_info_concurrent(executor, repo_root, ["feature-b", "bad name", "detached"])

        assert [(info.name, info.branch, info.is_clean) for info in infos] == [
            ("feature-b", "feature-b", False),
            ("detached", "(detached HEAD)", True),
        ]

    def test_where(self, repo_root):
        assert where_worktree(repo_root, "feature-a") == managed(repo_root, "feature-a")


class TestDeleteRealWorktree:
    """Test deletion against a real repository."""

    @pytest.mark.asyncio
    async def test_delete_clean_worktree(self, executor, repo_root):
        result = await delete_worktree(executor, repo_root, "feature-a")

        assert result.branch_deleted is True
        assert not Path(managed(repo_root, "feature-a")).exists()
        assert await branch_exists(executor, repo_root, "feature-a") is False

    @pytest.mark.asyncio
    async def test_dirty_worktree_needs_force(self, executor, repo_root):
        with pytest.raises(WorktreeDirtyError):
            await delete_worktree(executor, repo_root, "feature-b")
        assert Path(managed(repo_root, "feature-b")).exists()

        result = await delete_worktree(executor, repo_root, "feature-b", force=True)

        assert result.had_uncommitted_changes is True
        assert not Path(managed(repo_root, "feature-b")).exists()

    @pytest.mark.asyncio
    async def test_delete_detached_worktree_keeps_going_without_branch(self, executor, repo_root):
        result = await delete_worktree(executor, repo_root, "detached")

        assert result.branch_deleted is False
        assert result.message == "Deleted worktree 'detached'"
