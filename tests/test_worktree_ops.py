"""Tests for managed worktree paths, validation, lookup and deletion"""
import os

import pytest

from git_phantom.constants import DEFAULT_PHANTOM_DIR
from git_phantom.exceptions import GitError, InvalidWorktreeNameError, WorktreeDirtyError, WorktreeNotFoundError
from git_phantom.worktree import (
    delete_worktree,
    get_phantom_directory,
    get_worktree_branch,
    get_worktree_info,
    get_worktree_path,
    get_worktree_status,
    get_worktree_status_details,
    validate_worktree_exists,
    validate_worktree_name,
    where_worktree,
)
from git_phantom.worktree.paths import managed_worktree_name


@pytest.fixture
def phantom_root(temp_dir):
    """A fake repository root with two managed worktree directories."""
    phantom_dir = temp_dir / DEFAULT_PHANTOM_DIR
    (phantom_dir / "feature").mkdir(parents=True)
    (phantom_dir / "team" / "nested").mkdir(parents=True)
    return temp_dir


class TestPaths:
    """Test managed directory layout."""

    def test_default_directory(self):
        assert get_phantom_directory("/repo") == "/repo/.git/phantom/worktrees"

    def test_relative_custom_directory(self):
        assert get_phantom_directory("/repo", "../worktrees") == "/repo/../worktrees"

    def test_absolute_custom_directory(self):
        assert get_phantom_directory("/repo", "/srv/worktrees") == "/srv/worktrees"

    def test_worktree_path(self):
        assert get_worktree_path("/repo", "feature") == "/repo/.git/phantom/worktrees/feature"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/repo/.git/phantom/worktrees/feature", "feature"),
            ("/repo/.git/phantom/worktrees/team/nested", "team/nested"),
            ("/repo/.git/phantom/worktrees", None),
            ("/repo/.git/phantom/worktrees-other/feature", None),
            ("/repo", None),
        ],
    )
    def test_managed_worktree_name(self, path, expected):
        assert managed_worktree_name(path, "/repo/.git/phantom/worktrees") == expected

    def test_managed_name_follows_symlinks(self, phantom_root):
        link = phantom_root / "link"
        link.symlink_to(phantom_root)

        name = managed_worktree_name(
            str(link / DEFAULT_PHANTOM_DIR / "feature"), str(phantom_root / DEFAULT_PHANTOM_DIR)
        )
        assert name == "feature"


class TestValidation:
    """Test worktree name validation."""

    @pytest.mark.parametrize("name", ["feature", "feature-1", "fix_bug", "v1.2", "team/feature"])
    def test_valid_names(self, name):
        validate_worktree_name(name)

    @pytest.mark.parametrize(
        "name,reason",
        [
            ("", "empty"),
            ("   ", "empty"),
            ("../escape", "'..'"),
            ("a..b", "'..'"),
            ("has space", "only letters"),
            ("semi;colon", "only letters"),
            ("x" * 256, "exceed"),
        ],
    )
    def test_invalid_names(self, name, reason):
        with pytest.raises(InvalidWorktreeNameError, match=reason):
            validate_worktree_name(name)

    def test_exists(self, phantom_root):
        path = validate_worktree_exists(str(phantom_root), "feature")
        assert path == str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")

    def test_missing(self, phantom_root):
        with pytest.raises(WorktreeNotFoundError, match="Worktree 'missing' not found"):
            validate_worktree_exists(str(phantom_root), "missing")

    def test_where(self, phantom_root):
        assert where_worktree(str(phantom_root), "team/nested") == str(
            phantom_root / DEFAULT_PHANTOM_DIR / "team" / "nested"
        )

    def test_where_custom_directory(self, temp_dir):
        (temp_dir / "wts" / "feature").mkdir(parents=True)
        assert where_worktree(str(temp_dir), "feature", "wts") == os.path.join(str(temp_dir), "wts", "feature")


class TestStatusChecks:
    """Test single-worktree status checks."""

    @pytest.mark.asyncio
    async def test_status_strict_raises(self, verified_mock):
        verified_mock.expect("git").with_args("status", "--porcelain").in_dir("/w").returns_output(
            "", "fatal: not a git repository\n", 128
        )

        with pytest.raises(GitError):
            await get_worktree_status(verified_mock, "/w")

    @pytest.mark.asyncio
    async def test_status_details(self, verified_mock):
        verified_mock.expect("git").with_args("status", "--porcelain").in_dir("/w").returns_success(
            " M a.txt\n?? b.txt\n"
        )

        details = await get_worktree_status_details(verified_mock, "/w")
        assert details.changed_files == 2
        assert details.modified and details.untracked

    @pytest.mark.asyncio
    async def test_branch(self, verified_mock):
        verified_mock.expect("git").with_args("branch", "--show-current").in_dir("/w").returns_success(
            "feature\n"
        )
        assert await get_worktree_branch(verified_mock, "/w") == "feature"

    @pytest.mark.asyncio
    async def test_worktree_info_validates_name(self, mock_executor):
        with pytest.raises(InvalidWorktreeNameError):
            await get_worktree_info(mock_executor, "/repo", "bad name")
        assert mock_executor.calls() == []


class TestDeleteWorktree:
    """Test deleting managed worktrees."""

    def expect_status(self, mock, path, output):
        mock.expect("git").with_args("status", "--porcelain").in_dir(path).times(1).returns_success(output)

    @pytest.mark.asyncio
    async def test_delete_clean(self, verified_mock, phantom_root):
        root = str(phantom_root)
        path = str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")
        self.expect_status(verified_mock, path, "")
        verified_mock.expect("git").with_args("worktree", "remove", path).in_dir(root).times(1).returns_success()
        verified_mock.expect("git").with_args("branch", "-D", "feature").in_dir(root).times(1).returns_success()

        result = await delete_worktree(verified_mock, root, "feature")

        assert result.message == "Deleted worktree 'feature' and its branch 'feature'"
        assert result.branch_deleted is True
        assert result.had_uncommitted_changes is False

    @pytest.mark.asyncio
    async def test_dirty_worktree_is_refused(self, verified_mock, phantom_root):
        path = str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")
        self.expect_status(verified_mock, path, " M a.txt\n M b.txt\n")

        with pytest.raises(WorktreeDirtyError) as exc_info:
            await delete_worktree(verified_mock, str(phantom_root), "feature")

        assert exc_info.value.changed_files == 2
        assert "--force" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_force_deletes_dirty_worktree(self, verified_mock, phantom_root):
        root = str(phantom_root)
        path = str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")
        self.expect_status(verified_mock, path, "?? scratch.txt\n")
        verified_mock.expect("git").with_args("worktree", "remove", path).times(1).returns_output(
            "", "fatal: contains modified or untracked files, use --force to delete it\n", 128
        )
        verified_mock.expect("git").with_args("worktree", "remove", "--force", path).times(1).returns_success()
        verified_mock.expect("git").with_args("branch", "-D", "feature").times(1).returns_success()

        result = await delete_worktree(verified_mock, root, "feature", force=True)

        assert result.had_uncommitted_changes is True
        assert result.message.startswith("Warning: Worktree 'feature' had uncommitted changes (1 files)\n")
        assert result.message.endswith("Deleted worktree 'feature' and its branch 'feature'")

    @pytest.mark.asyncio
    async def test_branch_deletion_failure_is_tolerated(self, verified_mock, phantom_root):
        path = str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")
        self.expect_status(verified_mock, path, "")
        verified_mock.expect("git").with_args("worktree", "remove", path).times(1).returns_success()
        verified_mock.expect("git").with_args("branch", "-D", "feature").times(1).returns_output(
            "", "error: branch 'feature' not found.\n", 1
        )

        result = await delete_worktree(verified_mock, str(phantom_root), "feature")

        assert result.branch_deleted is False
        assert result.message == "Deleted worktree 'feature'"

    @pytest.mark.asyncio
    async def test_remove_failure_without_force_is_raised(self, verified_mock, phantom_root):
        path = str(phantom_root / DEFAULT_PHANTOM_DIR / "feature")
        self.expect_status(verified_mock, path, "")
        verified_mock.expect("git").with_args("worktree", "remove", path).times(1).returns_output(
            "", "fatal: is locked\n", 128
        )

        with pytest.raises(GitError, match="is locked"):
            await delete_worktree(verified_mock, str(phantom_root), "feature")

    @pytest.mark.asyncio
    async def test_missing_worktree(self, mock_executor, phantom_root):
        with pytest.raises(WorktreeNotFoundError):
            await delete_worktree(mock_executor, str(phantom_root), "missing")
        assert mock_executor.calls() == []
