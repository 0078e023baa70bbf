"""Pytest fixtures for git-phantom tests"""
import tempfile
from pathlib import Path

import git
import pytest

from git_phantom.executors import create_mock_executor


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve so paths compare equal to what git reports (e.g. /tmp symlinks)
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_executor():
    """Create a mock command executor."""
    return create_mock_executor()


@pytest.fixture
def verified_mock():
    """Create a mock command executor that must be fully satisfied by the end of the test."""
    mock = create_mock_executor()
    yield mock
    mock.verify()


def _porcelain_record(path, commit="abc123", branch=None, detached=False, bare=False, prunable=False):
    """Build one record of `git worktree list --porcelain` output."""
    lines = [f"worktree {path}"]
    if commit is not None:
        lines.append(f"HEAD {commit}")
    if branch is not None:
        lines.append(f"branch refs/heads/{branch}")
    if detached:
        lines.append("detached")
    if bare:
        lines.append("bare")
    if prunable:
        lines.append("prunable gitdir file points to non-existent location")
    return "\n".join(lines) + "\n"


@pytest.fixture
def porcelain_record():
    """Builder for one `git worktree list --porcelain` record; join records with "\\n"."""
    return _porcelain_record


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except Exception:
        pass

    yield repo

    repo.close()


@pytest.fixture
def phantom_repo(git_repo):
    """Create a repository with managed worktrees.

    - feature-a: clean, on branch feature-a
    - feature-b: dirty (modified README), on branch feature-b
    - detached: clean, detached HEAD
    Plus one unmanaged worktree next to the repository.
    """
    repo = git_repo
    repo_path = Path(repo.working_dir)
    phantom_dir = repo_path / ".git" / "phantom" / "worktrees"

    repo.git.worktree("add", "-b", "feature-a", str(phantom_dir / "feature-a"))
    repo.git.worktree("add", "-b", "feature-b", str(phantom_dir / "feature-b"))
    repo.git.worktree("add", "--detach", str(phantom_dir / "detached"), repo.head.commit.hexsha)
    repo.git.worktree("add", "-b", "outside", str(repo_path.parent / "outside-worktree"))

    (phantom_dir / "feature-b" / "README.md").write_text("# Modified\n")

    yield repo
