"""Shared constants for git-phantom."""

# Managed worktrees live under this path, relative to the repository root
DEFAULT_PHANTOM_DIR = ".git/phantom/worktrees"

# Default timeout for a single git invocation, in seconds
GIT_OPERATION_TIMEOUT = 30.0

GIT = "git"

# git exits with 128 for "not a git repository" and other fatal setup errors
GIT_EXIT_NOT_A_REPOSITORY = 128
# `git show-ref --verify --quiet` exits with 1 when the ref is missing
GIT_EXIT_REF_NOT_FOUND = 1

# Reported as the exit code of a process that was killed by a signal
SIGNAL_EXIT_CODE = -1

MAX_WORKTREE_NAME_LENGTH = 255

BRANCH_REF_PREFIX = "refs/heads/"

DETACHED_HEAD_LABEL = "(detached HEAD)"
UNKNOWN_BRANCH_LABEL = "unknown"
NO_WORKTREES_MESSAGE = "No worktrees found"
