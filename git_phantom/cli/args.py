"""Command-line argument parsing for git-phantom."""

import argparse

from git_phantom.__version__ import __version__


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="git-phantom",
        description="Manage ephemeral git worktrees",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-phantom {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--log-file", action="store_true", help="Also write a debug log to ~/.git-phantom/git-phantom.log"
    )
    parser.add_argument(
        "--worktrees-dir",
        metavar="DIR",
        help="Directory managed worktrees live in (default: .git/phantom/worktrees)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List managed worktrees")
    list_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    list_parser.add_argument("--names", action="store_true", help="Print only worktree names")
    list_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Check worktree status one at a time instead of in parallel",
    )

    where_parser = subparsers.add_parser("where", help="Print the path of a worktree")
    where_parser.add_argument("name", help="Worktree name")

    delete_parser = subparsers.add_parser("delete", help="Delete a worktree and its branch")
    delete_parser.add_argument("name", help="Worktree name")
    delete_parser.add_argument(
        "--force", action="store_true", help="Delete even with uncommitted changes"
    )

    return parser.parse_args(argv)
