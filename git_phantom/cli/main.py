"""Command-line interface for git-phantom"""

import asyncio
import json
import sys

from rich.console import Console
from rich.table import Table

from git_phantom.config import Config
from git_phantom.exceptions import NotInGitRepositoryError, PhantomError
from git_phantom.executors import CommandExecutor, create_real_executor
from git_phantom.git.commands import get_git_root, is_inside_work_tree
from git_phantom.logging_config import get_logger, setup_logging
from git_phantom.models.worktree import ListWorktreesResult
from git_phantom.worktree import delete_worktree, list_worktrees, list_worktrees_concurrent, where_worktree

from .args import parse_args

console = Console()
logger = get_logger(__name__)


def render_worktree_table(result: ListWorktreesResult) -> Table:
    """Build the table shown by ``git-phantom list``."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Status")
    table.add_column("Path", style="dim")

    for wt in result.worktrees:
        status = "[green]clean[/green]" if wt.is_clean else "[yellow]dirty[/yellow]"
        table.add_row(wt.name, wt.branch or "(detached HEAD)", status, wt.path)
    return table


async def run_command(parsed_args, config: Config, executor: CommandExecutor) -> int:
    """Run the selected subcommand and return the process exit code."""
    if not await is_inside_work_tree(executor):
        raise NotInGitRepositoryError()
    git_root = await get_git_root(executor)
    logger.debug(f"Git root: {git_root}")

    if parsed_args.command == "list":
        if config.sequential:
            result = await list_worktrees(executor, git_root, config.worktrees_directory)
        else:
            result = await list_worktrees_concurrent(executor, git_root, config.worktrees_directory)

        if parsed_args.json:
            print(json.dumps(result.to_dict(), indent=2))
        elif parsed_args.names:
            for wt in result.worktrees:
                print(wt.name)
        elif result.message:
            console.print(result.message)
        else:
            console.print(render_worktree_table(result))
        return 0

    if parsed_args.command == "where":
        print(where_worktree(git_root, parsed_args.name, config.worktrees_directory))
        return 0

    if parsed_args.command == "delete":
        result = await delete_worktree(
            executor,
            git_root,
            parsed_args.name,
            force=parsed_args.force,
            worktrees_directory=config.worktrees_directory,
        )
        console.print(f"[green]{result.message}[/green]")
        return 0

    raise ValueError(f"Unknown command: {parsed_args.command}")


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug, log_file=parsed_args.log_file)

    try:
        config = Config(
            worktrees_directory=parsed_args.worktrees_dir,
            sequential=getattr(parsed_args, "sequential", False),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        return asyncio.run(run_command(parsed_args, config, create_real_executor()))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (PhantomError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
