"""CLI entry point for mdtasks."""

import argparse
import logging
from pathlib import Path

from . import __version__
from .config import Settings
from .errors import MdtasksError
from .logging import setup_logging

logger = logging.getLogger(__name__)


def _add_id(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", help="Task ID")


def _add_task_commands(subparsers: argparse._SubParsersAction) -> None:
    from .cli import tasks

    p = subparsers.add_parser("list", help="List tasks")
    p.add_argument("-s", "--status", help="Filter by status (pending, active, done, ...)")
    p.add_argument("-t", "--tag", action="append", help="Filter by tag (repeatable, any match)")
    p.add_argument("-p", "--priority", help="Filter by priority (low, medium, high)")
    p.add_argument("-j", "--project", help="Filter by project")
    p.add_argument(
        "-q", "--query", help='Filter expression, e.g. "tag:api status:active login"'
    )
    p.set_defaults(handler=tasks.run_list)

    p = subparsers.add_parser("show", help="Show task details")
    _add_id(p)
    p.set_defaults(handler=tasks.run_show)

    p = subparsers.add_parser("add", help="Add a new task")
    p.add_argument("title", help="Task title")
    p.add_argument("-r", "--priority", help="Task priority (low, medium, high)")
    p.add_argument("-s", "--status", help="Task status (pending, active, done)")
    p.add_argument("-g", "--tags", nargs="+", help="Tags (space- or comma-separated)")
    p.add_argument("-j", "--project", help="Project name")
    p.add_argument("-d", "--due", help="Due date (YYYY-MM-DD)")
    p.add_argument("-n", "--notes", help="Initial notes")
    p.set_defaults(handler=tasks.run_add)

    p = subparsers.add_parser("done", help="Mark a task as done")
    _add_id(p)
    p.set_defaults(handler=tasks.run_done)

    p = subparsers.add_parser("start", help="Mark a task as active")
    _add_id(p)
    p.set_defaults(handler=tasks.run_start)

    p = subparsers.add_parser("checklist", help="Add an item to a task's checklist")
    _add_id(p)
    p.add_argument("item", help="Checklist item text")
    p.set_defaults(handler=tasks.run_checklist_add)

    p = subparsers.add_parser("subtasks", help="List checklist items of a task")
    _add_id(p)
    p.set_defaults(handler=tasks.run_subtasks)

    for name, done in (("check", True), ("uncheck", False)):
        p = subparsers.add_parser(name, help=f"{name.capitalize()} a checklist item")
        _add_id(p)
        p.add_argument("position", type=int, help="1-based item position")
        p.set_defaults(handler=tasks.run_check, done=done)

    for field, help_text in (
        ("title", "New title"),
        ("priority", "New priority (low, medium, high)"),
        ("tags", "New tags (comma-separated, empty to clear)"),
        ("due", "New due date (YYYY-MM-DD, empty to clear)"),
        ("project", "New project (empty to clear)"),
    ):
        p = subparsers.add_parser(f"set-{field}", help=f"Set task {field}")
        _add_id(p)
        p.add_argument("value", help=help_text)
        p.set_defaults(handler=tasks.run_set_field, field=field)

    p = subparsers.add_parser("set-status", help="Set task status")
    _add_id(p)
    p.add_argument("value", help="New status (pending, active, done, or custom)")
    p.set_defaults(handler=tasks.run_set_status)

    p = subparsers.add_parser("add-note", help="Add a note to a task")
    _add_id(p)
    p.add_argument("note", help="Note text")
    p.set_defaults(handler=tasks.run_add_note)

    p = subparsers.add_parser("cleanup", help="Delete the files of done tasks")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(handler=tasks.run_cleanup)

    p = subparsers.add_parser("problems", help="Report task documents that failed to load")
    p.set_defaults(handler=tasks.run_problems)


def _add_git_commands(subparsers: argparse._SubParsersAction) -> None:
    from .cli import git

    p = subparsers.add_parser("git-start", help="Create a git branch for a task")
    _add_id(p)
    p.set_defaults(handler=git.run_git_start)

    p = subparsers.add_parser("git-finish", help="Finish the task branch and merge it")
    p.add_argument("message", nargs="?", default=None, help="Commit message")
    p.set_defaults(handler=git.run_git_finish)

    p = subparsers.add_parser("git-status", help="Show git status and current task")
    p.set_defaults(handler=git.run_git_status)

    p = subparsers.add_parser("git-pr", help="Open a pull request for a task branch")
    _add_id(p)
    p.add_argument("--draft", action="store_true", help="Open as a draft")
    p.set_defaults(handler=git.run_git_pr)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mdtasks",
        description="Markdown task manager with YAML front matter",
    )
    parser.add_argument(
        "--task-root",
        type=Path,
        default=None,
        help="Path to project root containing mdtasks.yml (default: current directory)",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate default mdtasks.yml config and task directory and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    _add_task_commands(subparsers)
    _add_git_commands(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.task_root:
        settings_kwargs["project_root"] = args.task_root
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    # Setup logging based on verbosity
    setup_logging(settings.verbose, settings.log_file)

    # Handle --generate command
    if args.generate:
        from .cli.generate import run_generate

        raise SystemExit(run_generate(settings.project_root))

    if args.command is None:
        parser.print_help()
        raise SystemExit(1)

    from .cli.context import CliContext
    from .cli.output import error, warning

    ctx = CliContext.from_settings(settings)
    ctx.config_service.get_config()
    if ctx.config_service.has_config_error and args.command != "problems":
        warning(f"{ctx.config_service.config_error} (using defaults)")

    try:
        exit_code = args.handler(ctx, args)
    except MdtasksError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        error(str(e))
        exit_code = 1

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
