"""Task commands: listing, creating and editing task documents."""

from __future__ import annotations

import argparse
import logging
import sys

from ..services import FilterService
from .context import CliContext
from .output import checklist_lines, error, header, info, success, task_detail, task_table

logger = logging.getLogger(__name__)


def run_list(ctx: CliContext, args: argparse.Namespace) -> int:
    """List tasks, optionally filtered. Exit code 0 even when nothing matches."""
    task_filter = FilterService().parse(args.query or "")
    if args.status:
        task_filter.statuses.append(args.status)
    if args.tag:
        task_filter.tags.extend(args.tag)
    if args.priority:
        task_filter.priorities.append(args.priority)
    if args.project:
        task_filter.projects.append(args.project)

    tasks = ctx.task_service.list_tasks(None if task_filter.is_empty else task_filter)
    if not tasks:
        info("No tasks found matching the criteria.")
        return 0

    task_table(tasks)
    return 0


def run_show(ctx: CliContext, args: argparse.Namespace) -> int:
    task_detail(ctx.task_service.get_task(args.id))
    return 0


def run_add(ctx: CliContext, args: argparse.Namespace) -> int:
    tags = ",".join(args.tags) if args.tags else None
    task = ctx.task_service.create_task(
        args.title,
        status=args.status,
        priority=args.priority,
        tags=tags,
        project=args.project,
        due=args.due,
        notes=args.notes,
    )
    success(f"Created task {task.id}: {task.title}")
    info(f"File: {task.source}")
    return 0


def run_done(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.mark_done(args.id)
    success(f"Marked task {task.id} as done")
    return 0


def run_start(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.start_task(args.id)
    success(f"Marked task {task.id} as active")
    return 0


def run_set_status(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.set_status(args.id, args.value)
    success(f"Set status of task {task.id} to {task.status}")
    return 0


def run_set_field(ctx: CliContext, args: argparse.Namespace) -> int:
    """Set one front matter field; the field name comes from the subcommand."""
    task = ctx.task_service.set_field(args.id, args.field, args.value)
    value = task.field_value(args.field)
    if isinstance(value, list):
        shown = ", ".join(value)
    elif value is None:
        shown = "(cleared)"
    else:
        shown = str(value)
    success(f"Set {args.field} of task {task.id}: {shown}")
    return 0


def run_add_note(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.add_note(args.id, args.note)
    success(f"Added note to task {task.id}")
    return 0


# --- Checklist ---


def run_checklist_add(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.add_checklist_item(args.id, args.item)
    success(f"Added checklist item {len(task.checklist)} to task {task.id}")
    return 0


def run_subtasks(ctx: CliContext, args: argparse.Namespace) -> int:
    task = ctx.task_service.get_task(args.id)
    done, total = task.progress
    header(f"Checklist for task {task.id}: {task.title} ({done}/{total})")
    checklist_lines(task)
    return 0


def run_check(ctx: CliContext, args: argparse.Namespace) -> int:
    """Check or uncheck one item; ``args.done`` is set by the subcommand."""
    task = ctx.task_service.toggle_checklist_item(args.id, args.position, args.done)
    item = task.checklist[args.position - 1]
    state = "checked" if item.done else "unchecked"
    success(f"Task {task.id}: {state} item {args.position} ({item.text})")
    return 0


# --- Maintenance ---


def _confirm(question: str) -> bool:
    if not sys.stdin.isatty():
        return False
    print(f"{question} (y/N): ", end="", flush=True)
    try:
        answer = input()
    except EOFError:
        return False
    return answer.strip().lower().startswith("y")


def run_cleanup(ctx: CliContext, args: argparse.Namespace) -> int:
    """Delete the documents of done tasks after confirmation."""
    done_tasks = ctx.task_service.done_tasks()
    if not done_tasks:
        success("No done tasks to clean up")
        return 0

    info(f"Found {len(done_tasks)} done task(s) to clean up:")
    for task in done_tasks:
        print(f"  - {task.id}: {task.title}")

    if not args.yes and not _confirm("Delete these task files?"):
        error("Cleanup cancelled (use --yes to skip the prompt)")
        return 1

    deleted = ctx.task_service.delete_tasks(done_tasks)
    success(f"Cleaned up {deleted} done task(s)")
    return 0


def run_problems(ctx: CliContext, args: argparse.Namespace) -> int:
    """Report documents that could not be loaded. Exit code 1 if there are any."""
    collection = ctx.task_service.load()
    if ctx.config_service.has_config_error:
        error(ctx.config_service.config_error or "")

    if not collection.problems:
        success(f"{len(collection)} task(s) loaded, no problems")
        return 1 if ctx.config_service.has_config_error else 0

    for problem in collection.problems:
        error(str(problem))
    info(f"{len(collection)} task(s) loaded, {len(collection.problems)} problem(s)")
    return 1
