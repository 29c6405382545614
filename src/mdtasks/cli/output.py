"""Colorful CLI output helpers."""

import sys
from collections.abc import Iterable

from ..models import Task

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗
WARN = "!"

STATUS_COLORS = {
    "pending": YELLOW,
    "active": BLUE,
    "done": GREEN,
}


def _supports_color() -> bool:
    """Check if terminal supports color output."""
    # Check if stdout is a TTY
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return True


def _colorize(text: str, color: str) -> str:
    """Apply color to text if terminal supports it."""
    if _supports_color():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Print success message with green checkmark."""
    check = _colorize(CHECK, GREEN)
    print(f"{check} {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    bullet = _colorize(BULLET, YELLOW)
    print(f"{bullet} {message}")


def warning(message: str) -> None:
    """Print warning message to stderr."""
    mark = _colorize(WARN, YELLOW)
    print(f"{mark} {message}", file=sys.stderr)


def header(message: str) -> None:
    """Print header message in blue."""
    print(_colorize(message, BLUE))


def error(message: str) -> None:
    """Print error message with red cross."""
    cross = _colorize(CROSS, RED)
    print(f"{cross} {message}", file=sys.stderr)


# --- Task rendering ---


def _status_text(task: Task) -> str:
    status = task.status or "unknown"
    return _colorize(f"{status:<10}", STATUS_COLORS.get(status, DIM))


def _progress_text(task: Task) -> str:
    done, total = task.progress
    return f"[{done}/{total}]" if total else ""


def task_table(tasks: Iterable[Task]) -> None:
    """Print tasks as an aligned table: id, status, priority, title, progress."""
    tasks = list(tasks)
    id_width = max([2, *(len(t.id) for t in tasks)])

    header(f"{'ID':<{id_width}}  {'STATUS':<10}  {'PRIORITY':<8}  TITLE")
    print("-" * (id_width + 40))
    for task in tasks:
        priority = task.priority or "-"
        line = f"{task.id:<{id_width}}  {_status_text(task)}  {priority:<8}  {task.title}"
        progress = _progress_text(task)
        if progress:
            line = f"{line} {_colorize(progress, DIM)}"
        print(line)


def checklist_lines(task: Task) -> None:
    """Print checklist items with their 1-based positions."""
    if not task.checklist:
        print("  No checklist items.")
        return
    for position, item in enumerate(task.checklist, start=1):
        mark = _colorize(CHECK, GREEN) if item.done else " "
        print(f"  {position:>2}. [{mark}] {item.text}")


def task_detail(task: Task) -> None:
    """Print all fields of a task followed by its body."""
    header(f"Task {task.id}: {task.title}")
    print(f"Status:    {task.status or 'unknown'}")
    print(f"Priority:  {task.priority or '-'}")
    if task.tags:
        print(f"Tags:      {', '.join(task.tags)}")
    if task.project:
        print(f"Project:   {task.project}")
    for name in ("created", "due", "started", "completed"):
        value = getattr(task, name)
        if value is not None:
            print(f"{name.capitalize() + ':':<10} {value.isoformat()}")
    for key, value in task.extra_fields.items():
        print(f"{key + ':':<10} {value}")
    if task.source:
        print(_colorize(f"File:      {task.source}", DIM))

    body = task.body.strip("\r\n")
    if body:
        print()
        print(body)
