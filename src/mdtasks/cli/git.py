"""Git workflow commands."""

from __future__ import annotations

import argparse

from ..git import GitWorkflow
from .context import CliContext
from .output import header, info, success, warning


def _workflow(ctx: CliContext) -> GitWorkflow:
    return GitWorkflow(
        ctx.task_service,
        ctx.config_service.get_config().git,
        cwd=ctx.project_root,
    )


def run_git_start(ctx: CliContext, args: argparse.Namespace) -> int:
    result = _workflow(ctx).start(args.id)
    if result.had_local_changes:
        warning("Local changes were auto-stashed and restored")
    success(f"Started work on task {result.task.id} in branch '{result.branch}'")
    info(f"Task: {result.task.title} ({result.task.status})")
    return 0


def run_git_finish(ctx: CliContext, args: argparse.Namespace) -> int:
    task = _workflow(ctx).finish(args.message)
    success(f"Finished task {task.id}: {task.title}")
    info("Changes merged and pushed")
    return 0


def run_git_status(ctx: CliContext, args: argparse.Namespace) -> int:
    status = _workflow(ctx).status()
    header(f"Current branch: {status.branch}")
    if status.task is not None:
        info(f"Current task: {status.task.id} - {status.task.title}")
        info(f"Status: {status.task.status or 'unknown'}")
        info(f"Priority: {status.task.priority or 'none'}")
    elif status.task_id is not None:
        warning(f"Task {status.task_id} not found in tasks directory")
    else:
        info("No active task branch")

    print()
    header("Git status:")
    print(status.changes.rstrip("\n") or "  clean")
    return 0


def run_git_pr(ctx: CliContext, args: argparse.Namespace) -> int:
    url = _workflow(ctx).create_pull_request(args.id, draft=args.draft)
    success(f"Opened pull request: {url}")
    return 0
