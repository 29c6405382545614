"""Git branch and pull request workflow for tasks."""

from .workflow import (
    GitWorkflow,
    StartResult,
    WorkflowStatus,
    branch_name,
    commit_message,
    pr_body,
    pr_title,
    run_command,
    task_id_from_branch,
)

__all__ = [
    "GitWorkflow",
    "StartResult",
    "WorkflowStatus",
    "branch_name",
    "commit_message",
    "pr_body",
    "pr_title",
    "run_command",
    "task_id_from_branch",
]
