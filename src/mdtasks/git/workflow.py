"""Branch-per-task git workflow, driven through the git and gh CLIs."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import GitError
from ..models import STATUS_PENDING, GitConfig, Task
from ..models.checklist import render_item_line
from ..utils import slugify

if TYPE_CHECKING:
    from ..services import TaskService

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def run_command(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run a command, capturing its output as text."""
    return subprocess.run(args, capture_output=True, text=True, check=False, cwd=cwd)


# --- Naming ---


def branch_name(task: Task, prefix: str = "feature/") -> str:
    """Branch for a task: "<prefix><id>-<slug>", e.g. "feature/001-write-docs"."""
    slug = slugify(task.title)
    if not slug:
        return f"{prefix}{task.id}"
    return f"{prefix}{task.id}-{slug}"


def task_id_from_branch(
    branch: str, prefix: str = "feature/", known_ids: Iterable[str] | None = None
) -> str | None:
    """Recover the task id from a task branch name.

    With ``known_ids`` the longest id that the branch is named after wins, so
    ids containing hyphens resolve. Without it the id is the text up to the
    first hyphen. Returns None for branches outside the prefix.
    """
    if not prefix or not branch.startswith(prefix):
        return None
    rest = branch[len(prefix) :]
    if not rest:
        return None

    if known_ids is not None:
        candidates = [i for i in known_ids if rest == i or rest.startswith(f"{i}-")]
        return max(candidates, key=len) if candidates else None

    return rest.split("-", 1)[0] or None


def commit_message(task: Task) -> str:
    return f"feat: {task.title} (task #{task.id})"


def pr_title(task: Task) -> str:
    return f"{task.title} (task #{task.id})"


def pr_body(task: Task) -> str:
    """Markdown description of a task for a pull request."""
    lines = [
        f"## Task {task.id}: {task.title}",
        "",
        f"- **Status:** {task.status or 'unknown'}",
        f"- **Priority:** {task.priority or 'none'}",
    ]
    if task.tags:
        lines.append(f"- **Tags:** {', '.join(task.tags)}")
    if task.project:
        lines.append(f"- **Project:** {task.project}")
    if task.due:
        lines.append(f"- **Due:** {task.due.isoformat()}")

    if task.checklist:
        done, total = task.progress
        lines.extend(["", f"### Checklist ({done}/{total})", ""])
        lines.extend(render_item_line(item) for item in task.checklist)

    return "\n".join(lines) + "\n"


# --- Workflow ---


@dataclass
class StartResult:
    task: Task
    branch: str
    had_local_changes: bool = False


@dataclass
class WorkflowStatus:
    branch: str
    task_id: str | None
    task: Task | None
    changes: str


class GitWorkflow:
    """
    Run the branch-per-task workflow for a project.

    Task status changes go through TaskService, so they follow the same
    transition rules as the CLI commands. A git failure after a task document
    was written leaves that document as written.
    """

    def __init__(
        self,
        task_service: TaskService,
        git_config: GitConfig | None = None,
        cwd: Path | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.task_service = task_service
        self.config = git_config or GitConfig()
        self.cwd = cwd
        self._runner = runner or run_command

    # --- git plumbing ---

    def _run(self, *args: str) -> str:
        command = list(args)
        logger.debug("Running: %s", " ".join(command))
        try:
            result = self._runner(command, cwd=self.cwd)
        except FileNotFoundError as e:
            raise GitError(f"Command not found: {command[0]}", command=command) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.warning("Command failed (%d): %s", result.returncode, " ".join(command))
            raise GitError(
                f"Command failed: {' '.join(command)}: {stderr}", command=command, stderr=stderr
            )
        return result.stdout or ""

    def _git(self, *args: str) -> str:
        return self._run("git", *args)

    def is_git_repo(self) -> bool:
        try:
            self._git("rev-parse", "--is-inside-work-tree")
        except GitError:
            return False
        return True

    def _require_repo(self) -> None:
        if not self.is_git_repo():
            raise GitError("Not in a git repository")

    def current_branch(self) -> str:
        return self._git("branch", "--show-current").strip()

    def branch_exists(self, name: str) -> bool:
        return bool(self._git("branch", "--list", name).strip())

    def has_uncommitted_changes(self) -> bool:
        return bool(self._git("status", "--porcelain").strip())

    def _task_id_for(self, branch: str) -> str | None:
        known = self.task_service.load().ids()
        return task_id_from_branch(branch, self.config.branch_prefix, known)

    # --- Commands ---

    def start(self, task_id: str) -> StartResult:
        """Create and check out the branch for a task.

        Must be run from the main branch, which is first brought up to date
        (local changes are auto-stashed and restored). A pending task becomes
        active once its branch exists.

        Raises:
            GitError: Not a repository, not on main, branch exists, or a git
                command failed.
            NotFound: If the task does not exist.
        """
        self._require_repo()
        task = self.task_service.get_task(task_id)

        current = self.current_branch()
        if current != self.config.main_branch:
            raise GitError(
                f"Must be on {self.config.main_branch} branch to start a task branch. "
                f"Current branch: {current}"
            )

        had_changes = self.has_uncommitted_changes()
        if had_changes:
            logger.warning("Local changes will be auto-stashed and restored")

        self._git("pull", "--rebase", "--autostash", self.config.remote, self.config.main_branch)

        name = branch_name(task, self.config.branch_prefix)
        if self.branch_exists(name):
            raise GitError(f"Branch '{name}' already exists")

        self._git("checkout", "-b", name)
        logger.info("Created branch %s for task %s", name, task.id)

        if task.status == STATUS_PENDING:
            task = self.task_service.start_task(task.id)

        return StartResult(task=task, branch=name, had_local_changes=had_changes)

    def finish(self, message: str | None = None) -> Task:
        """Mark the current branch's task done, then commit, merge and push.

        The task document is updated before committing so the change is part
        of the merge.
        """
        self._require_repo()
        current = self.current_branch()
        if not current.startswith(self.config.branch_prefix):
            raise GitError(f"Not on a task branch. Current branch: {current}")

        task_id = self._task_id_for(current)
        if task_id is None:
            raise GitError(f"Cannot find a task for branch '{current}'")

        task = self.task_service.mark_done(task_id)

        self._git("add", ".")
        self._git("commit", "-m", message or commit_message(task))
        self._git("checkout", self.config.main_branch)
        self._git("merge", "--no-ff", current)
        self._git("branch", "-d", current)
        self._git("push", self.config.remote, self.config.main_branch)
        logger.info("Finished task %s (merged %s)", task.id, current)
        return task

    def status(self) -> WorkflowStatus:
        """Current branch, the task it belongs to (if any) and short git status."""
        self._require_repo()
        current = self.current_branch()

        task_id = None
        task = None
        if current.startswith(self.config.branch_prefix):
            collection = self.task_service.load()
            task_id = task_id_from_branch(current, self.config.branch_prefix, collection.ids())
            if task_id is not None:
                task = collection.get(task_id)
            else:
                task_id = task_id_from_branch(current, self.config.branch_prefix)

        changes = self._git("status", "--short")
        return WorkflowStatus(branch=current, task_id=task_id, task=task, changes=changes)

    def create_pull_request(self, task_id: str, draft: bool = False) -> str:
        """Push the task's branch and open a pull request with gh.

        Returns the pull request URL printed by gh.
        """
        self._require_repo()
        task = self.task_service.get_task(task_id)
        name = branch_name(task, self.config.branch_prefix)
        if not self.branch_exists(name):
            raise GitError(f"Branch '{name}' does not exist; run git-start first")

        self._git("push", "-u", self.config.remote, name)

        command = [
            "gh",
            "pr",
            "create",
            "--title",
            pr_title(task),
            "--body",
            pr_body(task),
            "--base",
            self.config.main_branch,
            "--head",
            name,
        ]
        if draft:
            command.append("--draft")

        url = self._run(*command).strip()
        logger.info("Opened pull request for task %s: %s", task.id, url)
        return url
