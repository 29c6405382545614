"""Filesystem-based repository for task storage."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

import frontmatter

from ..collection import TaskCollection, load_collection
from ..document import serialize
from ..errors import MalformedDocument, MdtasksError
from ..models import Task
from ..utils import task_filename

logger = logging.getLogger(__name__)


class FilesystemRepository:
    """
    Repository for task files stored on the filesystem.

    Tasks are stored as individual .md files with YAML front matter, anywhere
    below the task root. Markdown files without front matter (a README, for
    example) are not task documents and are ignored.
    """

    SUFFIX = ".md"

    def __init__(self, task_root: Path) -> None:
        """
        Initialize repository.

        Args:
            task_root: Path to the tasks directory (e.g., tasks/)
        """
        self.task_root = task_root

    def ensure_directory(self) -> None:
        """Create the tasks directory if it doesn't exist."""
        self.task_root.mkdir(parents=True, exist_ok=True)

    # --- Task Operations ---

    def iter_documents(
        self, problems: list[MdtasksError] | None = None
    ) -> Iterator[tuple[str, str]]:
        """Yield (source, text) for every task document, in path order.

        Files that cannot be read as UTF-8 text are skipped and, when a
        ``problems`` list is given, reported in it as MalformedDocument.
        """
        for filepath in self._iter_task_files():
            try:
                text = self._read(filepath)
            except UnicodeDecodeError as e:
                problem = MalformedDocument(
                    f"not valid UTF-8 text (byte {e.start})", source=str(filepath)
                )
            except OSError as e:
                problem = MalformedDocument(
                    f"cannot read document: {e.strerror or e}", source=str(filepath)
                )
            else:
                problem = None

            if problem is not None:
                logger.warning("Skipping unreadable task document: %s", problem)
                if problems is not None:
                    problems.append(problem)
                continue

            if not frontmatter.checks(text):
                logger.debug("Skipping %s: no front matter", filepath)
                continue
            yield str(filepath), text

    def load(self) -> TaskCollection:
        """Load every task document below the task root."""
        if not self.task_root.exists():
            logger.debug("Task root %s does not exist", self.task_root)
            return TaskCollection()
        unreadable: list[MdtasksError] = []
        collection = load_collection(self.iter_documents(unreadable))
        collection.problems.extend(unreadable)
        return collection

    def get_filepath(self, task: Task) -> Path:
        """Get the filesystem path for a task.

        Loaded tasks keep the path they were read from; new tasks get
        "<id>-<slug>.md" in the task root.
        """
        if task.source:
            return Path(task.source)
        return self.task_root / task_filename(task.id, task.title)

    def save(self, task: Task) -> Task:
        """
        Write a task document.

        The file is replaced atomically so readers never see a partial
        document. Returns the task with ``source`` set to its path.
        """
        filepath = self.get_filepath(task)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        self._write(filepath, serialize(task))
        logger.info("Saved task %s to %s", task.id, filepath)

        if task.source != str(filepath):
            task = task.model_copy(update={"source": str(filepath)})
        return task

    def delete(self, task: Task) -> None:
        """Delete a task file from the filesystem."""
        filepath = self.get_filepath(task)
        if filepath.exists():
            filepath.unlink()
            logger.info("Deleted task %s (%s)", task.id, filepath)

    # --- Private Methods ---

    def _iter_task_files(self) -> Iterator[Path]:
        """Iterate over all .md files below the task root."""
        yield from sorted(p for p in self.task_root.rglob(f"*{self.SUFFIX}") if p.is_file())

    def _read(self, filepath: Path) -> str:
        # newline="" keeps \r\n intact for byte-stable round trips
        with filepath.open(encoding="utf-8", newline="") as f:
            return f.read()

    def _write(self, filepath: Path, text: str) -> None:
        # The temp file is created 0600; the document keeps its own mode
        if filepath.exists():
            mode = filepath.stat().st_mode & 0o777
        else:
            mode = _new_file_mode()

        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="",
                dir=filepath.parent,
                prefix=f".{filepath.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_path = Path(f.name)
                f.write(text)
            os.chmod(temp_path, mode)
            os.replace(temp_path, filepath)
        finally:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)


def _new_file_mode() -> int:
    """Mode open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
