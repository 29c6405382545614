"""Load a set of task documents into an in-memory collection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .document import parse
from .errors import DuplicateId, MalformedDocument, MdtasksError, NotFound
from .models import Task

logger = logging.getLogger(__name__)


@dataclass
class TaskCollection:
    """Tasks loaded from one directory, plus the documents that could not be used.

    Duplicate ids are skipped with a warning: the first document (in source
    order) keeps the id and every later document claiming it is reported in
    ``problems`` as a DuplicateId.
    """

    tasks: list[Task] = field(default_factory=list)
    problems: list[MdtasksError] = field(default_factory=list)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    def get(self, task_id: str) -> Task:
        """Return the task with the given id.

        Raises:
            NotFound: If no loaded task has that id.
        """
        task_id = str(task_id)
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFound(task_id)

    def ids(self) -> list[str]:
        return [task.id for task in self.tasks]

    def next_id(self) -> str:
        """Next unused numeric id: highest numeric id plus one, zero-padded to 3 digits."""
        highest = 0
        for task in self.tasks:
            if task.id.isascii() and task.id.isdigit():
                highest = max(highest, int(task.id))
        return f"{highest + 1:03d}"


def load_collection(documents: Iterable[tuple[str, str]]) -> TaskCollection:
    """Parse (source, text) pairs into a collection.

    A malformed document is recorded in ``problems`` and does not stop the
    other documents from loading.
    """
    collection = TaskCollection()
    first_source: dict[str, str | None] = {}

    for source, text in documents:
        try:
            task = parse(text, source=source)
        except MalformedDocument as e:
            logger.warning("Skipping malformed task document: %s", e)
            collection.problems.append(e)
            continue

        if task.id in first_source:
            problem = DuplicateId(task.id, source, first_source[task.id])
            logger.warning("%s", problem)
            collection.problems.append(problem)
            continue

        first_source[task.id] = source
        collection.tasks.append(task)

    logger.debug(
        "Loaded %d tasks (%d problems)", len(collection.tasks), len(collection.problems)
    )
    return collection
