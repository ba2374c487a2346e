"""Search and filter predicates for the task list view.

A todo is shown when it passes all four checks: search text, priority,
category and completion status. ``"all"`` disables a check.
"""
from dataclasses import dataclass
from typing import Iterable

from todoapp.schemas.todo import TodoOut

ALL = "all"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUSES = (ALL, STATUS_ACTIVE, STATUS_COMPLETED)


@dataclass(frozen=True)
class TodoFilters:
    search: str = ""
    priority: str = ALL
    category: str = ALL
    status: str = ALL

    @property
    def narrowing(self) -> bool:
        """True when search, priority or category hides something. Status tabs do not count."""
        return bool(self.search) or self.priority != ALL or self.category != ALL


def matches_search(todo: TodoOut, search: str) -> bool:
    needle = search.lower()
    if needle in todo.title.lower():
        return True
    return todo.description is not None and needle in todo.description.lower()


def matches_status(todo: TodoOut, status: str) -> bool:
    if status == ALL:
        return True
    if status == STATUS_COMPLETED:
        return todo.completed
    return not todo.completed


def matches(todo: TodoOut, filters: TodoFilters) -> bool:
    return (
        matches_search(todo, filters.search)
        and (filters.priority == ALL or todo.priority == filters.priority)
        and (filters.category == ALL or todo.category == filters.category)
        and matches_status(todo, filters.status)
    )


def filter_todos(todos: Iterable[TodoOut], filters: TodoFilters) -> list[TodoOut]:
    return [todo for todo in todos if matches(todo, filters)]
