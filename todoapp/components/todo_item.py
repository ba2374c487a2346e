from dataclasses import dataclass
from typing import Any, Callable, Optional

from todoapp.models.todo import Category, Priority
from todoapp.schemas.todo import TodoOut

# "Mon DD, YYYY" in English whatever the process locale is
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
COMPLETED_TEXT = "line-through text-muted-foreground"

PRIORITY_TONES = {
    Priority.LOW: "success",
    Priority.MEDIUM: "warning",
    Priority.HIGH: "destructive",
}

PRIORITY_COLORS = {
    Priority.LOW: "bg-success/10 text-success border-success/20",
    Priority.MEDIUM: "bg-warning/10 text-warning border-warning/20",
    Priority.HIGH: "bg-destructive/10 text-destructive border-destructive/20",
}

CATEGORY_COLORS = {
    Category.PERSONAL: "bg-primary/10 text-primary border-primary/20",
    Category.WORK: "bg-accent/10 text-accent border-accent/20",
    Category.SHOPPING: "bg-chart-3/10 text-chart-3 border-chart-3/20",
    Category.HEALTH: "bg-chart-4/10 text-chart-4 border-chart-4/20",
    Category.OTHER: "bg-muted text-muted-foreground border-border",
}


@dataclass(frozen=True)
class Badge:
    kind: str
    label: str
    css_class: str
    icon: Optional[str] = None


class TodoItem:
    """One row of the task list: derived presentation plus the row's actions.

    Holds no state of its own. The callbacks belong to whoever owns the list;
    their return value (e.g. a coroutine) is handed straight back.
    """

    def __init__(
        self,
        todo: TodoOut,
        on_toggle: Callable[[str, bool], Any],
        on_delete: Callable[[str], Any],
        on_edit: Callable[[TodoOut], Any],
    ):
        self.todo = todo
        self._on_toggle = on_toggle
        self._on_delete = on_delete
        self._on_edit = on_edit

    @property
    def border_tone(self) -> str:
        return PRIORITY_TONES[self.todo.priority]

    @property
    def border_style(self) -> str:
        return f"border-left-color: hsl(var(--{self.border_tone}))"

    @property
    def title_class(self) -> str:
        return f"font-semibold {COMPLETED_TEXT}" if self.todo.completed else "font-semibold"

    @property
    def description_class(self) -> str:
        return f"text-sm mt-1 {COMPLETED_TEXT}" if self.todo.completed else "text-sm mt-1 text-muted-foreground"

    @property
    def show_description(self) -> bool:
        return bool(self.todo.description)

    @property
    def due_label(self) -> Optional[str]:
        if self.todo.due_date is None:
            return None
        due = self.todo.due_date
        return f"{MONTH_ABBREVIATIONS[due.month - 1]} {due.day:02d}, {due.year}"

    @property
    def badges(self) -> list[Badge]:
        todo = self.todo
        out = [
            Badge("priority", todo.priority.value, PRIORITY_COLORS[todo.priority]),
            Badge("category", todo.category.value, CATEGORY_COLORS[todo.category], icon="tag"),
        ]
        due = self.due_label
        if due is not None:
            out.append(Badge("due_date", due, "bg-background", icon="calendar"))
        return out

    def toggle(self, checked: bool):
        return self._on_toggle(self.todo.id, checked)

    def delete(self):
        return self._on_delete(self.todo.id)

    def edit(self):
        return self._on_edit(self.todo)
