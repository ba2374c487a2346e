import logging
from dataclasses import dataclass
from typing import Callable, Optional

from todoapp.client.auth import AuthUser, INITIAL_SESSION, Session, Subscription
from todoapp.client.backend import BackendClient
from todoapp.client.errors import BackendError
from todoapp.filters import ALL, TodoFilters, filter_todos
from todoapp.schemas.todo import TodoDraft, TodoOut

logger = logging.getLogger(__name__)

TODOS_TABLE = "todos"
AUTH_PATH = "/auth"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"


@dataclass(frozen=True)
class EmptyState:
    message: str
    show_add_button: bool


class TodoListController:
    """Owns one user's task list for the lifetime of a view.

    Every mutation goes to the backend and is followed by a full re-fetch.
    Remote failures never escape: they become destructive notifications.
    Use as an async context manager so the auth subscription is always released.
    """

    def __init__(self, client: BackendClient, notify: Callable[[Notification], None], navigate: Callable[[str], None]):
        self.client = client
        self._notify = notify
        self._navigate = navigate
        self._subscription: Optional[Subscription] = None
        # set when the initial check failed for a reason other than a rejected token
        self.session_check_failed = False

        self.session: Optional[Session] = None
        self.user: Optional[AuthUser] = None
        self.todos: list[TodoOut] = []
        self.loading = True

        self.dialog_open = False
        self.edit_todo: Optional[TodoOut] = None

        self.search_query = ""
        self.filter_priority = ALL
        self.filter_category = ALL
        self.filter_status = ALL

    async def __aenter__(self):
        try:
            await self.start()
        except BaseException:
            self.close()
            raise
        return self

    async def __aexit__(self, *exc_info):
        self.close()

    # session

    async def start(self) -> None:
        self._subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
        try:
            session = await self.client.auth.get_session()
        except BackendError as exc:
            self._error(exc)
            self.session_check_failed = True
            session = None
        await self._on_auth_state_change(INITIAL_SESSION, session)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_auth_state_change(self, event: str, session: Optional[Session]) -> None:
        previous = self.user
        self.session = session
        self.user = session.user if session else None
        logger.debug("auth event=%s user=%s", event, self.user.id if self.user else None)
        if session is None:
            self._navigate(AUTH_PATH)
            return
        if self.user is not None and (previous is None or previous.id != self.user.id):
            await self.fetch_todos()

    async def sign_out(self) -> None:
        await self.client.auth.sign_out()

    # remote operations

    def _error(self, exc: BackendError) -> None:
        logger.warning("remote operation failed: %s", exc.message)
        self._notify(Notification("Error", exc.message, "destructive"))

    def _success(self, description: str) -> None:
        self._notify(Notification("Success", description))

    async def fetch_todos(self) -> None:
        try:
            rows = await self.client.select_all(TODOS_TABLE, order_by="created_at", ascending=False)
            self.todos = [TodoOut.model_validate(row) for row in rows or []]
        except BackendError as exc:
            self._error(exc)
        finally:
            self.loading = False

    async def create_todo(self, draft: TodoDraft) -> bool:
        if self.user is None:
            return False
        record = draft.model_dump(mode="json")
        record["user_id"] = self.user.id
        try:
            await self.client.insert(TODOS_TABLE, record)
        except BackendError as exc:
            self._error(exc)
            return False
        self._success("Todo created successfully!")
        await self.fetch_todos()
        return True

    async def update_todo(self, draft: TodoDraft, todo_id: Optional[str] = None) -> bool:
        target = todo_id or (self.edit_todo.id if self.edit_todo else None)
        if target is None:
            return False
        try:
            await self.client.update(TODOS_TABLE, draft.model_dump(mode="json"), target)
        except BackendError as exc:
            self._error(exc)
            return False
        self._success("Todo updated successfully!")
        self.edit_todo = None
        await self.fetch_todos()
        return True

    async def toggle_todo(self, todo_id: str, completed: bool) -> bool:
        try:
            await self.client.update(TODOS_TABLE, {"completed": completed}, todo_id)
        except BackendError as exc:
            self._error(exc)
            return False
        await self.fetch_todos()
        return True

    async def delete_todo(self, todo_id: str) -> bool:
        try:
            await self.client.delete(TODOS_TABLE, todo_id)
        except BackendError as exc:
            self._error(exc)
            return False
        self._success("Todo deleted successfully!")
        await self.fetch_todos()
        return True

    # editor dialog

    def open_editor(self, todo: Optional[TodoOut] = None) -> None:
        self.edit_todo = todo
        self.dialog_open = True

    def close_editor(self) -> None:
        self.dialog_open = False
        self.edit_todo = None

    def find_todo(self, todo_id: str) -> Optional[TodoOut]:
        return next((t for t in self.todos if t.id == todo_id), None)

    async def save(self, draft: TodoDraft) -> bool:
        if self.edit_todo is not None:
            ok = await self.update_todo(draft)
        else:
            ok = await self.create_todo(draft)
        if ok:
            self.close_editor()
        return ok

    # derived view

    @property
    def filters(self) -> TodoFilters:
        return TodoFilters(
            search=self.search_query,
            priority=self.filter_priority,
            category=self.filter_category,
            status=self.filter_status,
        )

    def set_filters(self, search: str = "", priority: str = ALL, category: str = ALL, status: str = ALL) -> None:
        self.search_query = search
        self.filter_priority = priority
        self.filter_category = category
        self.filter_status = status

    @property
    def filtered_todos(self) -> list[TodoOut]:
        return filter_todos(self.todos, self.filters)

    @property
    def empty_state(self) -> Optional[EmptyState]:
        if self.filtered_todos:
            return None
        if self.filters.narrowing:
            return EmptyState("Try adjusting your filters", show_add_button=False)
        return EmptyState("Create your first todo to get started!", show_add_button=True)
