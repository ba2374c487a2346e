import base64
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

import todoapp.config as _cfg
from todoapp.client.backend import BackendClient
from todoapp.client.errors import BackendError
from todoapp.components.todo_item import TodoItem
from todoapp.controller import AUTH_PATH, Notification, TodoListController
from todoapp.filters import ALL, STATUSES
from todoapp.models.todo import Category, Priority
from todoapp.schemas.todo import TodoDraft

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], include_in_schema=False)

TEMPLATES = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

ACCESS_COOKIE = "access_token"
FLASH_COOKIE = "flash"


def _backend_client(request: Request) -> BackendClient:
    if _cfg.BACKEND_URL:
        return BackendClient(_cfg.BACKEND_URL)
    # no remote backend configured: talk to the API routes of this same app.
    # A crashing route must come back as its 500 response, not as a raised exception.
    return BackendClient(transport=httpx.ASGITransport(app=request.app, raise_app_exceptions=False))


def _encode_flash(notifications: list[Notification]) -> str:
    raw = json.dumps([[n.title, n.description, n.variant] for n in notifications])
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def _read_flash(request: Request) -> list[Notification]:
    value = request.cookies.get(FLASH_COOKIE)
    if not value:
        return []
    try:
        raw = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
        return [Notification(*item) for item in json.loads(raw)]
    except (ValueError, TypeError):
        logger.debug("ignoring malformed flash cookie")
        return []


def _safe_next(next_url: Optional[str]) -> str:
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/"


class _PageContext:
    """Where the controller's notifications and navigation land during one request."""

    def __init__(self):
        self.notifications: list[Notification] = []
        self.redirect_to: Optional[str] = None
        # true when the session check failed without the backend rejecting the token
        self.keep_credentials = False

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def navigate(self, path: str) -> None:
        self.redirect_to = path

    def redirect(self, default: str) -> RedirectResponse:
        target = self.redirect_to or default
        resp = RedirectResponse(target, status_code=303)
        if self.notifications:
            resp.set_cookie(FLASH_COOKIE, _encode_flash(self.notifications), httponly=True, samesite="lax", secure=_cfg.COOKIE_SECURE)
        if target == AUTH_PATH and not self.keep_credentials:
            resp.delete_cookie(ACCESS_COOKIE)
        return resp


@asynccontextmanager
async def _todo_page(request: Request):
    page = _PageContext()
    async with _backend_client(request) as client:
        token = request.cookies.get(ACCESS_COOKIE)
        if token:
            client.auth.set_session(token)
        async with TodoListController(client, page.notify, page.navigate) as controller:
            page.keep_credentials = controller.session_check_failed
            yield controller, page


def _row(controller: TodoListController, todo) -> TodoItem:
    return TodoItem(todo, on_toggle=controller.toggle_todo, on_delete=controller.delete_todo, on_edit=controller.open_editor)


def _draft_from_form(page: _PageContext, **fields) -> Optional[TodoDraft]:
    try:
        return TodoDraft(**fields)
    except ValidationError as exc:
        message = "; ".join(err["msg"] for err in exc.errors())
        page.notify(Notification("Error", message, "destructive"))
        return None


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, q: str = "", priority: str = ALL, category: str = ALL, status: str = ALL, new: bool = False, edit: Optional[str] = None):
    async with _todo_page(request) as (controller, page):
        if page.redirect_to:
            return page.redirect("/")
        controller.set_filters(q, priority, category, status if status in STATUSES else ALL)
        if new:
            controller.open_editor()
        elif edit:
            todo = controller.find_todo(edit)
            if todo is None:
                page.notify(Notification("Error", "Todo not found", "destructive"))
            else:
                _row(controller, todo).edit()
        ctx = {
            "controller": controller,
            "items": [_row(controller, todo) for todo in controller.filtered_todos],
            "notifications": _read_flash(request) + page.notifications,
            "priorities": list(Priority),
            "categories": list(Category),
            "statuses": STATUSES,
            "current_url": str(request.url.path) + (f"?{request.url.query}" if request.url.query else ""),
        }
        resp = TEMPLATES.TemplateResponse(request, "index.html", ctx)
        resp.delete_cookie(FLASH_COOKIE)
        return resp


@router.get("/auth", response_class=HTMLResponse)
async def auth_page(request: Request, mode: str = "signin"):
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        async with _backend_client(request) as client:
            client.auth.set_session(token)
            try:
                session = await client.auth.get_session()
            except BackendError as exc:
                logger.warning("session check failed: %s", exc.message)
                session = None
        if session is not None:
            return RedirectResponse("/", status_code=303)
    resp = TEMPLATES.TemplateResponse(request, "auth.html", {"mode": mode, "error": None, "email": "", "notifications": _read_flash(request)})
    resp.delete_cookie(FLASH_COOKIE)
    return resp


@router.post("/auth", response_class=HTMLResponse)
async def auth_submit(request: Request, email: str = Form(""), password: str = Form(""), mode: str = Form("signin")):
    async with _backend_client(request) as client:
        try:
            if mode == "signup":
                await client.auth.sign_up(email, password)
            session = await client.auth.sign_in(email, password)
        except BackendError as exc:
            ctx = {"mode": mode, "error": exc.message, "email": email, "notifications": []}
            return TEMPLATES.TemplateResponse(request, "auth.html", ctx, status_code=400)
    resp = RedirectResponse("/", status_code=303)
    max_age = max(int(_cfg.ACCESS_TOKEN_EXPIRE_MINUTES * 60), 1)
    resp.set_cookie(ACCESS_COOKIE, session.access_token, httponly=True, samesite="lax", secure=_cfg.COOKIE_SECURE, max_age=max_age)
    return resp


@router.post("/ui/todos")
async def create_todo(request: Request, title: str = Form(""), description: str = Form(""), priority: str = Form(Priority.MEDIUM.value), category: str = Form(Category.PERSONAL.value), due_date: str = Form(""), next_url: str = Form("/", alias="next")):
    async with _todo_page(request) as (controller, page):
        if page.redirect_to:
            return page.redirect("/")
        draft = _draft_from_form(page, title=title, description=description, priority=priority, category=category, due_date=due_date)
        if draft is not None:
            controller.open_editor()
            await controller.save(draft)
        return page.redirect(_safe_next(next_url))


@router.post("/ui/todos/{todo_id}/edit")
async def edit_todo(request: Request, todo_id: str, title: str = Form(""), description: str = Form(""), priority: str = Form(Priority.MEDIUM.value), category: str = Form(Category.PERSONAL.value), due_date: str = Form(""), next_url: str = Form("/", alias="next")):
    async with _todo_page(request) as (controller, page):
        if page.redirect_to:
            return page.redirect("/")
        draft = _draft_from_form(page, title=title, description=description, priority=priority, category=category, due_date=due_date)
        if draft is not None:
            todo = controller.find_todo(todo_id)
            if todo is None:
                page.notify(Notification("Error", "Todo not found", "destructive"))
            else:
                _row(controller, todo).edit()
                await controller.save(draft)
        return page.redirect(_safe_next(next_url))


@router.post("/ui/todos/{todo_id}/toggle")
async def toggle_todo(request: Request, todo_id: str, completed: bool = Form(False), next_url: str = Form("/", alias="next")):
    async with _todo_page(request) as (controller, page):
        if page.redirect_to:
            return page.redirect("/")
        todo = controller.find_todo(todo_id)
        if todo is None:
            await controller.toggle_todo(todo_id, completed)
        else:
            await _row(controller, todo).toggle(completed)
        return page.redirect(_safe_next(next_url))


@router.post("/ui/todos/{todo_id}/delete")
async def delete_todo(request: Request, todo_id: str, next_url: str = Form("/", alias="next")):
    async with _todo_page(request) as (controller, page):
        if page.redirect_to:
            return page.redirect("/")
        todo = controller.find_todo(todo_id)
        if todo is None:
            await controller.delete_todo(todo_id)
        else:
            await _row(controller, todo).delete()
        return page.redirect(_safe_next(next_url))


@router.post("/ui/signout")
async def sign_out(request: Request):
    async with _todo_page(request) as (controller, page):
        if not page.redirect_to:
            await controller.sign_out()
        return page.redirect(AUTH_PATH)
