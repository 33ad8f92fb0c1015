"""
Pagina HTML del tablero.

Cada navegador recibe una cookie de sesion y su propio `TaskBoard`; las
acciones son formularios POST que redirigen (303) de vuelta a "/".
"""

import logging
import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable
from uuid import uuid4

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from core.domain.models.task import TaskPriority, TaskStatus
from frontend.api_client import TaskApiClient
from frontend.board import TaskBoard
from frontend.formatting import PRIORITY_COLORS, format_date, from_now
from frontend.state import Adding, ConfirmingDelete, Editing, page_window

logger = logging.getLogger(__name__)

SESSION_COOKIE = "tasks_board"
MAX_BOARDS = int(os.getenv("BOARD_SESSIONS_MAX", "256"))

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["format_date"] = format_date
templates.env.filters["from_now"] = from_now

router = APIRouter(tags=["ui"], include_in_schema=False)


class BoardRegistry:
    """
    Un `TaskBoard` por sesion de navegador, en memoria.

    Se guardan como mucho `max_boards`; al pasarse se descarta la sesion usada
    hace mas tiempo y se cierra su cliente HTTP.
    """

    def __init__(
        self,
        api_factory: Callable[[], TaskApiClient] = TaskApiClient,
        max_boards: int = MAX_BOARDS,
    ) -> None:
        self._api_factory = api_factory
        self._max_boards = max(max_boards, 1)
        self._boards: OrderedDict[str, TaskBoard] = OrderedDict()
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str | None) -> tuple[str, TaskBoard, bool]:
        evicted: list[TaskBoard] = []
        with self._lock:
            if session_id and session_id in self._boards:
                self._boards.move_to_end(session_id)
                return session_id, self._boards[session_id], False
            session_id = uuid4().hex
            board = TaskBoard(self._api_factory())
            self._boards[session_id] = board
            while len(self._boards) > self._max_boards:
                old_id, old_board = self._boards.popitem(last=False)
                logger.info(f"Sesion de tablero descartada: {old_id}")
                evicted.append(old_board)
        for old_board in evicted:
            old_board.close()
        logger.info(f"Nueva sesion de tablero: {session_id}")
        return session_id, board, True

    def close(self) -> None:
        with self._lock:
            boards = list(self._boards.values())
            self._boards.clear()
        for board in boards:
            board.close()

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._boards

    def __len__(self) -> int:
        return len(self._boards)


registry = BoardRegistry()


def get_registry() -> BoardRegistry:
    return registry


@dataclass(slots=True)
class BoardSession:
    id: str
    board: TaskBoard
    is_new: bool


def current_session(
    request: Request, boards: BoardRegistry = Depends(get_registry)
) -> BoardSession:
    session_id, board, is_new = boards.get_or_create(request.cookies.get(SESSION_COOKIE))
    return BoardSession(id=session_id, board=board, is_new=is_new)


def _with_cookie(response: Response, session: BoardSession) -> Response:
    response.set_cookie(SESSION_COOKIE, session.id, httponly=True, samesite="lax")
    return response


def _back(session: BoardSession) -> Response:
    return _with_cookie(RedirectResponse("/", status_code=303), session)


@router.get("/")
def board_page(request: Request, session: BoardSession = Depends(current_session)) -> Response:
    board = session.board
    if session.is_new or board.state.listing is None:
        board.refresh(1)

    state = board.state
    listing = state.listing
    context = {
        "state": state,
        "listing": listing,
        "filters": state.filters,
        "mode": state.mode,
        "adding": isinstance(state.mode, Adding),
        "editing": isinstance(state.mode, Editing),
        "confirming_delete": isinstance(state.mode, ConfirmingDelete),
        "toasts": board.pop_toasts(),
        "priorities": [p.value for p in TaskPriority],
        "statuses": [s.value for s in TaskStatus],
        "selected_priorities": [p.value for p in state.filters.priorities],
        "selected_statuses": [s.value for s in state.filters.statuses],
        "colors": PRIORITY_COLORS,
        "pages": page_window(state.current_page, state.total_pages),
        "today": date.today().isoformat(),
    }
    return _with_cookie(templates.TemplateResponse(request, "board.html", context), session)


@router.post("/ui/search")
def search(search: str = Form(""), session: BoardSession = Depends(current_session)) -> Response:
    session.board.set_search(search)
    return _back(session)


@router.post("/ui/filters/priority/{priority}")
def toggle_priority(
    priority: TaskPriority, session: BoardSession = Depends(current_session)
) -> Response:
    session.board.toggle_priority(priority)
    return _back(session)


@router.post("/ui/filters/status/{status}")
def toggle_status(status: TaskStatus, session: BoardSession = Depends(current_session)) -> Response:
    session.board.toggle_status(status)
    return _back(session)


@router.post("/ui/filters/reset")
def reset_filters(session: BoardSession = Depends(current_session)) -> Response:
    session.board.reset_filters()
    return _back(session)


@router.post("/ui/page/{page}")
def go_to_page(page: int, session: BoardSession = Depends(current_session)) -> Response:
    session.board.go_to_page(page)
    return _back(session)


@router.post("/ui/dialog/add")
def open_add(session: BoardSession = Depends(current_session)) -> Response:
    session.board.open_add()
    return _back(session)


@router.post("/ui/dialog/close")
def close_dialog(session: BoardSession = Depends(current_session)) -> Response:
    session.board.close_dialog()
    return _back(session)


@router.post("/ui/tasks")
def submit_add(
    description: str = Form(""),
    status: str = Form(TaskStatus.TODO.value),
    priority: str = Form(TaskPriority.LOW.value),
    due_date: str = Form(""),
    session: BoardSession = Depends(current_session),
) -> Response:
    session.board.submit_add(
        {"description": description, "status": status, "priority": priority, "due_date": due_date}
    )
    return _back(session)


@router.post("/ui/tasks/{task_id}/edit")
def open_edit(task_id: str, session: BoardSession = Depends(current_session)) -> Response:
    session.board.open_edit(task_id)
    return _back(session)


@router.post("/ui/edit")
def submit_edit(
    description: str = Form(""),
    status: str = Form(TaskStatus.TODO.value),
    priority: str = Form(TaskPriority.LOW.value),
    due_date: str = Form(""),
    session: BoardSession = Depends(current_session),
) -> Response:
    session.board.submit_edit(
        {"description": description, "status": status, "priority": priority, "due_date": due_date}
    )
    return _back(session)


@router.post("/ui/tasks/{task_id}/delete")
def request_delete(task_id: str, session: BoardSession = Depends(current_session)) -> Response:
    session.board.request_delete(task_id)
    return _back(session)


@router.post("/ui/delete/confirm")
def confirm_delete(session: BoardSession = Depends(current_session)) -> Response:
    session.board.confirm_delete()
    return _back(session)


@router.post("/ui/tasks/{task_id}/toggle")
def toggle_done(
    task_id: str,
    done: bool = Form(...),
    session: BoardSession = Depends(current_session),
) -> Response:
    session.board.toggle_done(task_id, done)
    return _back(session)
