import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Header, Query
from sqlalchemy.orm import Session
from todoapp.schemas.todo import TodoCreate, TodoUpdate, TodoOut
from todoapp.models.todo import Todo
from todoapp.database import get_db
from todoapp.utils.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])

ORDERABLE_COLUMNS = {
    "created_at": Todo.created_at,
    "updated_at": Todo.updated_at,
    "due_date": Todo.due_date,
    "title": Todo.title,
}


def _owned_todo(db: Session, todo_id: str, user_id: str) -> Todo:
    # rows of other users are invisible, so they answer exactly like missing ones
    todo = db.query(Todo).filter(Todo.id == todo_id, Todo.user_id == user_id).first()
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo


@router.get("/", response_model=list[TodoOut])
def list_todos(order: str = Query("created_at", description="Column to order by"), ascending: bool = False, db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    user, _ = get_current_user(db, authorization, token)
    column = ORDERABLE_COLUMNS.get(order)
    if column is None:
        raise HTTPException(status_code=400, detail=f"Cannot order by '{order}'")
    query = db.query(Todo).filter(Todo.user_id == user.id)
    return query.order_by(column.asc() if ascending else column.desc()).all()


@router.post("/", response_model=TodoOut)
def create_todo(todo: TodoCreate, db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    user, _ = get_current_user(db, authorization, token)
    if todo.user_id is not None and todo.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not allowed to create todos for another user")
    fields = todo.model_dump(exclude={"user_id"})
    new = Todo(**fields, user_id=user.id)
    db.add(new)
    db.commit()
    db.refresh(new)
    logger.info("todo created id=%s user=%s", new.id, user.id)
    return new


@router.patch("/{todo_id}", response_model=TodoOut)
def update_todo(todo_id: str, changes: TodoUpdate, db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    user, _ = get_current_user(db, authorization, token)
    todo = _owned_todo(db, todo_id, user.id)
    fields = changes.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    for name, value in fields.items():
        setattr(todo, name, value)
    db.commit()
    db.refresh(todo)
    logger.info("todo updated id=%s fields=%s", todo.id, ",".join(sorted(fields)))
    return todo


@router.delete("/{todo_id}")
def delete_todo(todo_id: str, db: Session = Depends(get_db), authorization: Optional[str] = Header(None), token: Optional[str] = None):
    user, _ = get_current_user(db, authorization, token)
    todo = _owned_todo(db, todo_id, user.id)
    db.delete(todo)
    db.commit()
    logger.info("todo deleted id=%s user=%s", todo_id, user.id)
    return {"detail": "deleted"}
