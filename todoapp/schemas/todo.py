from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from todoapp.models.todo import Category, Priority


def _clean_title(v):
    if v is None or not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TodoDraft(BaseModel):
    """Fields the editor dialog submits for both create and full update."""

    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date_is_none(cls, v):
        # HTML date inputs submit "" when cleared
        if v == "":
            return None
        return v


class TodoCreate(TodoDraft):
    completed: bool = False
    user_id: Optional[str] = None


class TodoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)

    @field_validator("completed", "priority", "category")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TodoOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    priority: Priority
    category: Category
    due_date: Optional[date] = None
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
