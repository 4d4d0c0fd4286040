from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from enum import Enum
from typing import Literal, NamedTuple, Optional
import uuid


UNTITLED_TASK = "Untitled Task"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Category(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    HEALTH = "health"
    LEARNING = "learning"
    OTHER = "other"


class TaskCreate(BaseModel):
    text: str = Field(description="Raw natural language task text")


class ParsedTask(BaseModel):
    """Структурированная задача, полученная из одной строки текста. Неизменяема."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    title: str = UNTITLED_TASK
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.OTHER
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    tags: list[str] = Field(default_factory=list)


ParseSource = Literal["model", "rules"]


class ParseOutcome(NamedTuple):
    """Нормализованная задача и имя стратегии, которая её построила"""
    task: ParsedTask
    source: ParseSource


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None
    tags: Optional[list[str]] = None


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: Optional[str]
    priority: Priority
    category: Category
    due_date: Optional[datetime]
    completed: bool
    completed_at: Optional[datetime]
    tags: list[str]
    ai_parsed: bool
    created_at: datetime


class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
    due_today: int
    completion_rate: int
