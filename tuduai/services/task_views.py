"""
Представления списка задач: фильтры, сортировки и сводная статистика.
Работают над уже загруженными задачами и не обращаются к базе.
"""
from datetime import datetime
from typing import Iterable, Literal, Protocol, Sequence

from tuduai.schemas.task import Priority, TaskStats


TaskFilter = Literal["all", "pending", "completed", "overdue", "today", "upcoming"]
TaskSort = Literal["due_date", "priority", "created", "alphabetical"]

PRIORITY_ORDER = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class TaskLike(Protocol):
    title: str
    priority: Priority
    due_date: datetime | None
    completed: bool
    created_at: datetime


def _in_zone(value: datetime, now: datetime) -> datetime:
    if value.tzinfo is not None and now.tzinfo is not None:
        return value.astimezone(now.tzinfo)
    return value


def is_overdue(task: TaskLike, now: datetime) -> bool:
    return task.due_date is not None and not task.completed and task.due_date < now


def is_due_today(task: TaskLike, now: datetime) -> bool:
    return task.due_date is not None and _in_zone(task.due_date, now).date() == now.date()


def filter_tasks(tasks: Iterable[TaskLike], view: TaskFilter, now: datetime) -> list:
    tasks = list(tasks)
    if view == "pending":
        return [t for t in tasks if not t.completed]
    if view == "completed":
        return [t for t in tasks if t.completed]
    if view == "overdue":
        return [t for t in tasks if is_overdue(t, now)]
    if view == "today":
        return [t for t in tasks if is_due_today(t, now)]
    if view == "upcoming":
        return [
            t for t in tasks
            if t.due_date is not None and not t.due_date < now and not is_due_today(t, now)
        ]
    return tasks


def sort_tasks(tasks: Iterable[TaskLike], sort_by: TaskSort) -> list:
    """Стабильная сортировка; задачи без срока при сортировке по сроку идут в конце"""
    tasks = list(tasks)
    if sort_by == "due_date":
        dated = sorted((t for t in tasks if t.due_date is not None), key=lambda t: t.due_date)
        return dated + [t for t in tasks if t.due_date is None]
    if sort_by == "priority":
        return sorted(tasks, key=lambda t: PRIORITY_ORDER.get(Priority(t.priority), 0), reverse=True)
    if sort_by == "created":
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if sort_by == "alphabetical":
        return sorted(tasks, key=lambda t: t.title.casefold())
    return tasks


def compute_stats(tasks: Sequence[TaskLike], now: datetime) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=sum(1 for t in tasks if is_overdue(t, now)),
        due_today=sum(1 for t in tasks if is_due_today(t, now) and not t.completed),
        completion_rate=round(completed / total * 100) if total else 0,
    )
