from datetime import datetime, timezone
from typing import Any, List, Optional
import uuid

from tuduai.models.task import Task
from tuduai.schemas.task import ParsedTask


UPDATABLE_FIELDS = {"title", "description", "priority", "category", "due_date", "completed", "tags"}


class TaskRepository:
    """Хранение задач. Все выборки ограничены владельцем задачи."""

    async def create(self, user_id: uuid.UUID, parsed: ParsedTask, *, original_input: str | None = None,
                     ai_parsed: bool = False, completed: bool = False) -> Task:
        return await Task.create(
            user_id=user_id,
            title=parsed.title,
            description=parsed.description,
            priority=parsed.priority,
            category=parsed.category,
            due_date=parsed.due_date,
            tags=list(parsed.tags),
            completed=completed,
            completed_at=datetime.now(timezone.utc) if completed else None,
            ai_parsed=ai_parsed,
            original_input=original_input,
        )

    async def get(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Task]:
        return await Task.filter(id=task_id, user_id=user_id).first()

    async def list_for_user(self, user_id: uuid.UUID) -> List[Task]:
        """Задачи пользователя, новые первыми"""
        return await Task.filter(user_id=user_id).order_by("-created_at").all()

    async def update(self, task_id: uuid.UUID, user_id: uuid.UUID, **changes: Any) -> Optional[Task]:
        """
        Обновляет только переданные поля. Возвращает None, если задача не найдена
        или принадлежит другому пользователю.
        Переключение completed выставляет или сбрасывает completed_at.
        """
        task = await self.get(task_id, user_id)
        if task is None:
            return None

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown task fields: {sorted(unknown)}")

        if "completed" in changes:
            completed = bool(changes["completed"])
            if completed and not task.completed:
                task.completed_at = datetime.now(timezone.utc)
            elif not completed and task.completed:
                task.completed_at = None

        for field, value in changes.items():
            setattr(task, field, value)
        await task.save()
        return task

    async def delete(self, task_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        deleted = await Task.filter(id=task_id, user_id=user_id).delete()
        return deleted > 0

    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        """Удаляет все задачи пользователя (для тестов и демо)"""
        return await Task.filter(user_id=user_id).delete()
