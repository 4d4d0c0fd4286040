from typing import Any, List, Optional
import uuid

from tuduai.models.task import Task
from tuduai.repositories.task_repository import TaskRepository
from tuduai.schemas.task import ParseOutcome


class TaskService:
    def __init__(self, repo: TaskRepository):
        self.repo = repo

    async def save_parsed(self, user_id: uuid.UUID, outcome: ParseOutcome, original_input: str) -> Task:
        return await self.repo.create(
            user_id,
            outcome.task,
            original_input=original_input,
            ai_parsed=outcome.source == "model",
        )

    async def list_tasks(self, user_id: uuid.UUID) -> List[Task]:
        return await self.repo.list_for_user(user_id)

    async def update_task(self, user_id: uuid.UUID, task_id: uuid.UUID, changes: dict[str, Any]) -> Optional[Task]:
        return await self.repo.update(task_id, user_id, **changes)

    async def toggle_complete(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Optional[Task]:
        task = await self.repo.get(task_id, user_id)
        if task is None:
            return None
        return await self.repo.update(task_id, user_id, completed=not task.completed)

    async def delete_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> bool:
        return await self.repo.delete(task_id, user_id)
