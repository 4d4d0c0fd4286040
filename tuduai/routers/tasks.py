from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List
import logging
import uuid

from tuduai.schemas.task import ParsedTask, TaskCreate, TaskOut, TaskStats, TaskUpdate
from tuduai.services.ai_parse_service import AIParseService
from tuduai.services.task_service import TaskService
from tuduai.services.task_views import TaskFilter, TaskSort, compute_stats, filter_tasks, sort_tasks
from tuduai.repositories.task_repository import TaskRepository
from tuduai.utils.datetime_parser import current_time


logger = logging.getLogger(__name__)
router = APIRouter()


async def get_task_service() -> TaskService:
    return TaskService(TaskRepository())


async def get_ai_service(request: Request) -> AIParseService:
    return request.app.state.parse_service


@router.post("/parse", response_model=ParsedTask, summary="Разбор задачи без сохранения")
async def parse_task(payload: TaskCreate, ai: AIParseService = Depends(get_ai_service)):
    return await ai.parse_task(payload.text)


@router.post("", response_model=TaskOut, status_code=201, summary="Разбор и создание задачи")
async def parse_and_create_task(payload: TaskCreate, user_id: uuid.UUID,
                                ai: AIParseService = Depends(get_ai_service),
                                svc: TaskService = Depends(get_task_service)):
    outcome = await ai.parse_with_source(payload.text)
    task = await svc.save_parsed(user_id=user_id, outcome=outcome, original_input=payload.text)
    logger.info(f"Создана задача {task.id} для пользователя {user_id} (источник: {outcome.source})")
    return task


@router.get("", response_model=List[TaskOut], summary="Список задач")
async def list_tasks(user_id: uuid.UUID, view: TaskFilter = "all", sort: TaskSort = "due_date",
                     ai: AIParseService = Depends(get_ai_service),
                     svc: TaskService = Depends(get_task_service)):
    tasks = [TaskOut.model_validate(t) for t in await svc.list_tasks(user_id)]
    now = current_time(ai.timezone)
    return sort_tasks(filter_tasks(tasks, view, now), sort)


@router.get("/stats", response_model=TaskStats, summary="Статистика задач")
async def task_stats(user_id: uuid.UUID, ai: AIParseService = Depends(get_ai_service),
                     svc: TaskService = Depends(get_task_service)):
    tasks = [TaskOut.model_validate(t) for t in await svc.list_tasks(user_id)]
    return compute_stats(tasks, current_time(ai.timezone))


@router.patch("/{task_id}", response_model=TaskOut, summary="Обновление задачи")
async def update_task(task_id: uuid.UUID, user_id: uuid.UUID, payload: TaskUpdate,
                      svc: TaskService = Depends(get_task_service)):
    changes = payload.model_dump(exclude_unset=True)
    task = await svc.update_task(user_id, task_id, changes)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("/{task_id}/toggle", response_model=TaskOut, summary="Отметить выполненной или вернуть в работу")
async def toggle_task(task_id: uuid.UUID, user_id: uuid.UUID, svc: TaskService = Depends(get_task_service)):
    task = await svc.toggle_complete(user_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.delete("/{task_id}", summary="Удаление задачи")
async def delete_task(task_id: uuid.UUID, user_id: uuid.UUID, svc: TaskService = Depends(get_task_service)):
    if not await svc.delete_task(user_id, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "deleted"}
