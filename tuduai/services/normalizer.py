"""
Нормализация кандидата задачи.
Единая точка проверки схемы для обеих стратегий разбора: модели и правил.
"""
import re
from datetime import datetime
from typing import Any, Mapping

from tuduai.schemas.task import Category, ParsedTask, Priority, UNTITLED_TASK


_WHITESPACE = re.compile(r"\s+")

VALID_PRIORITIES = {p.value: p for p in Priority}
VALID_CATEGORIES = {c.value: c for c in Category}


def _clean_text(value: Any) -> str:
    return _WHITESPACE.sub(" ", str(value)).strip()


def _coerce_title(value: Any) -> str:
    if not value:
        return UNTITLED_TASK
    return _clean_text(value) or UNTITLED_TASK


def _coerce_description(value: Any) -> str | None:
    if not value:
        return None
    return str(value).strip() or None


def _coerce_enum(value: Any, valid: dict, default):
    if isinstance(value, (Priority, Category)):
        value = value.value
    if isinstance(value, str) and value in valid:
        return valid[value]
    return default


def parse_due_date(value: Any) -> datetime | None:
    """ISO-8601 строка или datetime -> datetime; всё остальное -> None"""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _coerce_tags(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [tag for tag in value if isinstance(tag, str)]


def normalize(candidate: Mapping[str, Any] | ParsedTask) -> ParsedTask:
    """
    Приводит сырой кандидат к ParsedTask.

    Неизвестные значения priority/category заменяются значениями по умолчанию,
    нераспознанная дата отбрасывается, из тегов остаются только строки.
    Функция чистая и никогда не бросает исключений на содержимом кандидата.
    """
    if isinstance(candidate, ParsedTask):
        candidate = candidate.model_dump(by_alias=True)
    elif not isinstance(candidate, Mapping):
        candidate = {}

    due_raw = candidate.get("dueDate", candidate.get("due_date"))

    return ParsedTask(
        title=_coerce_title(candidate.get("title")),
        description=_coerce_description(candidate.get("description")),
        priority=_coerce_enum(candidate.get("priority"), VALID_PRIORITIES, Priority.MEDIUM),
        category=_coerce_enum(candidate.get("category"), VALID_CATEGORIES, Category.OTHER),
        due_date=parse_due_date(due_raw),
        tags=_coerce_tags(candidate.get("tags")),
    )
