import logging
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from tuduai.core.config import Settings
from tuduai.schemas.task import ParseOutcome, ParsedTask
from tuduai.services.normalizer import normalize
from tuduai.services.openai_tools import OpenAIService
from tuduai.services.rule_parser import RuleBasedStrategy
from tuduai.utils.datetime_parser import current_time


logger = logging.getLogger(__name__)


def _localize(task: ParsedTask, now: datetime) -> ParsedTask:
    """Срок без часового пояса считается локальным временем now"""
    if task.due_date is None or task.due_date.tzinfo is not None or now.tzinfo is None:
        return task
    return task.model_copy(update={"due_date": task.due_date.replace(tzinfo=now.tzinfo)})


class TaskStrategy(Protocol):
    name: str

    async def extract(self, text: str, now: datetime) -> dict[str, Any]:
        ...


class AIParseService:
    """
    Фасад разбора задач: цепочка стратегий с откатом.
    Стратегии пробуются по порядку; любая ошибка передаёт ход следующей.
    Последней всегда идёт разбор по правилам, который не падает.
    """

    def __init__(self, strategies: Sequence[TaskStrategy] = (), fallback: RuleBasedStrategy | None = None,
                 timezone: str = "UTC"):
        self.strategies = list(strategies)
        self.fallback = fallback or RuleBasedStrategy()
        self.timezone = timezone

    async def parse_with_source(self, text: str, now: Optional[datetime] = None) -> ParseOutcome:
        text = text if isinstance(text, str) else ""
        if now is None:
            now = current_time(self.timezone)

        for strategy in self.strategies:
            try:
                candidate = await strategy.extract(text, now)
            except Exception as e:
                logger.warning(f"Стратегия {strategy.name} не сработала, переходим к следующей: {e}")
                continue
            logger.debug(f"Задача разобрана стратегией {strategy.name}")
            return ParseOutcome(_localize(normalize(candidate), now), strategy.name)

        candidate = await self.fallback.extract(text, now)
        return ParseOutcome(_localize(normalize(candidate), now), self.fallback.name)

    async def parse_task(self, text: str, now: Optional[datetime] = None) -> ParsedTask:
        outcome = await self.parse_with_source(text, now)
        return outcome.task


def build_parse_service(settings: Settings, openai_service: OpenAIService | None = None) -> AIParseService:
    """Собирает фасад при старте процесса. Без ключа модель в цепочку не попадает."""
    strategies: list[TaskStrategy] = []
    if openai_service is not None:
        strategies.append(openai_service)
    elif settings.has_openai_credentials:
        strategies.append(OpenAIService(settings))
    else:
        logger.warning("OPENAI_API_KEY не задан, используется разбор по правилам")

    return AIParseService(
        strategies=strategies,
        fallback=RuleBasedStrategy(numeric_date_order=settings.numeric_date_order),
        timezone=settings.timezone,
    )
