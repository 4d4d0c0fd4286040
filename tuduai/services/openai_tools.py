import json
import logging
from datetime import datetime
from typing import Any, Dict

from openai import AsyncOpenAI, OpenAIError

from tuduai.core.config import Settings
from tuduai.utils.prompt_manager import PromptManager, prompt_manager as default_prompt_manager


logger = logging.getLogger(__name__)

# Ответ модели обязан содержать все поля задачи
REQUIRED_FIELDS = ("title", "description", "priority", "category", "dueDate", "tags")


class ModelResponseError(RuntimeError):
    """Модель недоступна или вернула не то, что ожидалось"""


def strip_code_fence(content: str) -> str:
    """Убирает обёртку ```json ... ``` если модель её добавила"""
    text = content.strip()
    if text.startswith("```"):
        lines = text.split("\n")[1:]  # Первая строка: ```json
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text


class OpenAIService:
    """Стратегия разбора через модель. Клиент создаётся один раз и передаётся явно."""

    name = "model"

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None,
                 prompts: PromptManager | None = None):
        if client is None:
            if not settings.has_openai_credentials:
                raise ValueError("OPENAI_API_KEY is required for AI services")

            client_kwargs = {"api_key": settings.openai_api_key, "timeout": settings.openai_timeout}
            if settings.openai_base_url:
                client_kwargs["base_url"] = settings.openai_base_url
            client = AsyncOpenAI(**client_kwargs)

        self.client = client
        self.model = settings.openai_model
        self.temperature = settings.openai_temperature
        self.max_tokens = settings.openai_max_tokens
        self.prompts = prompts or default_prompt_manager

    def build_system_prompt(self, now: datetime) -> str:
        return self.prompts.render(
            "task_parser",
            current_datetime=now.isoformat(),
            current_year=now.year,
        )

    async def parse_task(self, text: str, now: datetime) -> Dict[str, Any]:
        """
        Разбирает естественный язык в сырого кандидата задачи.
        Пример: "Finish report by 25th June" -> {"title": "Finish report", "dueDate": "...", ...}

        Raises:
            ModelResponseError: ошибка транспорта, пустой ответ, не JSON-объект или нет обязательных полей
        """
        system_prompt = self.build_system_prompt(now)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": text}
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature  # Низкая температура для предсказуемых результатов
            )
        except OpenAIError as e:
            raise ModelResponseError(f"OpenAI API error: {str(e)}") from e

        if not response.choices or not response.choices[0].message.content:
            raise ModelResponseError("Empty response from OpenAI")

        content = strip_code_fence(response.choices[0].message.content)
        logger.debug(f"OpenAI raw response: {content!r}")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ModelResponseError(f"Response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ModelResponseError(f"Expected JSON object, got {type(data).__name__}")

        missing = [field for field in REQUIRED_FIELDS if field not in data]
        if missing:
            raise ModelResponseError(f"Response is missing fields: {missing}")
        return data

    async def extract(self, text: str, now: datetime) -> Dict[str, Any]:
        return await self.parse_task(text, now)
