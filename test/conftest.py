import pytest
import pytest_asyncio
import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Добавляем корневую директорию проекта в путь Python
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from tortoise import Tortoise, connections

from tuduai.core.config import Settings
from tuduai.core.db import tortoise_config
from tuduai.core.logging_config import setup_test_logging


setup_test_logging()


# Пометки для группировки тестов
def pytest_configure(config):
    """Регистрируем кастомные маркеры"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may be slow)"
    )
    config.addinivalue_line(
        "markers", "requires_api_key: marks tests that require real API keys"
    )
    config.addinivalue_line(
        "markers", "database: marks tests that use database"
    )


def make_settings(**overrides) -> Settings:
    """Настройки без .env и без ключа OpenAI, БД в памяти"""
    values = {
        "openai_api_key": None,
        "db_url": "sqlite://:memory:",
        "db_generate_schemas": True,
        "timezone": "UTC",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_completion(content):
    """Ответ chat.completions.create в форме клиента openai"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_openai_client(content=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        client.chat.completions.create = AsyncMock(return_value=make_completion(content))
    return client


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def model_settings():
    return make_settings(openai_api_key="sk-test-key", openai_model="gpt-4o-mini")


@pytest_asyncio.fixture
async def db(settings):
    """Изолированная SQLite база в памяти для каждого теста"""
    await Tortoise.init(config=tortoise_config(settings))
    await Tortoise.generate_schemas()
    yield
    await connections.close_all()
