from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# Значения-заглушки из .env.example, которые не считаются настоящим ключом
PLACEHOLDER_API_KEYS = {"", "your-api-key-here", "sk-placeholder"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Параметры базы данных
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="tuduai")
    db_user: str = Field(default="user")
    db_password: str = Field(default="password")
    db_url: Optional[str] = Field(default=None)
    db_generate_schemas: bool = Field(default=False)

    # Модель для разбора задач
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_temperature: float = Field(default=0.1)
    openai_max_tokens: int = Field(default=500)
    openai_timeout: float = Field(default=30.0)

    # Правила разбора дат
    timezone: str = "UTC"
    numeric_date_order: Literal["dmy", "mdy"] = "dmy"

    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Неизвестный часовой пояс - ошибка при старте, а не при каждом разборе"""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value!r}") from e
        return value

    @property
    def has_openai_credentials(self) -> bool:
        """Есть ли настоящий ключ для модели (иначе сразу работает разбор по правилам)"""
        if self.openai_api_key is None:
            return False
        return self.openai_api_key.strip() not in PLACEHOLDER_API_KEYS

    @property
    def database_url(self) -> str:
        """DSN для Tortoise: явный db_url или PostgreSQL из отдельных параметров"""
        if self.db_url:
            return self.db_url
        return f"postgres://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"


settings = None

def get_settings() -> Settings:
    """Получить настройки приложения (создаются один раз при старте процесса)"""
    global settings
    if settings is None:
        settings = Settings()
    return settings

def reset_settings():
    """Сбросить кэшированные настройки (для тестирования)"""
    global settings
    settings = None
