"""
Конфигурация логирования для TuduAI.
Настройка разделения INFO логов (stdout) и ERROR логов (stderr).
"""

import logging
import sys


LOG_FORMAT = '[%(asctime)s] [PID %(process)d] [%(threadName)s] [%(name)s] [%(levelname)s] %(message)s'

# Шумные библиотеки HTTP-клиента модели
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "tortoise")


class InfoFilter(logging.Filter):
    """Фильтр для пропуска только INFO и DEBUG сообщений."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= logging.INFO


class ErrorFilter(logging.Filter):
    """Фильтр для пропуска только WARNING, ERROR и CRITICAL сообщений."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING


def _quiet_libraries() -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Настройка логирования с разделением потоков только для модулей tuduai.
    Root logger не трогаем, чтобы не конфликтовать с uvicorn.

    Args:
        log_level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # Handler для INFO и DEBUG (stdout)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(InfoFilter())
    stdout_handler.setFormatter(formatter)

    # Handler для WARNING, ERROR, CRITICAL (stderr)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(ErrorFilter())
    stderr_handler.setFormatter(formatter)

    app_logger = logging.getLogger("tuduai")
    app_logger.handlers.clear()
    app_logger.addHandler(stdout_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    app_logger.propagate = False  # Не передавать в root logger

    _quiet_libraries()

    app_logger.info("Логирование настроено для модулей tuduai")


def setup_test_logging(log_level: str = "DEBUG") -> None:
    """
    Настройка логирования для тестов.
    В тестах используем propagate=True чтобы caplog мог ловить сообщения.
    """
    app_logger = logging.getLogger("tuduai")
    app_logger.handlers.clear()
    app_logger.setLevel(getattr(logging, log_level.upper(), logging.DEBUG))
    app_logger.propagate = True  # Важно для caplog в тестах

    _quiet_libraries()
