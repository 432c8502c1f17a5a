import os
import logging
from datetime import datetime, timezone

import contextvars
from logging.handlers import RotatingFileHandler
import sys

from computer_reset.systems.config import AppConfig

# Контекстная переменная для текущего кода сессии.
# Используется в middleware, для получения из контекста ID-сессии
s_id_ctx_var = contextvars.ContextVar("s_id", default="-")

LOG_FORMAT = "[%(asctime)s] [%(s_id)s|%(levelname)s|%(name)s] %(message)s"


class SafeFormatter(logging.Formatter):
    def format(self, record):
        # Если кода сессии нет, применяется значение по умолчанию
        record.s_id = s_id_ctx_var.get("-")
        return super().format(record)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.isoformat(timespec="milliseconds")


logger = logging.getLogger("computer_reset")


def setup_logging(level: int = logging.INFO, log_file: bool = True) -> None:
    """
    Настройка root'ового logging, для перехвата всех данных выводимых в логгер

    Args:
        level: Глубина логирования
        log_file: Запись логов в файл <LOGS_FOLDER>/api.log
    """
    handlers = []

    if log_file:
        os.makedirs(AppConfig.LOGS_FOLDER, exist_ok=True)

        file_handler = RotatingFileHandler(
            f'{AppConfig.LOGS_FOLDER}/api.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setFormatter(SafeFormatter(LOG_FORMAT))
        handlers.append(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(SafeFormatter(LOG_FORMAT))
    handlers.append(console_handler)

    root = logging.getLogger()
    root.setLevel(level)

    # Заменяем handlers корневого логгера
    root.handlers = handlers

    for name in ["uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"]:
        logging.getLogger(name).handlers = handlers
        logging.getLogger(name).propagate = False
        logging.getLogger(name).setLevel(level)
