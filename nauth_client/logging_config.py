"""
Логирование клиента.

Настраивается только логгер пакета ``nauth_client``: корневой логгер
принадлежит приложению и не трогается.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import ClientConfig

LIBRARY_LOGGER = "nauth_client"

# Атрибуты LogRecord, которые не попадают в context
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*")

# Метка обработчиков, установленных setup_logging
_OWNED_ATTR = "_nauth_owned"


def mask_secrets(text: str) -> str:
    """
    Маскирует bearer токены в строке.

    Example:
        >>> mask_secrets("Authorization: Bearer abc.def")
        'Authorization: Bearer ***'
    """
    return _BEARER_RE.sub(r"\1***", text)


class TokenMaskingFilter(logging.Filter):
    """Подставляет аргументы в сообщение и маскирует в нем bearer токены"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = mask_secrets(record.getMessage())
        record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """
    Одна JSON запись на строку.

    Поля, переданные через ``extra``, собираются в объект ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_secrets(record.getMessage()),
        }

        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def _text_formatter() -> logging.Formatter:
    return logging.Formatter(
        "[NAUTH] %(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    config: Optional[ClientConfig] = None,
    *,
    level: Optional[str] = None,
    json_logs: bool = False,
    log_file: Optional[str] = None,
    propagate: bool = False,
) -> logging.Logger:
    """
    Настройка логгера ``nauth_client``.

    Повторный вызов заменяет ранее установленные обработчики.

    Args:
        config: Конфигурация клиента, уровень берется из ``config.log_level``
        level: Явный уровень (важнее config)
        json_logs: JSON формат для консоли
        log_file: Путь к файлу логов (опционально, всегда JSON)
        propagate: Передавать записи обработчикам приложения

    Returns:
        Настроенный логгер пакета
    """
    resolved = (level or (config.log_level if config is not None else "INFO")).upper()

    lib_logger = logging.getLogger(LIBRARY_LOGGER)
    for handler in [h for h in lib_logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        lib_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_logs else _text_formatter())
    handlers.append(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(TokenMaskingFilter())
        setattr(handler, _OWNED_ATTR, True)
        lib_logger.addHandler(handler)

    lib_logger.setLevel(resolved)
    lib_logger.propagate = propagate

    # httpx пишет INFO на каждый запрос
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    lib_logger.debug(
        "[LOGGING] Configured",
        extra={"log_level": resolved, "json_logs": json_logs, "log_file": log_file},
    )
    return lib_logger
