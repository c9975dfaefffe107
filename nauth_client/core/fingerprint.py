"""Идентификатор устройства для заголовка X-Device-Fingerprint."""

import asyncio
import hashlib
import logging
import platform
import socket
import uuid
from typing import Protocol

logger = logging.getLogger(__name__)


class FingerprintProvider(Protocol):
    """Провайдер отпечатка устройства: асинхронно возвращает непрозрачную строку."""

    async def resolve(self) -> str:
        ...


class MachineFingerprintProvider:
    """
    Отпечаток по стабильным атрибутам хоста.

    Хеширует имя хоста, MAC адрес и платформу через SHA-256,
    результат одинаков между запусками на одной машине.
    """

    def _collect(self) -> str:
        parts = [
            socket.gethostname(),
            f"{uuid.getnode():012x}",
            platform.system(),
            platform.machine(),
            platform.python_implementation(),
        ]
        return "|".join(parts)

    async def resolve(self) -> str:
        # getnode() может читать системные утилиты, не блокируем цикл событий
        raw = await asyncio.to_thread(self._collect)
        visitor_id = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]
        logger.debug(f"[FINGERPRINT] Resolved visitor id {visitor_id[:8]}...")
        return visitor_id


class StaticFingerprintProvider:
    """Заранее известный отпечаток (например, полученный от UI слоя)."""

    def __init__(self, visitor_id: str) -> None:
        self.visitor_id = visitor_id

    async def resolve(self) -> str:
        return self.visitor_id
