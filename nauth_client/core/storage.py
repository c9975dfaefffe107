"""Хранилище токена поверх key-value носителя (память или файл)."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from ..config import ClientConfig
from ..constants import DEFAULT_TOKEN_STORAGE_KEY, STORAGE_TYPE_SESSION

logger = logging.getLogger(__name__)


class StorageMedium(Protocol):
    """Носитель key-value: get/set/remove по строковому ключу."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStorage:
    """Хранилище в памяти: живёт, пока жив процесс (аналог sessionStorage)."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    Персистентное хранилище в JSON файле (аналог localStorage).

    Переживает перезапуск процесса. Файл создается при первой записи
    с правами 0600.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"[STORAGE] Failed to read {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        # Файл сразу создается с правами 0600: в нем bearer токен
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def create_storage(config: ClientConfig) -> StorageMedium:
    """
    Создает носитель по ``config.storage_type``.

    Returns:
        MemoryStorage для "session", FileStorage для "local"
    """
    if config.storage_type == STORAGE_TYPE_SESSION:
        return MemoryStorage()
    return FileStorage(config.storage_path)


class TokenStore:
    """Текущий bearer токен. Содержимое токена не проверяется."""

    def __init__(
        self,
        storage: Optional[StorageMedium] = None,
        key: str = DEFAULT_TOKEN_STORAGE_KEY,
    ) -> None:
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key

    @classmethod
    def from_config(cls, config: ClientConfig) -> "TokenStore":
        return cls(create_storage(config), key=config.token_storage_key)

    def get(self) -> Optional[str]:
        return self.storage.get(self.key) or None

    def set(self, token: str) -> None:
        self.storage.set(self.key, token)
        logger.info(f"[SAVE_TOKEN] Token saved, length: {len(token)}")

    def clear(self) -> None:
        self.storage.remove(self.key)
        logger.info("[REMOVE_TOKEN] Token removed")
