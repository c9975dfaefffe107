"""Модуль core: хранилище токена, отпечаток устройства, сессия и контроллер."""

from .auth import AuthController
from .fingerprint import (
    FingerprintProvider,
    MachineFingerprintProvider,
    StaticFingerprintProvider,
)
from .session import SessionState
from .storage import FileStorage, MemoryStorage, StorageMedium, TokenStore, create_storage

__all__ = [
    # auth
    "AuthController",
    # fingerprint
    "FingerprintProvider",
    "MachineFingerprintProvider",
    "StaticFingerprintProvider",
    # session
    "SessionState",
    # storage
    "FileStorage",
    "MemoryStorage",
    "StorageMedium",
    "TokenStore",
    "create_storage",
]
