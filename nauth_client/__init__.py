"""Клиентский toolkit аутентификации: API клиент, хранилище токена, валидаторы."""

from .api_client import APIClient
from .config import ClientConfig, get_config
from .core import (
    AuthController,
    FileStorage,
    MachineFingerprintProvider,
    MemoryStorage,
    SessionState,
    StaticFingerprintProvider,
    TokenStore,
    create_storage,
)
from .exceptions import (
    AuthenticationError,
    NAuthError,
    NetworkError,
    PayloadTooLargeError,
    SessionExpiredError,
    ValidationError,
)
from .formatters import format_cep, format_id_document, format_phone
from .i18n import create_translator
from .logging_config import setup_logging
from .schemas import (
    PasswordStrength,
    RoleInfo,
    Session,
    UserAddress,
    UserDraft,
    UserPhone,
    UserProfile,
    UserSearchResult,
    UserStatus,
    ValidationResult,
)
from .validators import (
    only_digits,
    validate_cnpj,
    validate_cpf,
    validate_email,
    validate_id_document,
    validate_password_strength,
    validate_phone,
)

__version__ = "0.1.0"

__all__ = [
    "APIClient",
    "AuthController",
    "AuthenticationError",
    "ClientConfig",
    "FileStorage",
    "MachineFingerprintProvider",
    "MemoryStorage",
    "NAuthError",
    "NetworkError",
    "PasswordStrength",
    "PayloadTooLargeError",
    "RoleInfo",
    "Session",
    "SessionExpiredError",
    "SessionState",
    "StaticFingerprintProvider",
    "TokenStore",
    "UserAddress",
    "UserDraft",
    "UserPhone",
    "UserProfile",
    "UserSearchResult",
    "UserStatus",
    "ValidationError",
    "ValidationResult",
    "create_storage",
    "create_translator",
    "format_cep",
    "format_id_document",
    "format_phone",
    "get_config",
    "only_digits",
    "setup_logging",
    "validate_cnpj",
    "validate_cpf",
    "validate_email",
    "validate_id_document",
    "validate_password_strength",
    "validate_phone",
]
