"""Константы клиента."""

from typing import Final, Tuple

# ===== HTTP STATUS CODES =====
HTTP_OK: Final[int] = 200
HTTP_CREATED: Final[int] = 201
HTTP_NO_CONTENT: Final[int] = 204
HTTP_BAD_REQUEST: Final[int] = 400
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_CONFLICT: Final[int] = 409
HTTP_PAYLOAD_TOO_LARGE: Final[int] = 413
HTTP_UNPROCESSABLE_ENTITY: Final[int] = 422

# Статусы, при которых сервис отклонил корректно сформированный payload
VALIDATION_STATUSES: Final[Tuple[int, ...]] = (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_UNPROCESSABLE_ENTITY,
)

# ===== HEADERS =====
HEADER_AUTHORIZATION: Final[str] = "Authorization"
HEADER_DEVICE_FINGERPRINT: Final[str] = "X-Device-Fingerprint"
BEARER_PREFIX: Final[str] = "Bearer"

# ===== STORAGE =====
STORAGE_TYPE_LOCAL: Final[str] = "local"
STORAGE_TYPE_SESSION: Final[str] = "session"
DEFAULT_TOKEN_STORAGE_KEY: Final[str] = "nauth_token"
DEFAULT_STORAGE_FILENAME: Final[str] = "storage.json"

# ===== TIMEOUTS =====
DEFAULT_API_TIMEOUT_MS: Final[int] = 30000

# ===== PAGINATION =====
DEFAULT_PAGE: Final[int] = 1
DEFAULT_PAGE_SIZE: Final[int] = 10

# ===== PASSWORD STRENGTH =====
MIN_PASSWORD_LENGTH: Final[int] = 8
MAX_PASSWORD_SCORE: Final[int] = 4

# ===== DOCUMENT LENGTHS =====
CPF_LENGTH: Final[int] = 11
CNPJ_LENGTH: Final[int] = 14
CEP_LENGTH: Final[int] = 8
PHONE_MIN_DIGITS: Final[int] = 10
PHONE_MAX_DIGITS: Final[int] = 11

CNPJ_FIRST_WEIGHTS: Final[Tuple[int, ...]] = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_SECOND_WEIGHTS: Final[Tuple[int, ...]] = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

BRAZILIAN_STATES: Final[Tuple[str, ...]] = (
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA",
    "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI", "RJ", "RN",
    "RS", "RO", "RR", "SC", "SP", "SE", "TO",
)

EMAIL_PATTERN: Final[str] = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

# ===== UI MESSAGES =====
MSG_GENERIC_ERROR: Final[str] = "Request failed"
MSG_NETWORK_ERROR: Final[str] = "Could not reach the identity service"
MSG_TIMEOUT: Final[str] = "Request timed out after {timeout} ms"
MSG_INVALID_CREDENTIALS: Final[str] = "Invalid email or password"
MSG_SESSION_EXPIRED: Final[str] = "Session expired, please sign in again"
MSG_NOT_AUTHENTICATED: Final[str] = "Not authenticated"
MSG_PAYLOAD_TOO_LARGE: Final[str] = "File is too large"
MSG_RECOVERY_HASH_REQUIRED: Final[str] = "Invalid or expired recovery link"

# ===== LANGUAGES =====
DEFAULT_LANGUAGE: Final[str] = "en"

# ===== API ENDPOINTS =====
ENDPOINT_AUTH_LOGIN: Final[str] = "/auth/login"
ENDPOINT_AUTH_REGISTER: Final[str] = "/auth/register"
ENDPOINT_AUTH_ME: Final[str] = "/auth/me"
ENDPOINT_AUTH_RECOVERY: Final[str] = "/auth/recovery"
ENDPOINT_AUTH_RESET_PASSWORD: Final[str] = "/auth/reset-password"
ENDPOINT_USERS: Final[str] = "/users"
ENDPOINT_USERS_CHANGE_PASSWORD: Final[str] = "/users/change-password"
ENDPOINT_USERS_IMAGE: Final[str] = "/users/image"
ENDPOINT_USERS_SEARCH: Final[str] = "/users/search"
ENDPOINT_ROLES: Final[str] = "/roles"
