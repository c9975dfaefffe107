"""
Исключения клиента аутентификации
"""

from typing import Any, Dict, Optional


class NAuthError(Exception):
    """Базовое исключение клиента с HTTP статусом ответа сервиса"""

    status_code: Optional[int] = None
    error_code: str = "NAUTH_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.details = details or {}
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь (для логов и UI слоя)"""
        return {
            "error": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class NetworkError(NAuthError):
    """Сбой транспорта, таймаут или ответ без распознаваемого тела"""

    error_code = "NETWORK_ERROR"


class AuthenticationError(NAuthError):
    """Сервис отклонил учетные данные"""

    status_code = 401
    error_code = "AUTHENTICATION_ERROR"


class SessionExpiredError(NAuthError):
    """Сессия истекла (401) или токен отсутствует"""

    status_code = 401
    error_code = "SESSION_EXPIRED"


class ValidationError(NAuthError):
    """Сервис отклонил корректно сформированный, но невалидный payload"""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class PayloadTooLargeError(NAuthError):
    """Загрузка отклонена политикой размера"""

    status_code = 413
    error_code = "PAYLOAD_TOO_LARGE"
