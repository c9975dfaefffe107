"""Асинхронный API клиент сервиса идентификации."""

import asyncio
import logging
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import ClientConfig
from .constants import (
    BEARER_PREFIX,
    ENDPOINT_AUTH_LOGIN,
    ENDPOINT_AUTH_ME,
    ENDPOINT_AUTH_RECOVERY,
    ENDPOINT_AUTH_REGISTER,
    ENDPOINT_AUTH_RESET_PASSWORD,
    ENDPOINT_ROLES,
    ENDPOINT_USERS,
    ENDPOINT_USERS_CHANGE_PASSWORD,
    ENDPOINT_USERS_IMAGE,
    ENDPOINT_USERS_SEARCH,
    HEADER_AUTHORIZATION,
    HEADER_DEVICE_FINGERPRINT,
    HTTP_NO_CONTENT,
    HTTP_PAYLOAD_TOO_LARGE,
    HTTP_UNAUTHORIZED,
    MSG_GENERIC_ERROR,
    MSG_INVALID_CREDENTIALS,
    MSG_NETWORK_ERROR,
    MSG_NOT_AUTHENTICATED,
    MSG_PAYLOAD_TOO_LARGE,
    MSG_RECOVERY_HASH_REQUIRED,
    MSG_SESSION_EXPIRED,
    MSG_TIMEOUT,
    VALIDATION_STATUSES,
)
from .core.fingerprint import FingerprintProvider, MachineFingerprintProvider
from .core.storage import TokenStore
from .exceptions import (
    AuthenticationError,
    NetworkError,
    PayloadTooLargeError,
    SessionExpiredError,
    ValidationError,
)
from .schemas import (
    ChangePasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    RoleInfo,
    UserDraft,
    UserProfile,
    UserSearchRequest,
    UserSearchResult,
    WireModel,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=WireModel)
UnauthorizedListener = Callable[[], None]


class APIClient:
    """
    Клиент сервиса идентификации.

    Каждый запрос получает bearer токен из TokenStore и отпечаток устройства
    (если он уже вычислен). Ответ 401 очищает TokenStore и уведомляет
    подписчиков ``on_unauthorized`` до того, как ошибка вернется вызывающему.
    """

    def __init__(
        self,
        config: ClientConfig,
        token_store: Optional[TokenStore] = None,
        fingerprint_provider: Optional[FingerprintProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Инициализация API клиента.

        Args:
            config: Конфигурация (api_url, timeout в мс, enable_fingerprinting)
            token_store: Хранилище токена (по умолчанию по config.storage_type)
            fingerprint_provider: Провайдер отпечатка устройства
            transport: Транспорт httpx (для тестов и кастомных сетевых стеков)
        """
        self.config = config
        self.base_url = config.api_url
        self.timeout = config.timeout
        self.token_store = token_store if token_store is not None else TokenStore.from_config(config)

        self.fingerprint: Optional[str] = None
        self._fingerprint_provider: Optional[FingerprintProvider] = None
        if config.enable_fingerprinting:
            self._fingerprint_provider = fingerprint_provider or MachineFingerprintProvider()
        self._fingerprint_task: Optional["asyncio.Task[None]"] = None

        self._unauthorized_listeners: List[UnauthorizedListener] = []
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

        self._schedule_fingerprint()

    async def __aenter__(self) -> "APIClient":
        self._schedule_fingerprint()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Закрыть HTTP соединения и остановить вычисление отпечатка"""
        task = self._fingerprint_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Fingerprint
    # ------------------------------------------------------------------

    def _schedule_fingerprint(self) -> None:
        """Запускает однократное вычисление отпечатка, если есть цикл событий"""
        if self._fingerprint_provider is None or self._fingerprint_task is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Клиент создан вне цикла событий: запустим при первом запросе
            return
        self._fingerprint_task = loop.create_task(self._resolve_fingerprint())

    async def _resolve_fingerprint(self) -> None:
        try:
            self.fingerprint = await self._fingerprint_provider.resolve()
            logger.info("[FINGERPRINT] Device fingerprint resolved")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"[FINGERPRINT] Failed to resolve device fingerprint: {e}")

    async def wait_for_fingerprint(self) -> Optional[str]:
        """
        Дождаться вычисления отпечатка.

        Запросы никогда не ждут отпечаток сами; метод нужен вызывающему коду,
        которому важно, чтобы следующий запрос ушел с заголовком.
        """
        self._schedule_fingerprint()
        if self._fingerprint_task is not None:
            await asyncio.shield(self._fingerprint_task)
        return self.fingerprint

    # ------------------------------------------------------------------
    # Unauthorized notification
    # ------------------------------------------------------------------

    def on_unauthorized(self, listener: UnauthorizedListener) -> Callable[[], None]:
        """
        Подписаться на событие потери сессии (ответ 401).

        Returns:
            Функция отписки
        """
        self._unauthorized_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._unauthorized_listeners:
                self._unauthorized_listeners.remove(listener)

        return unsubscribe

    def _handle_unauthorized(self) -> None:
        self.token_store.clear()
        logger.warning("[UNAUTHORIZED] Received 401, token cleared")
        for listener in list(self._unauthorized_listeners):
            try:
                listener()
            except Exception:
                # Ошибка подписчика не должна подменять исходную ошибку запроса
                logger.exception("[UNAUTHORIZED] Listener failed")

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def _get_headers(self) -> Dict[str, str]:
        """Получить заголовки для запроса"""
        headers: Dict[str, str] = {"Accept": "application/json"}
        token = self.token_store.get()
        if token:
            headers[HEADER_AUTHORIZATION] = f"{BEARER_PREFIX} {token}"
        if self.fingerprint:
            headers[HEADER_DEVICE_FINGERPRINT] = self.fingerprint
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        auth_call: bool = False,
    ) -> Any:
        """
        Выполнить запрос к сервису.

        Args:
            method: HTTP метод
            path: Путь относительно api_url
            json: Тело запроса
            params: Query параметры
            files: Multipart файлы
            auth_call: Запрос входа: 401 означает неверные учетные данные

        Returns:
            Тело ответа без транспортной обертки

        Raises:
            NAuthError: Подкласс по таксономии ошибок
        """
        self._schedule_fingerprint()
        try:
            response = await self._http.request(
                method,
                path,
                json=json,
                params=params,
                files=files,
                headers=self._get_headers(),
            )
        except httpx.TimeoutException as e:
            logger.error(f"[REQUEST] {method} {path} timed out after {self.timeout} ms")
            raise NetworkError(
                MSG_TIMEOUT.format(timeout=self.timeout),
                details={"method": method, "path": path},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"[REQUEST] {method} {path} failed: {e}")
            raise NetworkError(
                MSG_NETWORK_ERROR,
                details={"method": method, "path": path, "reason": str(e)},
            ) from e

        return self._handle_response(response, auth_call=auth_call)

    def _handle_response(self, response: httpx.Response, auth_call: bool = False) -> Any:
        """
        Обработка ответа от сервера.

        Args:
            response: Ответ от сервера
            auth_call: Запрос входа

        Returns:
            Распакованное тело ответа или None для пустого ответа
        """
        status = response.status_code
        path = response.request.url.path

        if response.is_success:
            if status == HTTP_NO_CONTENT or not response.content:
                return None
            try:
                body = response.json()
            except ValueError as e:
                logger.error(f"[RESPONSE] Failed to parse JSON from {path}: {e}")
                raise NetworkError(MSG_GENERIC_ERROR, status_code=status) from e
            return _unwrap(body)

        body = _safe_json(response)
        message = _extract_message(body)
        details = body if isinstance(body, dict) else {}
        logger.error(
            f"[RESPONSE] {response.request.method} {path} failed with status {status}: "
            f"{message or response.text[:200]}"
        )

        if status == HTTP_UNAUTHORIZED:
            self._handle_unauthorized()
            if auth_call:
                raise AuthenticationError(message or MSG_INVALID_CREDENTIALS, details=details)
            raise SessionExpiredError(message or MSG_SESSION_EXPIRED, details=details)

        if status == HTTP_PAYLOAD_TOO_LARGE:
            raise PayloadTooLargeError(message or MSG_PAYLOAD_TOO_LARGE, details=details)

        if status in VALIDATION_STATUSES and message:
            raise ValidationError(message, details=details, status_code=status)

        raise NetworkError(message or MSG_GENERIC_ERROR, details=details, status_code=status)

    def _accept_session(self, data: Any) -> UserProfile:
        """
        Разбирает ответ {token, user}.

        Токен сохраняется только после успешного разбора профиля.
        """
        if isinstance(data, dict) and "user" in data:
            user = _parse(UserProfile, data["user"])
            token = data.get("token")
            if token:
                self.token_store.set(token)
            return user
        return _parse(UserProfile, data)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> UserProfile:
        """
        Вход пользователя.

        Args:
            email: Email пользователя
            password: Пароль

        Returns:
            Профиль пользователя (токен сохраняется в TokenStore)

        Raises:
            AuthenticationError: Неверные учетные данные
        """
        payload = _to_payload(LoginRequest, {"email": email, "password": password})
        data = await self._request("POST", ENDPOINT_AUTH_LOGIN, json=payload, auth_call=True)
        if not isinstance(data, dict) or not data.get("token"):
            raise NetworkError("Login response does not contain a token")

        user = self._accept_session(data)
        logger.info(f"[LOGIN] User logged in: {user.email}")
        return user

    async def register(self, draft: Union[UserDraft, Dict[str, Any]]) -> UserProfile:
        """
        Регистрация нового пользователя.

        Если сервис сразу возвращает токен, пользователь считается вошедшим.

        Raises:
            ValidationError: Сервис отклонил данные (например, email занят)
        """
        payload = _to_payload(UserDraft, draft)
        data = await self._request("POST", ENDPOINT_AUTH_REGISTER, json=payload)
        user = self._accept_session(data)
        logger.info(f"[REGISTER] User registered: {user.email}")
        return user

    async def logout(self) -> None:
        """Локальный выход: токен удаляется, запрос к сервису не отправляется"""
        self.token_store.clear()
        logger.info("[LOGOUT] User logged out")

    async def get_me(self) -> UserProfile:
        """
        Текущий пользователь по сохраненному токену.

        Raises:
            SessionExpiredError: Токен отсутствует (без сетевого запроса) или истек
        """
        if not self.token_store.get():
            raise SessionExpiredError(MSG_NOT_AUTHENTICATED)
        data = await self._request("GET", ENDPOINT_AUTH_ME)
        return _parse(UserProfile, data)

    async def send_recovery_email(self, email: str) -> None:
        await self._request("POST", ENDPOINT_AUTH_RECOVERY, json={"email": email})
        logger.info("[RECOVERY] Recovery email requested")

    async def reset_password(self, recovery_hash: Optional[str], new_password: str) -> None:
        """
        Сброс пароля по ссылке восстановления.

        Raises:
            ValidationError: recovery_hash отсутствует (запрос не отправляется)
        """
        if not recovery_hash:
            raise ValidationError(MSG_RECOVERY_HASH_REQUIRED)
        payload = _to_payload(
            ResetPasswordRequest, {"recovery_hash": recovery_hash, "new_password": new_password}
        )
        await self._request("POST", ENDPOINT_AUTH_RESET_PASSWORD, json=payload)
        logger.info("[RECOVERY] Password reset completed")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user_by_id(self, user_id: int) -> UserProfile:
        data = await self._request("GET", f"{ENDPOINT_USERS}/{user_id}")
        return _parse(UserProfile, data)

    async def update_user(self, draft: Union[UserDraft, Dict[str, Any]]) -> UserProfile:
        data = await self._request("PUT", ENDPOINT_USERS, json=_to_payload(UserDraft, draft))
        return _parse(UserProfile, data)

    async def create_user(self, draft: Union[UserDraft, Dict[str, Any]]) -> UserProfile:
        data = await self._request("POST", ENDPOINT_USERS, json=_to_payload(UserDraft, draft))
        return _parse(UserProfile, data)

    async def change_password(self, current_password: str, new_password: str) -> None:
        payload = _to_payload(
            ChangePasswordRequest,
            {"current_password": current_password, "new_password": new_password},
        )
        await self._request("POST", ENDPOINT_USERS_CHANGE_PASSWORD, json=payload)

    async def upload_image(
        self,
        file: Union[bytes, BinaryIO],
        filename: str = "image",
        content_type: Optional[str] = None,
    ) -> str:
        """
        Загрузка изображения пользователя (multipart/form-data).

        Args:
            file: Содержимое файла или открытый бинарный файл
            filename: Имя файла в multipart части
            content_type: MIME тип

        Returns:
            URL загруженного изображения

        Raises:
            PayloadTooLargeError: Сервис отклонил файл по размеру
        """
        files = {"file": (filename, file, content_type or "application/octet-stream")}
        data = await self._request("POST", ENDPOINT_USERS_IMAGE, files=files)
        if isinstance(data, dict):
            data = data.get("imageUrl") or data.get("url")
        if not isinstance(data, str) or not data:
            raise NetworkError("Upload response does not contain an image URL")
        return data

    async def search_users(
        self,
        query: str = "",
        page: int = 1,
        page_size: int = 10,
    ) -> UserSearchResult:
        payload = _to_payload(
            UserSearchRequest, {"query": query, "page": page, "page_size": page_size}
        )
        data = await self._request("POST", ENDPOINT_USERS_SEARCH, json=payload)
        return _parse(UserSearchResult, data)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def fetch_roles(self) -> List[RoleInfo]:
        data = await self._request("GET", ENDPOINT_ROLES)
        if data is None:
            return []
        if not isinstance(data, list):
            raise NetworkError(MSG_GENERIC_ERROR, details={"model": "RoleInfo", "reason": "expected a list"})
        return [_parse(RoleInfo, item) for item in data]

    async def get_role_by_id(self, role_id: int) -> RoleInfo:
        data = await self._request("GET", f"{ENDPOINT_ROLES}/{role_id}")
        return _parse(RoleInfo, data)

    async def create_role(self, role: Union[RoleInfo, Dict[str, Any]]) -> RoleInfo:
        data = await self._request("POST", ENDPOINT_ROLES, json=_to_payload(RoleInfo, role))
        return _parse(RoleInfo, data)

    async def update_role(self, role: Union[RoleInfo, Dict[str, Any]]) -> RoleInfo:
        data = await self._request("PUT", ENDPOINT_ROLES, json=_to_payload(RoleInfo, role))
        return _parse(RoleInfo, data)

    async def delete_role(self, role_id: int) -> None:
        await self._request("DELETE", f"{ENDPOINT_ROLES}/{role_id}")
        logger.info(f"[ROLES] Role {role_id} deleted")


def _to_payload(model_cls: Type[ModelT], value: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(value, dict):
        try:
            value = model_cls.model_validate(value)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {model_cls.__name__} data",
                details={"errors": e.errors(include_url=False)},
            ) from e
    return value.to_payload()


def _parse(model_cls: Type[ModelT], data: Any) -> ModelT:
    """
    Разбор тела ответа в модель.

    Raises:
        NetworkError: Ответ сервиса не соответствует модели
    """
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"[RESPONSE] Unexpected {model_cls.__name__} payload: {e.error_count()} error(s)")
        raise NetworkError(
            MSG_GENERIC_ERROR,
            details={"model": model_cls.__name__, "errors": e.errors(include_url=False)},
        ) from e


def _unwrap(body: Any) -> Any:
    """Снимает обертку {"data": ...}, если сервис ее использует"""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _extract_message(body: Any) -> Optional[str]:
    """Человекочитаемое сообщение из тела ошибки, если сервис его прислал"""
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
        # FastAPI 422: detail = [{"msg": ...}, ...]
        if isinstance(value, list):
            parts = [item.get("msg") for item in value if isinstance(item, dict) and item.get("msg")]
            if parts:
                return "; ".join(parts)
    return None
