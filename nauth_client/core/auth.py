"""Контроллер состояния аутентификации поверх API клиента."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from ..exceptions import SessionExpiredError
from ..schemas import Session, UserDraft, UserProfile
from .session import SessionListener, SessionState

if TYPE_CHECKING:
    from ..api_client import APIClient

logger = logging.getLogger(__name__)


class AuthController:
    """
    Владеет снимком сессии и делегирует сетевые операции APIClient.

    Подписывается на событие потери сессии клиента: ответ 401 на любой
    запрос очищает снимок. Создается явно и передается по ссылке.
    """

    def __init__(self, client: "APIClient", state: Optional[SessionState] = None) -> None:
        self.client = client
        self.state = state if state is not None else SessionState()
        self._unsubscribe_client: Optional[Callable[[], None]] = client.on_unauthorized(
            self._on_unauthorized
        )

    @property
    def session(self) -> Session:
        return self.state.session

    @property
    def user(self) -> Optional[UserProfile]:
        return self.state.user

    @property
    def is_authenticated(self) -> bool:
        return self.state.check_authentication()

    @property
    def redirect_on_unauthorized(self) -> Optional[str]:
        """Путь для UI слоя после потери сессии"""
        return self.client.config.redirect_on_unauthorized

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        return self.state.subscribe(listener)

    def _on_unauthorized(self) -> None:
        logger.warning("[AUTH] Session lost, clearing state")
        self.state.clear()

    async def login(self, email: str, password: str) -> UserProfile:
        user = await self.client.login(email, password)
        self.state.set(self.client.token_store.get(), user)
        return user

    async def register(self, draft: Union[UserDraft, Dict[str, Any]]) -> UserProfile:
        """
        Регистрация. Если сервис вернул токен, пользователь сразу входит.
        """
        user = await self.client.register(draft)
        token = self.client.token_store.get()
        if token:
            self.state.set(token, user)
        return user

    async def logout(self) -> None:
        """Выход из системы и очистка состояния."""
        await self.client.logout()
        self.state.clear()

    async def restore(self) -> Optional[UserProfile]:
        """
        Восстановить сессию по сохраненному токену.

        Returns:
            Пользователь, или None если токена нет или он недействителен
        """
        token = self.client.token_store.get()
        if not token:
            logger.info("[RESTORE] No stored token")
            return None

        logger.info(f"[RESTORE] Found stored token (len={len(token)}), loading user")
        try:
            user = await self.client.get_me()
        except SessionExpiredError:
            # Токен и состояние уже очищены обработчиком 401
            logger.warning("[RESTORE] Stored token rejected")
            return None

        self.state.set(token, user)
        logger.info(f"[RESTORE] Session restored for user: {user.email}")
        return user

    async def refresh_user(self) -> UserProfile:
        """Перечитать профиль текущего пользователя."""
        user = await self.client.get_me()
        self.state.set(self.client.token_store.get(), user)
        return user

    async def update_user(self, draft: Union[UserDraft, Dict[str, Any]]) -> UserProfile:
        """
        Обновить профиль. Снимок меняется, только если обновлен текущий пользователь.
        """
        user = await self.client.update_user(draft)
        current = self.state.user
        if current is not None and current.user_id == user.user_id:
            self.state.update_user(user)
        return user

    def close(self) -> None:
        """Отписаться от событий клиента."""
        if self._unsubscribe_client is not None:
            self._unsubscribe_client()
            self._unsubscribe_client = None
