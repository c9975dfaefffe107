"""Снимок сессии с уведомлением подписчиков."""

import logging
from typing import Callable, List, Optional

from ..schemas import Session, UserProfile

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]


class SessionState:
    """
    Изменяемый снимок сессии (токен + пользователь).

    Создается пустым (не авторизован); каждое изменение рассылается
    подписчикам в порядке подписки.
    """

    def __init__(self) -> None:
        self._session = Session()
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> Optional[UserProfile]:
        return self._session.user

    def check_authentication(self) -> bool:
        """
        Проверка авторизации пользователя.

        Returns:
            True если есть и токен, и пользователь
        """
        return self._session.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Подписка на изменения сессии.

        Returns:
            Функция отписки
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, token: Optional[str], user: Optional[UserProfile]) -> None:
        self._session = Session(token=token, user=user)
        self._notify()

    def update_user(self, user: UserProfile) -> None:
        """Обновляет профиль в текущей сессии (токен не меняется)"""
        current = self._session
        self._session = Session(token=current.token, user=user, expires_at=current.expires_at)
        self._notify()

    def clear(self) -> None:
        """Очистка сессии (logout)"""
        if self._session == Session():
            return
        logger.info("Clearing session state")
        self._session = Session()
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._session)
            except Exception:
                # Снимок уже изменен; остальные подписчики должны его получить
                logger.exception("[SESSION] Listener failed")
