"""
Схемы данных клиента: пользователь, роли, сессия, результаты валидации
"""

import re
from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import MAX_PASSWORD_SCORE


def _digits(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\D", "", value)


class WireModel(BaseModel):
    """Базовая модель: camelCase на проводе, snake_case в Python"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self) -> dict:
        """Сериализация для отправки в сервис (только заданные поля)"""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class UserStatus(IntEnum):
    """Статус учетной записи"""

    ACTIVE = 1
    INACTIVE = 2
    SUSPENDED = 3
    BLOCKED = 4


class UserPhone(WireModel):
    """Телефон пользователя (только цифры)"""

    phone: str

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        return _digits(v)


class UserAddress(WireModel):
    """
    Адрес пользователя.

    Attributes:
        zip_code: CEP, только цифры
        state: Двухбуквенный код штата
    """

    zip_code: str
    address: str
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""

    @field_validator("zip_code")
    @classmethod
    def normalize_zip_code(cls, v: str) -> str:
        return _digits(v)

    @field_validator("state")
    @classmethod
    def normalize_state(cls, v: str) -> str:
        return v.strip().upper()


class RoleInfo(WireModel):
    """Роль пользователя"""

    role_id: int = 0
    slug: str = ""
    name: str


class UserProfile(WireModel):
    """
    Профиль пользователя, как его возвращает сервис.

    Attributes:
        user_id: Идентификатор пользователя
        email: Email пользователя
        is_admin: Флаг администратора
        status: Статус учетной записи
        id_document: CPF или CNPJ в каноническом виде (только цифры)
        roles: Роли пользователя
        phones: Телефоны
        addresses: Адреса
    """

    user_id: int
    email: str
    name: str = ""
    slug: str = ""
    image_url: Optional[str] = None
    is_admin: bool = False
    birth_date: Optional[str] = None
    id_document: Optional[str] = None
    pix_key: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    roles: List[RoleInfo] = Field(default_factory=list)
    phones: List[UserPhone] = Field(default_factory=list)
    addresses: List[UserAddress] = Field(default_factory=list)

    @field_validator("id_document")
    @classmethod
    def normalize_id_document(cls, v: Optional[str]) -> Optional[str]:
        return _digits(v) or None


class UserDraft(WireModel):
    """
    Черновик профиля для регистрации, создания и обновления.

    Все поля опциональны: в payload попадают только явно заданные.
    """

    user_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    image_url: Optional[str] = None
    is_admin: Optional[bool] = None
    birth_date: Optional[str] = None
    id_document: Optional[str] = None
    pix_key: Optional[str] = None
    status: Optional[UserStatus] = None
    roles: Optional[List[RoleInfo]] = None
    phones: Optional[List[UserPhone]] = None
    addresses: Optional[List[UserAddress]] = None

    @field_validator("id_document")
    @classmethod
    def normalize_id_document(cls, v: Optional[str]) -> Optional[str]:
        return _digits(v)


class LoginRequest(WireModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class ChangePasswordRequest(WireModel):
    current_password: str
    new_password: str


class ResetPasswordRequest(WireModel):
    recovery_hash: str
    new_password: str


class UserSearchRequest(WireModel):
    query: str = ""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)


class UserSearchResult(WireModel):
    """Страница результатов поиска пользователей"""

    items: List[UserProfile] = Field(default_factory=list)
    total: int = 0


class Session(WireModel):
    """
    Снимок сессии.

    Пользователь может быть задан только вместе с токеном.
    """

    token: Optional[str] = None
    user: Optional[UserProfile] = None
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_user_requires_token(self) -> "Session":
        if self.user is not None and self.token is None:
            raise ValueError("session user requires a token")
        return self

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None


class ValidationResult(BaseModel):
    """Результат checksum-валидатора"""

    model_config = ConfigDict(frozen=True)

    valid: bool

    def __bool__(self) -> bool:
        return self.valid


class PasswordStrength(BaseModel):
    """Оценка надёжности пароля: score 0..4 и упорядоченный список замечаний"""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=MAX_PASSWORD_SCORE)
    feedback: List[str] = Field(default_factory=list)

    @property
    def is_strong(self) -> bool:
        return self.score >= MAX_PASSWORD_SCORE
