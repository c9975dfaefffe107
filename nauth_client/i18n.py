"""Тексты сообщений валидации (en, pt) и функция поиска по ключу."""

import logging
from typing import Any, Callable, Dict, Optional

from .constants import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)

Translator = Callable[..., str]

EN: Dict[str, str] = {
    "validation.passwordMinLength": "Password must be at least 8 characters",
    "validation.passwordUppercase": "Password must contain at least one uppercase letter",
    "validation.passwordLowercase": "Password must contain at least one lowercase letter",
    "validation.passwordNumber": "Password must contain at least one number",
    "validation.passwordSpecialChar": "Password must contain at least one special character",
    "validation.passwordsDontMatch": "Passwords don't match",
    "validation.emailInvalid": "Please enter a valid email address",
    "validation.nameMinLength": "Name must be at least 2 characters",
    "validation.invalidCpfCnpj": "Invalid CPF or CNPJ",
    "validation.phoneInvalid": "Invalid phone number",
    "validation.zipCodeLength": "ZIP code must have 8 digits",
    "validation.stateLength": "State must have 2 letters",
    "validation.invalidRecoveryLink": "Invalid or expired recovery link",
    "status.active": "Active",
    "status.inactive": "Inactive",
    "status.suspended": "Suspended",
    "status.blocked": "Blocked",
}

PT: Dict[str, str] = {
    "validation.passwordMinLength": "A senha deve ter pelo menos 8 caracteres",
    "validation.passwordUppercase": "A senha deve conter pelo menos uma letra maiúscula",
    "validation.passwordLowercase": "A senha deve conter pelo menos uma letra minúscula",
    "validation.passwordNumber": "A senha deve conter pelo menos um número",
    "validation.passwordSpecialChar": "A senha deve conter pelo menos um caractere especial",
    "validation.passwordsDontMatch": "As senhas não coincidem",
    "validation.emailInvalid": "Informe um endereço de email válido",
    "validation.nameMinLength": "O nome deve ter pelo menos 2 caracteres",
    "validation.invalidCpfCnpj": "CPF ou CNPJ inválido",
    "validation.phoneInvalid": "Telefone inválido",
    "validation.zipCodeLength": "O CEP deve ter 8 dígitos",
    "validation.stateLength": "O estado deve ter 2 letras",
    "validation.invalidRecoveryLink": "Link de recuperação inválido ou expirado",
    "status.active": "Ativo",
    "status.inactive": "Inativo",
    "status.suspended": "Suspenso",
    "status.blocked": "Bloqueado",
}

DEFAULT_TRANSLATIONS: Dict[str, Dict[str, str]] = {"en": EN, "pt": PT}


def merge_translations(
    custom: Optional[Dict[str, Dict[str, str]]] = None,
) -> Dict[str, Dict[str, str]]:
    """
    Объединяет встроенные таблицы с пользовательскими.

    Пользовательские ключи перекрывают встроенные; новые языки добавляются целиком.
    """
    resources = {lang: dict(table) for lang, table in DEFAULT_TRANSLATIONS.items()}
    for lang, table in (custom or {}).items():
        resources.setdefault(lang, {}).update(table)
    return resources


def create_translator(
    language: str = DEFAULT_LANGUAGE,
    translations: Optional[Dict[str, Dict[str, str]]] = None,
) -> Translator:
    """
    Создает функцию поиска текста по ключу.

    Порядок поиска: выбранный язык, затем английский, затем сам ключ.

    Args:
        language: Код языка
        translations: Пользовательские таблицы {язык: {ключ: текст}}

    Returns:
        Функция ``t(key, **params)``
    """
    resources = merge_translations(translations)
    if language not in resources:
        logger.warning(f"[I18N] Unknown language '{language}', falling back to {DEFAULT_LANGUAGE}")

    primary = resources.get(language, {})
    fallback = resources[DEFAULT_LANGUAGE]

    def t(key: str, **params: Any) -> str:
        text = primary.get(key) or fallback.get(key) or key
        if params:
            try:
                return text.format(**params)
            except (KeyError, IndexError):
                return text
        return text

    return t
