"""
Валидаторы пользовательских данных: CPF, CNPJ, email, телефон, надёжность пароля.

Все функции чистые и никогда не бросают исключений: некорректный ввод
(пустая строка, неверная длина, посторонние символы) даёт ``valid=False``.
"""

import re
from typing import List, Optional, Sequence

from .constants import (
    CNPJ_FIRST_WEIGHTS,
    CNPJ_LENGTH,
    CNPJ_SECOND_WEIGHTS,
    CPF_LENGTH,
    EMAIL_PATTERN,
    MAX_PASSWORD_SCORE,
    MIN_PASSWORD_LENGTH,
    PHONE_MAX_DIGITS,
    PHONE_MIN_DIGITS,
)
from .i18n import Translator, create_translator
from .schemas import PasswordStrength, ValidationResult

_EMAIL_RE = re.compile(EMAIL_PATTERN)


def only_digits(value: Optional[str]) -> str:
    """Оставляет в строке только цифры"""
    if not value:
        return ""
    return re.sub(r"\D", "", value)


def _check_digit(digits: Sequence[int], weights: Sequence[int]) -> int:
    """
    Контрольная цифра по модулю 11.

    Returns:
        0 если остаток меньше 2, иначе 11 - остаток
    """
    remainder = sum(d * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def _has_valid_shape(digits: str, length: int) -> bool:
    return len(digits) == length and len(set(digits)) > 1


def validate_cpf(value: Optional[str]) -> ValidationResult:
    """
    Проверка CPF (11 цифр).

    Args:
        value: CPF с маской или без ("529.982.247-25" или "52998224725")

    Returns:
        ValidationResult(valid=True) если обе контрольные цифры совпадают
    """
    cpf = only_digits(value)
    if not _has_valid_shape(cpf, CPF_LENGTH):
        return ValidationResult(valid=False)

    numbers = [int(ch) for ch in cpf]
    first = _check_digit(numbers[:9], range(10, 1, -1))
    second = _check_digit(numbers[:10], range(11, 1, -1))
    return ValidationResult(valid=first == numbers[9] and second == numbers[10])


def validate_cnpj(value: Optional[str]) -> ValidationResult:
    """
    Проверка CNPJ (14 цифр).

    Args:
        value: CNPJ с маской или без ("11.222.333/0001-81" или "11222333000181")

    Returns:
        ValidationResult(valid=True) если обе контрольные цифры совпадают
    """
    cnpj = only_digits(value)
    if not _has_valid_shape(cnpj, CNPJ_LENGTH):
        return ValidationResult(valid=False)

    numbers = [int(ch) for ch in cnpj]
    first = _check_digit(numbers[:12], CNPJ_FIRST_WEIGHTS)
    second = _check_digit(numbers[:13], CNPJ_SECOND_WEIGHTS)
    return ValidationResult(valid=first == numbers[12] and second == numbers[13])


def validate_id_document(value: Optional[str]) -> ValidationResult:
    """Документ валиден, если это корректный CPF или CNPJ"""
    return ValidationResult(valid=bool(validate_cpf(value)) or bool(validate_cnpj(value)))


def validate_email(value: Optional[str]) -> ValidationResult:
    if not value:
        return ValidationResult(valid=False)
    return ValidationResult(valid=_EMAIL_RE.match(value.strip()) is not None)


def validate_phone(value: Optional[str]) -> ValidationResult:
    """Телефон с DDD: 10 цифр (фиксированный) или 11 (мобильный)"""
    digits = only_digits(value)
    return ValidationResult(valid=PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS)


# (ключ перевода, проверка) в порядке вывода замечаний
_PASSWORD_CRITERIA = (
    ("validation.passwordMinLength", lambda p: len(p) >= MIN_PASSWORD_LENGTH),
    ("validation.passwordUppercase", lambda p: re.search(r"[A-Z]", p) is not None),
    ("validation.passwordLowercase", lambda p: re.search(r"[a-z]", p) is not None),
    ("validation.passwordNumber", lambda p: re.search(r"[0-9]", p) is not None),
    ("validation.passwordSpecialChar", lambda p: re.search(r"[^A-Za-z0-9]", p) is not None),
)

_default_t = create_translator()


def validate_password_strength(
    password: Optional[str],
    t: Optional[Translator] = None,
) -> PasswordStrength:
    """
    Оценка надёжности пароля.

    Каждый выполненный критерий (длина >= 8, заглавная, строчная, цифра,
    спецсимвол) добавляет балл, максимум 4. Замечания перечисляют
    невыполненные критерии в фиксированном порядке; при score == 4 список пуст.

    Args:
        password: Пароль
        t: Функция поиска текста по ключу (по умолчанию английские тексты)

    Returns:
        PasswordStrength(score, feedback)
    """
    password = password or ""
    lookup = t or _default_t

    score = 0
    feedback: List[str] = []
    for key, check in _PASSWORD_CRITERIA:
        if check(password):
            score += 1
        else:
            text = lookup(key)
            feedback.append(text if isinstance(text, str) and text else key)

    score = min(score, MAX_PASSWORD_SCORE)
    if score == MAX_PASSWORD_SCORE:
        feedback = []
    return PasswordStrength(score=score, feedback=feedback)
