"""Маски ввода для телефона, CEP и CPF/CNPJ.

Форматирование, а не валидация: лишние цифры отбрасываются, неполный ввод
маскируется частично. Повторное форматирование даёт ту же строку.
"""

from .constants import CEP_LENGTH, CNPJ_LENGTH, CPF_LENGTH, PHONE_MAX_DIGITS
from .validators import only_digits


def format_phone(value: str) -> str:
    """
    "11987654321" -> "(11) 98765-4321", "1134567890" -> "(11) 3456-7890"
    """
    digits = only_digits(value)[:PHONE_MAX_DIGITS]
    if not digits:
        return ""
    if len(digits) <= 2:
        return f"({digits}"

    area, number = digits[:2], digits[2:]
    # Мобильный номер с девяткой: 5 цифр до дефиса
    split = 5 if len(digits) == PHONE_MAX_DIGITS else 4
    if len(number) <= split:
        return f"({area}) {number}"
    return f"({area}) {number[:split]}-{number[split:]}"


def format_cep(value: str) -> str:
    """01310100 -> 01310-100"""
    digits = only_digits(value)[:CEP_LENGTH]
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:]}"


def _mask(digits: str, groups: tuple, separators: tuple) -> str:
    parts = []
    start = 0
    for size in groups:
        chunk = digits[start:start + size]
        if not chunk:
            break
        parts.append(chunk)
        start += size

    result = parts[0] if parts else ""
    for sep, part in zip(separators, parts[1:]):
        result += sep + part
    return result


def format_id_document(value: str) -> str:
    """
    CPF (до 11 цифр) -> "529.982.247-25",
    CNPJ (12-14 цифр) -> "11.222.333/0001-81"
    """
    digits = only_digits(value)[:CNPJ_LENGTH]
    if len(digits) <= CPF_LENGTH:
        return _mask(digits, (3, 3, 3, 2), (".", ".", "-"))
    return _mask(digits, (2, 3, 3, 4, 2), (".", ".", "/", "-"))
