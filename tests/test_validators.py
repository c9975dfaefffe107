"""
Тесты валидаторов: CPF, CNPJ, email, телефон, надёжность пароля
"""

import pytest

from nauth_client.i18n import create_translator
from nauth_client.validators import (
    only_digits,
    validate_cnpj,
    validate_cpf,
    validate_email,
    validate_id_document,
    validate_password_strength,
    validate_phone,
)

VALID_CPF = "52998224725"
VALID_CNPJ = "11222333000181"


# ==================== CPF ====================

class TestCPF:
    def test_formatted_cpf_is_normalized_and_valid(self):
        assert only_digits("529.982.247-25") == VALID_CPF
        assert validate_cpf("529.982.247-25").valid is True

    def test_mutated_last_digit_is_invalid(self):
        assert validate_cpf("529.982.247-26").valid is False

    @pytest.mark.parametrize("position", range(11))
    def test_single_digit_mutation_is_invalid(self, position):
        digits = list(VALID_CPF)
        digits[position] = str((int(digits[position]) + 1) % 10)
        assert not validate_cpf("".join(digits))

    @pytest.mark.parametrize("value", ["11111111111", "00000000000", "99999999999"])
    def test_repeated_digits_are_invalid(self, value):
        assert validate_cpf(value).valid is False

    @pytest.mark.parametrize("value", ["", None, "123", "529982247251", "abc.def.ghi-jk"])
    def test_malformed_input_is_invalid(self, value):
        assert validate_cpf(value).valid is False

    def test_check_digit_zero_when_remainder_below_two(self):
        # 000000006: сумма 12, остаток 1 -> первая цифра 0
        assert validate_cpf("000.000.006-04")
        # 0000000507: сумма 34, остаток 1 -> вторая цифра 0
        assert validate_cpf("000.000.050-70")
        assert validate_cpf("111.444.777-35")


# ==================== CNPJ ====================

class TestCNPJ:
    def test_formatted_cnpj_is_valid(self):
        assert validate_cnpj("11.222.333/0001-81").valid is True

    def test_mutated_check_digit_is_invalid(self):
        assert validate_cnpj("11.222.333/0001-82").valid is False

    @pytest.mark.parametrize("position", range(14))
    def test_single_digit_mutation_is_invalid(self, position):
        digits = list(VALID_CNPJ)
        digits[position] = str((int(digits[position]) + 1) % 10)
        assert not validate_cnpj("".join(digits))

    @pytest.mark.parametrize("value", ["00000000000000", "11111111111111"])
    def test_repeated_digits_are_invalid(self, value):
        assert validate_cnpj(value).valid is False

    def test_cpf_length_is_not_cnpj(self):
        assert validate_cnpj(VALID_CPF).valid is False


def test_id_document_accepts_cpf_or_cnpj():
    assert validate_id_document(VALID_CPF)
    assert validate_id_document("11.222.333/0001-81")
    assert not validate_id_document("123456")


# ==================== Email / phone ====================

@pytest.mark.parametrize(
    "value,expected",
    [
        ("user@test.com", True),
        ("  first.last+tag@example.com.br ", True),
        ("invalid-email", False),
        ("user@domain", False),
        ("", False),
        (None, False),
    ],
)
def test_validate_email(value, expected):
    assert validate_email(value).valid is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("(11) 98765-4321", True),
        ("1134567890", True),
        ("123456789", False),
        ("119876543210", False),
        ("", False),
    ],
)
def test_validate_phone(value, expected):
    assert validate_phone(value).valid is expected


# ==================== Password strength ====================

class TestPasswordStrength:
    def test_lowercase_only_password(self):
        result = validate_password_strength("abcdefgh")
        assert result.score == 2
        assert result.feedback == [
            "Password must contain at least one uppercase letter",
            "Password must contain at least one number",
            "Password must contain at least one special character",
        ]

    def test_empty_password_lists_every_criterion_in_order(self):
        t = create_translator("en")
        result = validate_password_strength("")
        assert result.score == 0
        assert result.feedback == [
            t("validation.passwordMinLength"),
            t("validation.passwordUppercase"),
            t("validation.passwordLowercase"),
            t("validation.passwordNumber"),
            t("validation.passwordSpecialChar"),
        ]

    def test_score_is_capped_at_four(self):
        result = validate_password_strength("Secret123!")
        assert result.score == 4
        assert result.feedback == []
        assert result.is_strong

    def test_no_feedback_once_score_reaches_four(self):
        assert validate_password_strength("Ab1!").feedback == []

    @pytest.mark.parametrize(
        "weaker,stronger",
        [
            ("abcdefgh", "abcdefgh1"),
            ("abcdefgh1", "abcdefgh1!"),
            ("abc", "abcD"),
            ("ABC", "ABC1defgh"),
        ],
    )
    def test_adding_unmet_criterion_never_decreases_score(self, weaker, stronger):
        assert validate_password_strength(stronger).score >= validate_password_strength(weaker).score

    def test_result_is_deterministic(self):
        first = validate_password_strength("abc1")
        second = validate_password_strength("abc1")
        assert first == second

    def test_custom_label_lookup(self):
        t = create_translator("pt")
        result = validate_password_strength("ABCDEFGH", t=t)
        assert result.feedback[0] == "A senha deve conter pelo menos uma letra minúscula"

    def test_label_lookup_receives_keys(self):
        result = validate_password_strength("short", t=lambda key: key)
        assert result.feedback == [
            "validation.passwordMinLength",
            "validation.passwordUppercase",
            "validation.passwordNumber",
            "validation.passwordSpecialChar",
        ]

    def test_lookup_without_text_falls_back_to_key(self):
        labels = {"validation.passwordUppercase": "Needs an uppercase letter"}
        result = validate_password_strength("short", t=labels.get)
        assert result.feedback == [
            "validation.passwordMinLength",
            "Needs an uppercase letter",
            "validation.passwordNumber",
            "validation.passwordSpecialChar",
        ]
