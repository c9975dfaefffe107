"""Тесты поиска текстов по ключу."""

from nauth_client.i18n import create_translator, merge_translations


def test_bundled_languages():
    assert create_translator("en")("status.blocked") == "Blocked"
    assert create_translator("pt")("status.blocked") == "Bloqueado"


def test_unknown_language_falls_back_to_english():
    assert create_translator("de")("status.active") == "Active"


def test_unknown_key_returns_key():
    assert create_translator("pt")("validation.somethingNew") == "validation.somethingNew"


def test_custom_translations_override_and_extend():
    t = create_translator(
        "pt",
        {
            "pt": {"status.active": "Habilitado"},
            "es": {"status.active": "Activo"},
        },
    )
    assert t("status.active") == "Habilitado"
    assert t("status.inactive") == "Inativo"
    assert create_translator("es", {"es": {"status.active": "Activo"}})("status.active") == "Activo"


def test_merge_does_not_mutate_bundled_tables():
    merge_translations({"en": {"status.active": "Enabled"}})
    assert create_translator("en")("status.active") == "Active"


def test_placeholders():
    t = create_translator("en", {"en": {"userEdit.phoneLabel": "Phone {index}"}})
    assert t("userEdit.phoneLabel", index=2) == "Phone 2"
    assert t("userEdit.phoneLabel", other=1) == "Phone {index}"
