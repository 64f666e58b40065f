import logging

from earth_site.localizer import Localizer

DICTIONARY = {
    "greeting": {"en": "Hello", "ja": "こんにちは"},
    "farewell": {"en": "Goodbye"},
    "blank": {"en": "", "ja": "空"},
}


def test_resolves_key_for_language():
    assert Localizer("en", DICTIONARY)("greeting") == "Hello"
    assert Localizer("ja", DICTIONARY)("greeting") == "こんにちは"


def test_unknown_key_falls_back_to_key(caplog):
    localizer = Localizer("en", DICTIONARY)
    with caplog.at_level(logging.WARNING):
        assert localizer("Program") == "Program"
    assert "unknown il8n key: Program (en)" in caplog.text
    assert localizer.missing == ["Program"]


def test_key_missing_for_one_language(caplog):
    with caplog.at_level(logging.WARNING):
        assert Localizer("en", DICTIONARY)("farewell") == "Goodbye"
        assert Localizer("ja", DICTIONARY)("farewell") == "farewell"
    assert "farewell (ja)" in caplog.text
    assert "(en)" not in caplog.text


def test_empty_translation_counts_as_missing():
    localizer = Localizer("en", DICTIONARY)
    assert localizer("blank") == "blank"
    assert localizer.missing == ["blank"]


def test_localizers_compare_by_language_and_dictionary():
    first = Localizer("en", DICTIONARY)
    first("nope")
    assert first == Localizer("en", DICTIONARY)
    assert first != Localizer("ja", DICTIONARY)
