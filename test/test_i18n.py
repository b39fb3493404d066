import json
import os

import pytest

import i18n
from i18n import get_available_languages, get_language, set_language, tr


@pytest.fixture(autouse=True)
def _restore_language():
    previous = get_language()
    yield
    set_language(previous)


def test_german_prompts():
    assert set_language("de")
    assert tr("Start point") == "Startpunkt"
    assert tr("Sketch finished") == "Skizze beendet"


def test_english_is_identity():
    set_language("en")
    assert tr("Start point") == "Start point"


def test_unknown_text_passes_through():
    set_language("de")
    assert tr("Gibt es nicht") == "Gibt es nicht"


def test_unknown_language_keeps_current():
    set_language("en")
    assert not set_language("xx")
    assert get_language() == "en"


def test_available_languages():
    assert {"de", "en"} <= set(get_available_languages())


def test_catalogs_have_same_keys():
    folder = os.path.dirname(i18n.__file__)
    with open(os.path.join(folder, "de.json"), encoding="utf-8") as f:
        de = json.load(f)
    with open(os.path.join(folder, "en.json"), encoding="utf-8") as f:
        en = json.load(f)
    assert set(de) == set(en)


def test_persist_writes_config(tmp_path, monkeypatch):
    config = tmp_path / "lang.json"
    monkeypatch.setattr(i18n, "_config_file", str(config))
    set_language("en", persist=True)
    assert json.loads(config.read_text(encoding="utf-8")) == {"language": "en"}
