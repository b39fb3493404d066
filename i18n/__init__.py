"""
MashSketch - Internationalization (i18n)
Übersetzungen der Tool-Hinweise aus JSON-Dateien

Verwendung:
    from i18n import tr, set_language, get_language

    set_language('de')  # oder 'en'
    label = tr("Start point")  # -> "Startpunkt" (in Deutsch)
"""

import json
import os
from typing import Dict, List
from loguru import logger

# Globale Variablen
_current_language = 'de'  # Default: Deutsch
_translations: Dict[str, Dict[str, str]] = {}
_fallback_language = 'en'

# Pfad zu den Übersetzungsdateien
_i18n_dir = os.path.dirname(os.path.abspath(__file__))
_config_file = os.path.join(os.path.expanduser('~'), '.mashsketch.json')


def _load_config():
    """Lädt die gespeicherte Spracheinstellung"""
    global _current_language
    try:
        if os.path.exists(_config_file):
            with open(_config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
                _current_language = config.get('language', 'de')
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"[i18n] Config nicht lesbar: {e}")


def _save_config():
    """Speichert die Spracheinstellung"""
    try:
        with open(_config_file, 'w', encoding='utf-8') as f:
            json.dump({'language': _current_language}, f)
    except OSError as e:
        logger.debug(f"[i18n] Config nicht schreibbar: {e}")


def load_language(lang: str) -> bool:
    """Lädt eine Sprachdatei"""
    filepath = os.path.join(_i18n_dir, f'{lang}.json')

    if os.path.exists(filepath):
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                _translations[lang] = json.load(f)
            return True
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"[i18n] Sprachdatei {filepath} fehlerhaft: {e}")
            return False
    return False


def set_language(lang: str, persist: bool = False) -> bool:
    """Setzt die aktuelle Sprache (optional dauerhaft)"""
    global _current_language

    if lang not in _translations:
        if not load_language(lang):
            logger.info(f"[i18n] Sprache '{lang}' nicht gefunden, bleibe bei '{_current_language}'")
            return False

    _current_language = lang
    if persist:
        _save_config()
    return True


def get_language() -> str:
    """Gibt die aktuelle Sprache zurück"""
    return _current_language


def get_available_languages() -> List[str]:
    """Gibt alle verfügbaren Sprachen zurück"""
    return sorted(name[:-5] for name in os.listdir(_i18n_dir) if name.endswith('.json'))


def tr(text: str, context: str = None) -> str:
    """
    Übersetzt einen Text.

    Args:
        text: Der zu übersetzende Text (in Englisch als Schlüssel)
        context: Optionaler Kontext für mehrdeutige Texte

    Returns:
        Übersetzter Text oder Original wenn keine Übersetzung gefunden
    """
    trans = _translations.get(_current_language)
    if trans:
        if context:
            key = f"{context}::{text}"
            if key in trans:
                return trans[key]
        if text in trans:
            return trans[text]

    return text


# Alias für kürzere Schreibweise
_ = tr


# Beim Import: Config laden und Sprachen laden
_load_config()
load_language(_fallback_language)
load_language('de')
