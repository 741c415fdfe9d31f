"""Internationalization (i18n) support for brform validation messages."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from brform.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = Path(__file__).parent / "translations"
FALLBACK_LOCALE = "en"


class I18n:
    """Simple internationalization system.

    Supports Portuguese (pt_BR) and English (en).
    Falls back to English if a key is missing, then to the key itself.
    """

    SUPPORTED_LOCALES = SUPPORTED_LOCALES
    DEFAULT_LOCALE = DEFAULT_LOCALE

    def __init__(self, locale: Optional[str] = None):
        """Initialize i18n system.

        Args:
            locale: Locale to use (e.g., "pt_BR", "en").
                   If None, reads ``BRFORM_LOCALE`` and defaults to pt_BR.
        """
        self.current_locale = self._normalize(locale or self._detect_locale())
        self.translations = {}
        self._load_translations()

    def _detect_locale(self) -> str:
        """Detect locale from the BRFORM_LOCALE environment variable."""
        value = os.getenv("BRFORM_LOCALE", "")
        return value.split(".")[0] if value else self.DEFAULT_LOCALE

    def _normalize(self, locale: str) -> str:
        # Map common variants ("pt", "pt-BR", "en_US")
        code = locale.replace("-", "_")
        if code.startswith("pt"):
            return "pt_BR"
        if code.startswith("en"):
            return "en"
        logger.warning("Unsupported locale '%s', using '%s'", locale, self.DEFAULT_LOCALE)
        return self.DEFAULT_LOCALE

    def _load_translations(self) -> None:
        """Load translation files for current locale and fallback."""
        self.translations[FALLBACK_LOCALE] = self._load_json(TRANSLATIONS_DIR / "en.json")

        if self.current_locale != FALLBACK_LOCALE:
            locale_file = TRANSLATIONS_DIR / f"{self.current_locale}.json"
            if locale_file.exists():
                self.translations[self.current_locale] = self._load_json(locale_file)
            else:
                logger.warning(
                    "Translation file for '%s' not found, using English", self.current_locale
                )
                self.current_locale = FALLBACK_LOCALE

    def _load_json(self, filepath: Path) -> dict:
        """Load translation JSON file."""
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading translation file %s: %s", filepath, e)
            return {}

    def translate(self, key: str, **kwargs) -> str:
        """Translate a key to current locale.

        Args:
            key: Translation key
            **kwargs: Format parameters for the translation string

        Returns:
            Translated string with parameters formatted
        """
        translation = self.translations.get(self.current_locale, {}).get(key)
        if not translation:
            translation = self.translations.get(FALLBACK_LOCALE, {}).get(key)
        if not translation:
            return key
        return translation.format(**kwargs) if kwargs else translation

    def set_locale(self, locale: str) -> None:
        """Change current locale.

        Args:
            locale: New locale code (e.g., "pt_BR", "en")
        """
        self.current_locale = self._normalize(locale)
        self._load_translations()

    def get_locale(self) -> str:
        """Get current locale."""
        return self.current_locale

    def get_supported_locales(self) -> list[str]:
        """Get list of supported locales."""
        return list(self.SUPPORTED_LOCALES)


# Global i18n instance
_i18n_instance: Optional[I18n] = None


def get_i18n() -> I18n:
    """Get global i18n instance."""
    global _i18n_instance
    if _i18n_instance is None:
        _i18n_instance = I18n()
    return _i18n_instance


def _(key: str, **kwargs) -> str:
    """Shorthand for translating a key.

    Args:
        key: Translation key
        **kwargs: Format parameters

    Returns:
        Translated string
    """
    return get_i18n().translate(key, **kwargs)


def set_locale(locale: str) -> None:
    """Set application locale.

    Args:
        locale: Locale code (e.g., "pt_BR", "en")
    """
    get_i18n().set_locale(locale)


def get_locale() -> str:
    """Get current locale."""
    return get_i18n().get_locale()
