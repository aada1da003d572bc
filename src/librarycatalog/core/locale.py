"""
Active language selection for the catalogue.

The locale is always passed explicitly to the operations that depend on it
(search, display names, user-facing messages); there is no ambient locale.
"""

from enum import Enum
from typing import Optional


class Locale(str, Enum):
    RU = "ru"
    EN = "en"

    @classmethod
    def resolve(cls, tag: Optional[str], default: Optional["Locale"] = None) -> "Locale":
        """
        Maps a language tag ('en', 'en_US', 'ru-RU', ...) to a Locale.

        Anything that is not English falls back to Russian, unless a
        `default` is given for empty tags.
        """
        if not tag:
            return default if default is not None else cls.RU
        primary = tag.replace("-", "_").split("_")[0].lower()
        return cls.EN if primary == cls.EN.value else cls.RU


class AuthorNameField(str, Enum):
    """Author full-name column matched by search for a given locale."""
    RU_FIO = "ru_fio"
    EN_FIO = "en_fio"

    @classmethod
    def for_locale(cls, locale: Locale) -> "AuthorNameField":
        return cls.EN_FIO if locale is Locale.EN else cls.RU_FIO


def default_locale() -> Locale:
    from librarycatalog.core.config import settings
    return Locale.resolve(settings.DEFAULT_LOCALE)
