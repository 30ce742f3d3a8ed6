"""Localized source attachment appended to copied content."""

from __future__ import annotations

import locale
import logging
import os
from typing import Optional, Union

from ..models.config import Language, OutputFormat, Settings
from ..models.page import PageInfo

logger = logging.getLogger(__name__)

SEPARATOR = "\n\n---\n"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {"source": "Source"},
    "zh": {"source": "来源"},
}

DEFAULT_LANGUAGE = "en"


def system_locale() -> str:
    """Locale name of the process ('' when unknown)."""
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(name)
        if value:
            return value
    try:
        return locale.getlocale()[0] or ""
    except ValueError:
        return ""


def resolve_language(language: Union[Language, str, None]) -> str:
    """
    Map a configured language to a message bundle.

    'system' follows the process locale: any Chinese locale selects 'zh',
    everything else 'en'.
    """
    value = language.value if isinstance(language, Language) else (language or Language.SYSTEM.value)
    if value == Language.SYSTEM.value:
        value = system_locale()
    return "zh" if value.lower().startswith("zh") else DEFAULT_LANGUAGE


def get_message(key: str, language: Union[Language, str, None] = None) -> str:
    """Return the localized message, falling back to English, then to the key."""
    bundle = MESSAGES.get(resolve_language(language), {})
    if key in bundle:
        return bundle[key]
    return MESSAGES[DEFAULT_LANGUAGE].get(key, key)


def format_source_info(settings: Settings, page_info: Optional[PageInfo]) -> str:
    """
    Build the source attachment for the given settings.

    Args:
        settings: Copy settings (format, attach flags, language)
        page_info: Title and URL of the source page

    Returns:
        Separator plus source line, or "" when nothing is attached

    Example:
        >>> settings = Settings(output_format="plaintext", attach_title=True, language="en")
        >>> format_source_info(settings, PageInfo(title="My Page"))
        '\\n\\n---\\nSource: My Page'
    """
    if not settings.attaches_source:
        return ""

    page_info = page_info or PageInfo()
    label = get_message("source", settings.language)
    title, url = page_info.title, page_info.url

    if settings.output_format == OutputFormat.MARKDOWN:
        if settings.attach_title and settings.attach_url:
            line = f"> {label}: [{title}]({url})"
        elif settings.attach_title:
            line = f"> {label}: {title}"
        else:
            line = f"> {label}: <{url}>"
    else:
        if settings.attach_title and settings.attach_url:
            line = f"{label}: {title} ({url})"
        elif settings.attach_title:
            line = f"{label}: {title}"
        else:
            line = f"{label}: {url}"

    return SEPARATOR + line
