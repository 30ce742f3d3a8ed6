"""Cleanup of text copied out of code blocks."""

from __future__ import annotations

import re
from typing import Optional

_LINE_NUMBER_RE = re.compile(r"^(\s*)[0-9]+\.?\s")
_PROMPT_RE = re.compile(r"^(\s*)[$>]\s")
_COPY_LABEL_RE = re.compile(r"(Copy|复制代码)\s*$")
_FENCED_RE = re.compile(r"^(`{3,}[^\n]*\n)(.*?)(\n`{3,})\s*$", re.DOTALL)
_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-(.+)$")

CODE_TAGS = {"pre", "code"}


def clean_code_block(text: str) -> str:
    """
    Remove copy artifacts from code text.

    Strips gutter line numbers ("1 ", "12. ") and shell prompts ("$ ",
    "> ") at line starts, and a trailing "Copy" button label.

    Example:
        >>> clean_code_block("1 $ pip install x\\nCopy")
        'pip install x\\n'
    """
    lines = []
    for line in text.split("\n"):
        line = _LINE_NUMBER_RE.sub(r"\1", line, count=1)
        line = _PROMPT_RE.sub(r"\1", line, count=1)
        lines.append(line)
    return _COPY_LABEL_RE.sub("", "\n".join(lines))


def clean_fenced_code(markdown: str) -> str:
    """Apply clean_code_block to the body of a fenced block, keeping the fences."""
    match = _FENCED_RE.match(markdown)
    if match is None:
        return clean_code_block(markdown)
    opening, body, closing = match.groups()
    body = clean_code_block(body).rstrip("\n")
    return f"{opening}{body}{closing}"


def code_language(element) -> Optional[str]:
    """
    Find the language hint of a pre/code element from 'language-*' or
    'lang-*' classes on itself or a nested code element.

    Works on BeautifulSoup tags.
    """
    candidates = [element]
    code = element.find("code") if hasattr(element, "find") else None
    if code is not None:
        candidates.append(code)
    for candidate in candidates:
        classes = candidate.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        for cls in classes:
            match = _LANGUAGE_CLASS_RE.match(cls)
            if match:
                return match.group(1)
    return None
