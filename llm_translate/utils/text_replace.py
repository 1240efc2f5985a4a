"""Replace ``{{user}}`` and ``{{char}}`` placeholders in role-play text."""

import re
from typing import Optional

_USER_RE = re.compile(r"\{\{user\}\}", re.IGNORECASE)
_CHAR_RE = re.compile(r"\{\{char\}\}", re.IGNORECASE)


def replace_placeholders(text: str, user: Optional[str] = None, char: Optional[str] = None) -> str:
    """
    Substitute placeholders case-insensitively.

    An empty or missing replacement leaves its placeholder untouched.
    """
    result = text
    if user:
        result = _USER_RE.sub(lambda _: user, result)
    if char:
        result = _CHAR_RE.sub(lambda _: char, result)
    return result
