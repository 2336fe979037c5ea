"""
Small helpers for comparing and building Go literal text.
"""

import re

_WHITESPACE = re.compile(r"[ \t\n]")


def normalize_source(text: str) -> str:
    """Drop spaces, tabs and newlines so formatting differences compare equal."""
    return _WHITESPACE.sub("", text)


def unquote(text: str) -> str:
    """Strip the surrounding quotes (or backticks) of a string literal."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"`'":
        return text[1:-1]
    return text


def quote(text: str) -> str:
    """Wrap ``text`` in double quotes; the content is not escaped."""
    return f'"{text}"'
