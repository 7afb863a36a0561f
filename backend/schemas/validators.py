"""Shared Pydantic validators for studio form fields.

Keep these small and dependency-free so schema modules can reuse them without
introducing import cycles.
"""

import unicodedata
from typing import Any, Iterable, Optional


def strip_invisible_edges(value: str) -> str:
    """
    Strip leading/trailing whitespace and Unicode format characters (Cf).

    Form dropdowns occasionally submit values like "\\u200bMirror pose" when
    options are copy-pasted; keyword detection must see the plain text.
    """
    if not isinstance(value, str):
        return value
    start = 0
    end = len(value)
    while start < end and (
        value[start].isspace() or unicodedata.category(value[start]) == "Cf"
    ):
        start += 1
    while end > start and (
        value[end - 1].isspace() or unicodedata.category(value[end - 1]) == "Cf"
    ):
        end -= 1
    return value[start:end]


def ensure_utf8_encodable(value: str) -> str:
    """
    Reject strings that cannot be encoded to UTF-8 (e.g., unpaired surrogates).

    Form text is embedded in the prompt sent to Gemini and echoed in the
    response debug info, both of which are UTF-8 encoded.
    """
    if not isinstance(value, str):
        return value
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("Text contains invalid Unicode characters")
    return value


def normalize_optional_text(value: Any) -> Any:
    """Normalize optional text fields: trim, blank->None, enforce UTF-8."""
    if value is None or not isinstance(value, str):
        return value
    text = strip_invisible_edges(value)
    if not text:
        return None
    return ensure_utf8_encodable(text)


def normalize_text_list(value: Any) -> Optional[list[str]]:
    """Normalize a multi-select field: str or list -> list of non-blank items, or None."""
    if value is None:
        return None
    items: Iterable[Any] = [value] if isinstance(value, str) else value
    normalized = []
    for item in items:
        text = normalize_optional_text(item)
        if isinstance(text, str):
            normalized.append(text)
    return normalized or None
