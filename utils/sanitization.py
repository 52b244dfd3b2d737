# utils/sanitization.py
from typing import Any, Optional
import re

CONTROL_CHARS = r"[\x00-\x08\x0b-\x0c\x0e-\x1f\x7f-\x9f]"


def clean_text(value: Optional[str]) -> str:
    if value is None:
        return ""

    text = re.sub(CONTROL_CHARS, "", value)
    text = text.strip()

    # Optional: normalize whitespace
    text = re.sub(r"\s+", " ", text)

    return text


def is_nonempty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(clean_text(value))


def normalize_name(value: Any) -> Optional[str]:
    """Case-insensitive key used to match journal names exactly."""
    if not isinstance(value, str):
        return None
    return value.lower()
