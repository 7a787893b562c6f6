import json
import re
from typing import Any, List, Optional

TRUE_VALUES = {"true", "1", "yes", "on"}


def normalize_str_list(value: Any) -> List[str]:
    """
    Map every accepted wire shape of a list field onto ``list[str]``:
    a real list, a JSON encoded list, a comma separated string or one bare string.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                decoded = None
            if isinstance(decoded, list):
                return normalize_str_list(decoded)
        return [part.strip() for part in text.split(",") if part.strip()]
    return [str(value)]


def normalize_bool(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def generate_slug(text: str) -> str:
    """'Gel Pen (Blue) 0.5mm' -> 'gel-pen-blue-05mm'"""
    slug = re.sub(r"[^a-z0-9\s-]", "", (text or "").lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug).strip("-")
