from __future__ import annotations

from typing import Any, Optional


def attachment_url(path: Any, storage_base_url: str) -> Optional[str]:
    """Resolve a stored relative path against the static file base URL."""
    if not path:
        return None
    text = str(path).strip()
    if text.startswith(("http://", "https://")):
        return text
    return f"{storage_base_url.rstrip('/')}/{text.lstrip('/')}"


def attachment_name(path: Any) -> str:
    if not path:
        return ""
    return str(path).rstrip("/").split("/")[-1]
