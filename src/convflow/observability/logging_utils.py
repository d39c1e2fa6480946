from __future__ import annotations

from typing import Any, Dict

from ..config import env_bool

_SENSITIVE_KEYS = {"email", "phone", "authorization", "access_token", "password", "secret", "token"}


def redact_text(text: Any) -> Any:
    if not env_bool("CF_LOG_REDACT_EVENTS", True):
        return text
    if not text:
        return text
    return "[REDACTED]"


def redact_metadata(meta: Dict[str, Any]) -> Dict[str, Any]:
    if not env_bool("CF_LOG_REDACT_EVENTS", True):
        return dict(meta)
    redacted: Dict[str, Any] = {}
    for key, value in meta.items():
        if key.lower() in _SENSITIVE_KEYS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def redact_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply text/metadata redaction to event payloads before logging.
    """

    sanitized = dict(event)
    content = sanitized.get("content")
    if isinstance(content, str):
        sanitized["content"] = redact_text(content)
    elif isinstance(content, dict):
        content = dict(content)
        for key in ("text", "payload", "input"):
            if key in content and isinstance(content[key], str):
                content[key] = redact_text(content[key])
        if isinstance(content.get("metadata"), dict):
            content["metadata"] = redact_metadata(content["metadata"])
        sanitized["content"] = content
    if isinstance(sanitized.get("metadata"), dict):
        sanitized["metadata"] = redact_metadata(sanitized["metadata"])
    return sanitized
