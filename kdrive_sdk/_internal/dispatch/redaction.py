"""Redaction of secrets from request diagnostics and debug output."""

from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "access_token",
    "accesstoken",
    "api_key",
    "authorization",
    "cookie",
    "credentials",
    "password",
    "refresh_token",
    "secret",
    "token",
})

REDACTED_VALUE = "[REDACTED]"


def redact_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive keys from a payload.

    Creates a deep copy - the original payload is never mutated. Key
    matching is case-insensitive so ``Authorization`` headers are caught.

    Args:
        payload: The dictionary to redact sensitive values from.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return _redact_recursive(payload)


def _redact_recursive(obj: Any) -> Any:
    """Recursively redact sensitive keys."""
    if isinstance(obj, dict):
        result = {}
        for key, value in obj.items():
            key_lower = key.lower() if isinstance(key, str) else key
            if key_lower in REDACT_KEYS:
                result[key] = REDACTED_VALUE
            else:
                result[key] = _redact_recursive(value)
        return result
    elif isinstance(obj, (list, tuple)):
        return [_redact_recursive(item) for item in obj]
    else:
        return obj
