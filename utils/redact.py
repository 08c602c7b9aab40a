"""Redaction for error text that ends up in logs and reminder records.

Delivery errors can carry request details (auth headers, recipient e-mail
addresses). Strip those before the text is persisted as ``last_error``.
"""

import re
from typing import Union

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Email addresses
    (r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b', '[EMAIL]'),

    # Supabase / API keys in key=value format
    (r'(apikey|api_key|token|secret|password|authorization)["\s:=]+[^\s,}"\']{8,}',
     r'\1=[REDACTED]'),

    # Bearer tokens
    (r'(Bearer|Basic)\s+[A-Za-z0-9\-_\.]+', r'\1 [REDACTED]'),

    # JWT tokens (Supabase anon/service keys are JWTs)
    (r'eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+', '[JWT_TOKEN]'),

    # Discord webhook tokens
    (r'(discord(?:app)?\.com/api/webhooks/\d+/)[A-Za-z0-9\-_]+', r'\1[REDACTED]'),
]

_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]

# Longest error text kept on a reminder record
MAX_ERROR_LENGTH = 500


def redact(text: str) -> str:
    """Replace sensitive substrings with placeholders."""
    if not text:
        return text

    result = text
    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def describe_error(error: Union[BaseException, str, None], max_length: int = MAX_ERROR_LENGTH) -> str:
    """Turn an exception into a short, redacted description.

    Args:
        error: Exception (or message) to describe
        max_length: Maximum length of the returned string

    Returns:
        "<ExceptionType>: <message>" with secrets removed, truncated
    """
    if error is None:
        return ""

    if isinstance(error, BaseException):
        message = str(error) or repr(error)
        text = f"{type(error).__name__}: {message}"
    else:
        text = str(error)

    text = redact(text)
    if len(text) > max_length:
        return text[:max_length - 3] + "..."
    return text
