"""Tests for error redaction."""

from utils.redact import describe_error, redact


def test_redacts_tokens_and_emails():
    text = "POST failed for alice@example.com with Authorization: Bearer abc.def-123"

    cleaned = redact(text)

    assert "alice@example.com" not in cleaned
    assert "abc.def-123" not in cleaned
    assert "[EMAIL]" in cleaned


def test_redacts_webhook_token():
    cleaned = redact("https://discord.com/api/webhooks/123456/SECRETTOKENvalue")
    assert "SECRETTOKENvalue" not in cleaned
    assert cleaned.endswith("/123456/[REDACTED]")


def test_describe_error_format_and_truncation():
    assert describe_error(ValueError("bad date")) == "ValueError: bad date"
    assert describe_error(None) == ""

    long = describe_error(RuntimeError("x" * 2000), max_length=50)
    assert len(long) == 50
    assert long.endswith("...")
