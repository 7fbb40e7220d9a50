import re

_SECRET_PATTERN = re.compile(r"sk-[A-Za-z0-9_-]+")


def error_response(message: str) -> dict:
    return {"error": message}


def mask_secrets(text: str) -> str:
    """Hide API keys (sk-...) that providers echo back in error messages."""
    return _SECRET_PATTERN.sub("sk-***", text)
