import re

_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def sanitize_text(text: str) -> str:
    """Neutralize markup in free text shown to admins."""
    text = text.replace("<", "&lt;").replace(">", "&gt;")
    text = _JS_SCHEME.sub("", text)
    return _EVENT_HANDLER.sub("", text)
