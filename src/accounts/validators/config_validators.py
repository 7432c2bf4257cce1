"""Normalizers used by the Settings field validators (None passes through)."""


def to_uppercase(value: str | None) -> str | None:
    return value.upper() if isinstance(value, str) else value


def to_lowercase(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def strip_trailing_slash(value: str | None) -> str | None:
    """http://host/ becomes http://host."""
    return value.rstrip("/") if isinstance(value, str) else value
