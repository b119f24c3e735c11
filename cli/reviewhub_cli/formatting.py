from __future__ import annotations

from datetime import datetime, timezone


def format_date(value: str | None) -> str:
    if not value:
        return "-"
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M")


def format_rating(value) -> str:
    if value is None:
        return "-"
    try:
        stars = max(0, min(5, round(float(value))))
    except (TypeError, ValueError):
        return str(value)
    return "★" * stars + "☆" * (5 - stars)


def truncate(text: str | None, width: int = 60) -> str:
    if not text:
        return ""
    text = " ".join(str(text).split())
    if len(text) <= width:
        return text
    return text[: width - 1].rstrip() + "…"


def items_of(data, *keys: str) -> list:
    """Pull the list out of a paginated envelope like {"products": [...], "pagination": {...}}."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in (*keys, "items", "data"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []
