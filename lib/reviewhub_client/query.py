"""Query-string construction shared by the endpoint wrappers.

Optional filters are dropped when falsy (``None``, ``""``, ``0``, ``False``) or
equal to an explicit ``default``. Free-form parameter mappings are forwarded as
given, minus ``None`` and ``""``. Everything is rendered as a string in
insertion order.
"""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode

_UNSET = object()


def render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Query:
    def __init__(self) -> None:
        self._pairs: list[tuple[str, str]] = []

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | None) -> Query:
        query = cls()
        for key, value in (params or {}).items():
            if value is None or value == "":
                continue
            query.always(key, value)
        return query

    def always(self, key: str, value: Any) -> Query:
        self._pairs.append((key, render_value(value)))
        return self

    def optional(self, key: str, value: Any, default: Any = _UNSET) -> Query:
        if not value:
            return self
        if default is not _UNSET and value == default:
            return self
        return self.always(key, value)

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def encode(self) -> str:
        return urlencode(self._pairs)

    def apply(self, path: str) -> str:
        query = self.encode()
        return f"{path}?{query}" if query else path

    def __bool__(self) -> bool:
        return bool(self._pairs)
