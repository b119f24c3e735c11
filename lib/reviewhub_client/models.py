from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any, Mapping, Union

# Anything httpx accepts as a single multipart file part.
FileContent = Union[bytes, IO[bytes], tuple]

METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


@dataclass(frozen=True)
class FormPayload:
    """Multipart body: plain form fields plus file parts."""

    fields: Mapping[str, str] = field(default_factory=dict)
    files: list[tuple[str, FileContent]] = field(default_factory=list)


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    stream: bool = False

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)

    @property
    def is_form(self) -> bool:
        return isinstance(self.body, FormPayload)
