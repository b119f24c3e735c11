from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable

DEFAULT_BASE_URL = "http://localhost:5000/api"
ENV_BASE_URL = "REVIEWHUB_API_BASE_URL"

TokenProvider = Callable[[], "str | None"]


def default_base_url() -> str:
    return os.getenv(ENV_BASE_URL, "").strip() or DEFAULT_BASE_URL


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = field(default_factory=default_base_url)
    token: str | None = None
    # Called on every request; takes precedence over the static token.
    token_provider: TokenProvider | None = None
    timeout_s: float | None = None
    client_version: str | None = None

    def current_token(self) -> str | None:
        token = self.token_provider() if self.token_provider is not None else self.token
        return token or None
