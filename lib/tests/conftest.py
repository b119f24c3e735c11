from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from reviewhub_client import ClientConfig, ReviewHubClient

BASE_URL = "http://api.test/api"


class Recorder:
    """Collects outgoing requests and replies with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply: Callable[[httpx.Request], httpx.Response] = lambda _req: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.reply(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def respond(self, status: int = 200, **kwargs: Any) -> None:
        self.reply = lambda _req: httpx.Response(status, **kwargs)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(recorder: Recorder):
    clients: list[ReviewHubClient] = []

    def _make(**cfg_kwargs: Any) -> ReviewHubClient:
        cfg_kwargs.setdefault("base_url", BASE_URL)
        client = ReviewHubClient(ClientConfig(**cfg_kwargs), transport=httpx.MockTransport(recorder))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
