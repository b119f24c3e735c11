from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Mapping

import httpx

from .config_types import ClientConfig
from .errors import ApiError, AuthError, NetworkError
from .models import FormPayload, RequestDescriptor

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._base_url = cfg.base_url
        headers = {"User-Agent": "reviewhub-client/0.1.0"}
        if cfg.client_version:
            headers["X-Client-Version"] = cfg.client_version

        # No base_url here: paths are appended to the configured URL verbatim.
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def auth_headers(self) -> dict[str, str]:
        token = self._cfg.current_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(
            self,
            method: str,
            path: str,
            *,
            json_body: Any | None = None,
            form: FormPayload | None = None,
            headers: Mapping[str, str] | None = None,
            stream: bool = False,
    ) -> Any:
        body = form if form is not None else json_body
        return self.dispatch(
            RequestDescriptor(method=method, path=path, headers=dict(headers or {}), body=body, stream=stream)
        )

    def dispatch(self, req: RequestDescriptor) -> Any:
        try:
            response = self._send(req)
            return self._handle_response(req, response)
        except Exception as e:
            logger.warning("API request failed: %s: %r", req.path, e)
            raise

    def iter_stream(self, path: str, r: httpx.Response) -> Iterator[bytes]:
        """Yield the body of a streamed response and close it afterwards."""
        try:
            yield from r.iter_bytes()
        except httpx.RequestError as e:
            err = NetworkError(str(e))
            logger.warning("API request failed: %s: %r", path, err)
            raise err from e
        finally:
            r.close()

    def _send(self, req: RequestDescriptor) -> httpx.Response:
        headers: dict[str, str] = {}
        if not req.is_form:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        headers.update(self.auth_headers())
        headers.update(req.headers)

        kwargs: dict[str, Any] = {}
        if isinstance(req.body, FormPayload):
            kwargs["data"] = dict(req.body.fields)
            kwargs["files"] = list(req.body.files)
        elif req.body is not None:
            kwargs["content"] = json.dumps(req.body)

        url = f"{self._base_url}{req.path}"
        try:
            request = self._client.build_request(req.method, url, headers=headers, **kwargs)
            return self._client.send(request, stream=req.stream)
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

    def _handle_response(self, req: RequestDescriptor, r: httpx.Response) -> Any:
        if not r.is_success:
            try:
                if req.stream:
                    r.read()
            except httpx.RequestError as e:
                raise NetworkError(str(e)) from e
            finally:
                if req.stream:
                    r.close()
            raise _error_for(r)

        if req.stream:
            return r
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            # Not JSON (file download etc.): hand back the response itself.
            return r


def _error_for(r: httpx.Response) -> ApiError:
    status = r.status_code
    msg = f"HTTP error! status: {status}"
    details = None

    data: Any = None
    try:
        data = r.json()
    except ValueError:
        if r.text:
            details = r.text[:1000]

    if isinstance(data, dict):
        details = json.dumps(data, ensure_ascii=False)
        error = data.get("error")
        if isinstance(error, str) and error:
            msg = error

    if status in (401, 403):
        return AuthError(status, msg, details)
    return ApiError(status, msg, details)
