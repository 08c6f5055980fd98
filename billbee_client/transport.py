"""Transport backends that put a request descriptor on the wire.

Billbee reads the API key from the X-Billbee-Api-Key header, not a generic X-Api-Key.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import httpx
from pydantic import BaseModel

from .config import ClientConfig, ClientOptions
from .errors import TransportError
from .schemas import RequestDescriptor

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Billbee-Api-Key"
CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        ...

    async def aclose(self) -> None:
        ...


def encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(body, ensure_ascii=False).encode("utf-8")


def default_headers(config: ClientConfig) -> Dict[str, str]:
    return {
        "Content-Type": CONTENT_TYPE,
        API_KEY_HEADER: config.api_key,
    }


class HttpxTransport:
    """Thin wrapper around httpx.AsyncClient bound to the Billbee base address."""

    def __init__(
        self,
        config: ClientConfig,
        options: Optional[ClientOptions] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        options = options or ClientOptions()
        if options.timeout is not None:
            timeout = httpx.Timeout(options.timeout)
        else:
            timeout = httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0)
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=default_headers(config),
            auth=httpx.BasicAuth(config.user, config.password),
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        kwargs: Dict[str, Any] = {}
        if descriptor.params:
            kwargs["params"] = descriptor.params
        if descriptor.has_body:
            kwargs["content"] = encode_body(descriptor.body if descriptor.body is not None else {})
        method = descriptor.method.value
        try:
            response = await self._client.request(method=method, url=descriptor.path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, descriptor.path, exc)
            raise TransportError(f"{type(exc).__name__}: {exc}", descriptor=descriptor) from exc
        return RawResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
