"""Async Billbee REST client with precision-safe decoding and one-shot 429 retry."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_fixed

from .bigint import decode_body
from .config import ClientConfig, ClientOptions, get_settings
from .errors import ConfigurationError, MissingBodyError, MissingPathError, ThrottledError, TransportError
from .schemas import HttpMethod, RequestDescriptor
from .transport import HttpxTransport, RawResponse, Transport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# The throttled attempt plus exactly one retry.
MAX_ATTEMPTS = 2

Sleep = Callable[[float], Awaitable[Any]]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, BaseModel):
        return False
    if isinstance(value, (Mapping, list, tuple, set, str, bytes)):
        return len(value) == 0
    # scalars are not a request body
    return True


def _retry_after(raw: RawResponse) -> Optional[float]:
    for key, value in raw.headers.items():
        if key.lower() == "retry-after":
            try:
                return float(value)
            except ValueError:
                return None
    return None


def _error_message(raw: RawResponse) -> str:
    text = raw.text or ""
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("ErrorMessage", "Message", "message"):
            if payload.get(key):
                return str(payload[key])
    return text[:200] or "request failed"


def _log_throttle(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    descriptor = getattr(exc, "descriptor", None)
    target = f"{descriptor.method.value} {descriptor.path}" if descriptor else "request"
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning("Rate limit reached for %s, retrying once in %.1fs", target, delay)


class RequestPipeline:
    """Builds authenticated requests, decodes responses and retries once on HTTP 429."""

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any]],
        options: Union[ClientOptions, Mapping[str, Any], None] = None,
        *,
        transport: Optional[Transport] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if not isinstance(config, ClientConfig):
            config = ClientConfig.model_validate(dict(config))
        missing = config.missing_field()
        if missing:
            raise ConfigurationError(missing)
        if options is not None and not isinstance(options, ClientOptions):
            options = ClientOptions.model_validate(dict(options))

        self._config = config
        self._options = options or ClientOptions()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(config, self._options)
        self._sleep = sleep

    @classmethod
    def from_env(cls, options: Union[ClientOptions, Mapping[str, Any], None] = None, **kwargs: Any) -> "RequestPipeline":
        """Build a client from BILLBEE_* environment variables (and .env)."""
        return cls(get_settings().client_config(), options, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request({"path": path, "method": HttpMethod.GET, "params": params or None})

    async def post(self, path: str, body: Any) -> Any:
        return await self.request({"path": path, "method": HttpMethod.POST, "body": body})

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request({"path": path, "method": HttpMethod.PUT, "body": body})

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.request({"path": path, "method": HttpMethod.PATCH, "body": body})

    async def delete(self, path: str) -> Any:
        return await self.request({"path": path, "method": HttpMethod.DELETE})

    del_ = delete

    async def request(
        self,
        descriptor: Union[RequestDescriptor, Mapping[str, Any]],
        response_model: Optional[Type[M]] = None,
    ) -> Any:
        """Send a descriptor ``{path, method, params?, body?}``.

        When ``response_model`` is given the decoded payload is validated into it.
        """
        descriptor = self._prepare(descriptor)
        payload = await self._send(descriptor)
        if response_model is not None:
            return response_model.model_validate(payload)
        return payload

    def _prepare(self, descriptor: Union[RequestDescriptor, Mapping[str, Any]]) -> RequestDescriptor:
        if isinstance(descriptor, Mapping):
            if not descriptor.get("path"):
                raise MissingPathError()
            descriptor = RequestDescriptor.model_validate(dict(descriptor))
        if not descriptor.path:
            raise MissingPathError()
        if descriptor.method is HttpMethod.POST and _is_empty(descriptor.body):
            raise MissingBodyError()
        if descriptor.method in (HttpMethod.PUT, HttpMethod.PATCH) and descriptor.body is None:
            descriptor = descriptor.model_copy(update={"body": {}})
        return descriptor

    async def _send(self, descriptor: RequestDescriptor) -> Any:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ThrottledError),
            wait=wait_fixed(self._options.retry_delay),
            stop=stop_after_attempt(MAX_ATTEMPTS),
            sleep=self._sleep,
            before_sleep=_log_throttle,
            reraise=True,
        ):
            with attempt:
                return await self._send_once(descriptor)
        raise RuntimeError("unreachable")

    async def _send_once(self, descriptor: RequestDescriptor) -> Any:
        logger.debug("%s %s", descriptor.method.value, descriptor.path)
        raw = await self._transport.send(descriptor)
        if raw.status_code == 429:
            raise ThrottledError(body=raw.text, descriptor=descriptor, retry_after=_retry_after(raw))
        if not raw.ok:
            raise TransportError(
                _error_message(raw),
                status_code=raw.status_code,
                body=raw.text,
                descriptor=descriptor,
            )
        return decode_body(
            raw.text,
            preserve_precision=self._options.preserve_large_integer_precision,
            strategy=self._options.decode_strategy,
        )

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "RequestPipeline":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


BillbeeClient = RequestPipeline
