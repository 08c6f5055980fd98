"""Async client for the Billbee REST API."""
from .bigint import decode_body, stringify_big_ints
from .config import ClientConfig, ClientOptions, RuntimeSettings, get_settings
from .errors import (
    BillbeeError,
    ConfigurationError,
    DecodeError,
    MissingBodyError,
    MissingPathError,
    RequestValidationError,
    ThrottledError,
    TransportError,
)
from .logging_setup import setup_logging
from .rest import BillbeeClient, RequestPipeline
from .schemas import ApiPagedResult, ApiResult, HttpMethod, PagingInformation, RequestDescriptor
from .transport import HttpxTransport, RawResponse, Transport

__all__ = [
    "ApiPagedResult",
    "ApiResult",
    "BillbeeClient",
    "BillbeeError",
    "ClientConfig",
    "ClientOptions",
    "ConfigurationError",
    "DecodeError",
    "HttpMethod",
    "HttpxTransport",
    "MissingBodyError",
    "MissingPathError",
    "PagingInformation",
    "RawResponse",
    "RequestDescriptor",
    "RequestPipeline",
    "RequestValidationError",
    "RuntimeSettings",
    "ThrottledError",
    "Transport",
    "TransportError",
    "decode_body",
    "get_settings",
    "setup_logging",
    "stringify_big_ints",
]
