"""Client configuration and environment settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

API_HOST = "app.billbee.io"
DEFAULT_VERSION = "v1"
DEFAULT_RETRY_DELAY = 2.5


def build_base_url(version: str = DEFAULT_VERSION, host: str = API_HOST) -> str:
    return f"https://{host}/api/{version}"


class ClientConfig(BaseModel):
    """Credentials and API version. Emptiness is checked by the pipeline."""

    api_key: str = Field(default="", alias="apiKey")
    user: str = ""
    password: str = Field(default="", alias="pass")
    version: str = DEFAULT_VERSION

    model_config = {
        "populate_by_name": True,
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("api_key", "user", "password", mode="before")
    @classmethod
    def _none_as_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    def missing_field(self) -> Optional[str]:
        for name in ("api_key", "user", "password"):
            if not getattr(self, name):
                return name
        return None

    @property
    def base_url(self) -> str:
        return build_base_url(self.version or DEFAULT_VERSION)


class ClientOptions(BaseModel):
    preserve_large_integer_precision: bool = Field(default=True, alias="stringify_big_int")
    decode_strategy: Literal["regex", "structural"] = "regex"
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)
    timeout: Optional[float] = Field(default=None, gt=0)

    model_config = {
        "populate_by_name": True,
        "frozen": True,
        "extra": "ignore",
    }


class RuntimeSettings(BaseModel):
    api_key: str = Field(default="", alias="BILLBEE_API_KEY")
    user: str = Field(default="", alias="BILLBEE_USER")
    password: str = Field(default="", alias="BILLBEE_PASSWORD")
    version: str = Field(default=DEFAULT_VERSION, alias="BILLBEE_API_VERSION")
    log_level: str = Field(default="INFO", alias="BILLBEE_LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            api_key=self.api_key,
            user=self.user,
            password=self.password,
            version=self.version,
        )


def _load_environment() -> RuntimeSettings:
    load_dotenv(find_dotenv(usecwd=True), override=False)
    data = {key: value for key, value in os.environ.items() if key.startswith("BILLBEE_") and value}
    return RuntimeSettings(**data)


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return cached runtime settings."""

    return _load_environment()
