from typing import Dict, List, Optional, Sequence, Union

import pytest

from billbee_client.config import ClientConfig, ClientOptions
from billbee_client.rest import RequestPipeline
from billbee_client.schemas import RequestDescriptor
from billbee_client.transport import RawResponse

Reply = Union[RawResponse, Exception]


def reply(status_code: int, text: str = "", headers: Optional[Dict[str, str]] = None) -> RawResponse:
    return RawResponse(status_code=status_code, text=text, headers=headers or {})


class StubTransport:
    """Returns canned replies in order and records every descriptor sent."""

    def __init__(self, replies: Sequence[Reply] = ()) -> None:
        self._replies: List[Reply] = list(replies)
        self.calls: List[RequestDescriptor] = []
        self.closed = False

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        self.calls.append(descriptor)
        if not self._replies:
            raise AssertionError(f"unexpected call: {descriptor}")
        item = self._replies.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key="key", user="user@example.com", password="secret")


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_client(config, sleep):
    def _make(*replies: Reply, options: Optional[ClientOptions] = None):
        transport = StubTransport(replies)
        client = RequestPipeline(config, options, transport=transport, sleep=sleep)
        return client, transport

    return _make
