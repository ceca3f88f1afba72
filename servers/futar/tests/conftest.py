"""Shared fixtures: a client wired to an in-process stand-in for the service."""

from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from futar import FutarClient, Settings

BASE_URL = "https://futar.test/api/where"


class ServiceStub:
    """Records every request and answers with a configurable envelope."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.envelope: Any = {"code": 200, "text": "OK", "data": {"entry": {}}}
        self.body: Optional[bytes] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.envelope)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_params(self) -> Dict[str, str]:
        return dict(self.last.url.params)

    @property
    def last_endpoint(self) -> str:
        return self.last.url.path.removeprefix("/api/where")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        base_url=BASE_URL,
        timezone="Europe/Budapest",
        api_key="",
        api_version=3,
        include_references=True,
        user_agent="futar-client-tests/1.0",
    )


@pytest.fixture
def stub() -> ServiceStub:
    return ServiceStub()


@pytest_asyncio.fixture
async def http_client(stub: ServiceStub):
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as client:
        yield client


@pytest.fixture
def make_client(settings: Settings, http_client: httpx.AsyncClient):
    def _make(config: Any = None) -> FutarClient:
        return FutarClient(config, http_client=http_client, settings=settings)

    return _make


@pytest.fixture
def client(make_client) -> FutarClient:
    return make_client()
