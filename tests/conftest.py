"""
Core configuration. The identity server is simulated with an httpx mock
transport that records every request it receives.
"""

import httpx
import pytest
import pytest_asyncio
import structlog

from realmgroups.service.groups import GroupService
from realmgroups.toolkit.client import AdminClient

BASE_URL = "https://idp.example.org/admin"


class FakeServer:
    """
    Answers each request with the next queued response (or a 200 with no
    body) and keeps the requests for inspection.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []

    def respond(self, *responses: httpx.Response):
        self.responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.responses:
            return self.responses.pop(0)

        return httpx.Response(200)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def server():
    yield FakeServer()


@pytest.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest_asyncio.fixture(loop_scope="session")
async def admin_client(server, logger):
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(server.handler)
    ) as transport:
        yield AdminClient(BASE_URL, client=transport, log=logger)


@pytest.fixture
def group_service(admin_client, logger):
    yield GroupService(client=admin_client, log=logger)
