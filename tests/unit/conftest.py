"""Unit test fixtures with HTTP mocking."""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import respx
from httpx import Response

from solrbridge.core.models import ConnectionConfig
from solrbridge.session import SolrSession

# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock() -> Iterator[respx.MockRouter]:
    """Provide a respx mock router for HTTP mocking.

    Use this when you need fine-grained control over mocked responses.
    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


# ============================================================================
# Mock Response Helpers
# ============================================================================


def solr_response(q_time: int = 3, status: int = 0, **body: Any) -> Response:
    """Create a successful Solr JSON response."""
    return Response(
        200,
        json={"responseHeader": {"status": status, "QTime": q_time}, **body},
    )


def solr_error_response(status_code: int = 400, message: str = "undefined field foo") -> Response:
    """Create a Solr error response."""
    return Response(
        status_code,
        json={
            "responseHeader": {"status": status_code, "QTime": 1},
            "error": {"msg": message, "code": status_code},
        },
    )


@pytest.fixture
def mock_responses():
    """Provide helper functions for creating mock responses."""
    return {
        "solr": solr_response,
        "error": solr_error_response,
    }


@dataclass
class UpdateHandler:
    """
    Side effect for the /update route.

    Records the command of every request ("add", "commit", "rollback",
    "delete") and answers with the configured response or error.
    """

    commands: list[str] = field(default_factory=list)
    bodies: list[Any] = field(default_factory=list)
    responses: dict[str, Response | type[Exception]] = field(default_factory=dict)

    def respond(self, command: str, response: Response | type[Exception]) -> None:
        self.responses[command] = response

    def __call__(self, request: httpx.Request) -> Response:
        body = json.loads(request.content)
        command = "add" if isinstance(body, list) else next(iter(body))
        self.commands.append(command)
        self.bodies.append(body)

        response = self.responses.get(command)
        if response is None:
            return solr_response(q_time=5)
        if isinstance(response, type) and issubclass(response, Exception):
            raise response(f"Mocked {command} failure", request=request)
        return response


@dataclass
class SolrMock:
    """Pre-registered routes of a mocked Solr core."""

    router: respx.MockRouter
    ping: respx.Route
    select: respx.Route
    update: respx.Route
    updates: UpdateHandler

    @property
    def call_count(self) -> int:
        return len(self.router.calls)


@pytest.fixture
def solr_mock(respx_mock: respx.MockRouter, solr_url: str) -> SolrMock:
    """Mocked Solr core with ping, select and update routes."""
    updates = UpdateHandler()
    return SolrMock(
        router=respx_mock,
        ping=respx_mock.get(f"{solr_url}/admin/ping").mock(
            return_value=Response(
                200,
                json={"responseHeader": {"status": 0, "QTime": 2}, "status": "OK"},
            )
        ),
        select=respx_mock.get(f"{solr_url}/select").mock(return_value=solr_response()),
        update=respx_mock.post(f"{solr_url}/update").mock(side_effect=updates),
        updates=updates,
    )


# ============================================================================
# Session Fixtures
# ============================================================================


@pytest.fixture
def session(solr_mock: SolrMock, solr_url: str) -> Iterator[SolrSession]:
    """A session connected to the mocked Solr core."""
    solr_session = SolrSession(ConnectionConfig(server_address=solr_url))
    solr_session.connect()
    yield solr_session
    solr_session.disconnect()
