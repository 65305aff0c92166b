from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import pytest

from udyamreg.config.settings import UpstreamConfig
from udyamreg.core.errors import UpstreamError
from udyamreg.domain.location import ResolutionStatus
from udyamreg.infrastructure.api_clients import PostalPincodeClient
from udyamreg.infrastructure.api_clients.postal_pincode import parse_pincode_payload

SUCCESS = [
    {
        "Message": "Number of pincode(s) found:21",
        "Status": "Success",
        "PostOffice": [
            {"Name": "Baroda House", "Block": "New Delhi", "District": "Central Delhi", "State": "Delhi"},
            {"Name": "Bengali Market", "Block": "New Delhi", "District": "Central Delhi", "State": "Delhi"},
        ],
    }
]


class _FakeResponse:
    def __init__(self, status: int, body: Any = None, text: str = ""):
        self.status = status
        self._body = body
        self._text = text

    async def json(self, content_type=None):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None


class _FakeSession:
    closed = False

    def __init__(self, response=None, exc: Exception = None):
        self.response = response
        self.exc = exc
        self.urls = []

    def get(self, url, params=None):
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.response

    async def close(self):
        self.closed = True


def _client(session) -> PostalPincodeClient:
    client = PostalPincodeClient(base_url="https://pin.example/")
    client._session = session
    return client


def test_parse_takes_first_post_office():
    outcome = parse_pincode_payload("110001", SUCCESS)
    assert outcome.status is ResolutionStatus.FOUND
    assert outcome.record.city == "Baroda House"
    assert outcome.record.district == "Central Delhi"
    assert outcome.record.state == "Delhi"


def test_parse_city_falls_back_to_block():
    payload = [{"Status": "Success", "PostOffice": [{"Block": "Sadar", "District": "Agra", "State": "Uttar Pradesh"}]}]
    assert parse_pincode_payload("282001", payload).record.city == "Sadar"


def test_parse_error_status_is_not_found():
    payload = [{"Message": "No records found", "Status": "Error", "PostOffice": None}]
    outcome = parse_pincode_payload("999999", payload)
    assert outcome.status is ResolutionStatus.NOT_FOUND
    assert outcome.reason == "No records found"


@pytest.mark.parametrize(
    "office",
    [{"Name": "X", "State": "Delhi"}, {"Name": "X", "District": "  ", "State": "Delhi"}, {"Name": "X", "District": "D"}],
)
def test_parse_partial_record_is_not_found(office):
    payload = [{"Status": "Success", "PostOffice": [office]}]
    assert parse_pincode_payload("110001", payload).status is ResolutionStatus.NOT_FOUND


@pytest.mark.parametrize("payload", [{}, [], "nope", [None]])
def test_parse_unexpected_shape_is_unavailable(payload):
    assert parse_pincode_payload("110001", payload).status is ResolutionStatus.UNAVAILABLE


def test_parse_empty_post_office_list_is_not_found():
    assert parse_pincode_payload("110001", [{"Status": "Success", "PostOffice": []}]).status is ResolutionStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_resolve_success_builds_url():
    session = _FakeSession(_FakeResponse(200, SUCCESS))
    outcome = await _client(session).resolve("110001")
    assert outcome.status is ResolutionStatus.FOUND
    assert session.urls == ["https://pin.example/pincode/110001"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 429, 500, 503])
async def test_http_errors_are_unavailable(status):
    outcome = await _client(_FakeSession(_FakeResponse(status, text="err"))).resolve("110001")
    assert outcome.status is ResolutionStatus.UNAVAILABLE


@pytest.mark.asyncio
async def test_timeout_is_unavailable():
    outcome = await _client(_FakeSession(exc=asyncio.TimeoutError())).resolve("110001")
    assert outcome.status is ResolutionStatus.UNAVAILABLE
    assert outcome.reason == "timeout"


@pytest.mark.asyncio
async def test_connection_error_is_unavailable():
    outcome = await _client(_FakeSession(exc=aiohttp.ClientConnectionError("refused"))).resolve("110001")
    assert outcome.status is ResolutionStatus.UNAVAILABLE


@pytest.mark.asyncio
async def test_bad_json_is_unavailable():
    client = _client(_FakeSession(_FakeResponse(200, ValueError("not json"))))
    with pytest.raises(UpstreamError):
        await client.get("pincode/110001")
    outcome = await client.resolve("110001")
    assert outcome.status is ResolutionStatus.UNAVAILABLE


@pytest.mark.asyncio
async def test_close_releases_session():
    session = _FakeSession(_FakeResponse(200, SUCCESS))
    async with _client(session) as client:
        await client.resolve("110001")
    assert session.closed
    assert client._session is None


def test_from_config():
    client = PostalPincodeClient.from_config(
        UpstreamConfig(base_url="https://pin.example/", timeout_seconds=2.5, user_agent="t")
    )
    assert client.base_url == "https://pin.example"
    assert client.timeout.total == 2.5
