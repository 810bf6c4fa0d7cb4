"""Provider-facing HTTP endpoints."""

import re

import pytest
from httpx import ASGITransport, AsyncClient

from dropwin.api.dependencies import build_services
from dropwin.api.main import create_app
from dropwin.domain import DOMAINS
from dropwin.domain.errors import ReadFetchError
from dropwin.infrastructure import MemoryBlobStore, Settings
from tests.fakes import FakeProvider, FakeScheduler, make_message

ADDRESS = "quickbox1234@1secmail.com"


async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_diagnostic_reports_poll_interval(client: AsyncClient):
    data = (await client.get("/api/test")).json()
    assert data["success"] is True
    assert data["pollIntervalMs"] == 3000
    assert data["api"] == "1secmail"


async def test_generate_email(client: AsyncClient):
    data = (await client.get("/api/generate-email")).json()

    assert data["success"] is True
    assert data["domain"] in DOMAINS
    assert data["email"] == f"{data['username']}@{data['domain']}"
    assert re.fullmatch(r"[a-z]+\d{4}", data["username"])


async def test_generate_email_falls_back_to_default_domain():
    settings = Settings(_env_file=None, storage_backend="memory", mail_domains=[])
    services = build_services(settings, provider=FakeProvider(), blobs=MemoryBlobStore(), scheduler=FakeScheduler())
    app = create_app(services=services)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/generate-email")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["domain"] == "1secmail.com"


async def test_generate_email_does_not_mask_unexpected_errors(client: AsyncClient, monkeypatch):
    def broken(domains):
        raise RuntimeError("rng exploded")

    monkeypatch.setattr("dropwin.api.routes.generate_address", broken)

    with pytest.raises(RuntimeError):
        await client.get("/api/generate-email")


async def test_get_domains(client: AsyncClient):
    data = (await client.get("/api/get-domains")).json()
    assert data == {"success": True, "domains": list(DOMAINS)}


async def test_get_messages(client: AsyncClient, provider: FakeProvider):
    provider.inboxes[ADDRESS] = [make_message(10, subject="Welcome")]

    response = await client.get("/api/get-messages", params={"email": ADDRESS})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["count"] == 1
    assert "error" not in data
    message = data["messages"][0]
    assert message["id"] == 10
    assert message["from"] == "alice@example.com"
    assert message["subject"] == "Welcome"
    assert message["body"] == message["textBody"] == "body 10"
    assert message["date"].startswith("2024-05-01T12:00:00")


async def test_get_messages_upstream_failure_is_not_fatal(client: AsyncClient, provider: FakeProvider):
    provider.fail_list = True

    response = await client.get("/api/get-messages", params={"email": ADDRESS})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["messages"] == []
    assert data["count"] == 0
    assert data["error"]


async def test_get_messages_requires_valid_email(client: AsyncClient):
    missing = await client.get("/api/get-messages")
    malformed = await client.get("/api/get-messages", params={"email": "nope"})

    for response in (missing, malformed):
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"]


async def test_read_message(client: AsyncClient, provider: FakeProvider):
    provider.inboxes[ADDRESS] = [
        make_message(11, text_body="a < b", attachments=({"filename": "r.pdf", "size": 10},))
    ]

    response = await client.get("/api/read-message", params={"email": ADDRESS, "id": "11"})

    assert response.status_code == 200
    message = response.json()["message"]
    assert message["id"] == 11
    assert message["textBody"] == "a < b"
    assert "a &lt; b" in message["htmlBody"]
    assert message["attachments"] == [{"filename": "r.pdf", "size": 10}]


async def test_read_missing_message_is_404(client: AsyncClient):
    response = await client.get("/api/read-message", params={"email": ADDRESS, "id": "5"})
    assert response.status_code == 404
    assert response.json()["success"] is False


async def test_read_upstream_failure_is_502(client: AsyncClient, provider: FakeProvider):
    provider.read_error = ReadFetchError("Request timeout")
    response = await client.get("/api/read-message", params={"email": ADDRESS, "id": "5"})
    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Could not read the message: Request timeout"}


async def test_read_requires_email_and_numeric_id(client: AsyncClient):
    for params in ({"email": ADDRESS}, {"id": "1"}, {"email": ADDRESS, "id": "abc"}, {"email": ADDRESS, "id": "-3"}):
        response = await client.get("/api/read-message", params=params)
        assert response.status_code == 400, params
        assert response.json()["success"] is False
