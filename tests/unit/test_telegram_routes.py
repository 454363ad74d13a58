from collections.abc import Iterator
from datetime import timedelta
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.routes.telegram import get_telegram_feed_service
from app.domain.enums import ConversationMode, ConversationPriority, InboxConversationStatus
from app.main import app
from app.services.errors import FeedUnavailableError
from app.services.telegram_feed_service import TelegramFeedService
from tests.unit.fakes import BASE_TIME, FakeAiAgent, FakeContact, FakeInboxConversation

BASE_URL = "http://localhost"
ENDPOINT = "/api/v1/telegram/conversations"


class RecordingRepository:
    def __init__(self, rows: list[FakeInboxConversation]) -> None:
        self.rows = rows
        self.calls: list[dict[str, Any]] = []

    async def list_for_feed(self, **kwargs: Any) -> list[FakeInboxConversation]:
        self.calls.append(kwargs)
        return self.rows


class UnavailableService:
    async def get_feed(self, **_: Any):
        raise FeedUnavailableError("Database not available")


class ExplodingService:
    async def get_feed(self, **_: Any):
        raise RuntimeError("boom")


@pytest.fixture
def repository() -> RecordingRepository:
    return RecordingRepository(
        [
            FakeInboxConversation(
                phone="+5511999998888",
                contact=FakeContact(name="Maria Souza"),
                priority=ConversationPriority.URGENT,
                last_message_preview="Socorro",
                last_message_at=BASE_TIME,
                unread_count=2,
                ai_agent=FakeAiAgent(name="Atendente Virtual"),
            ),
            FakeInboxConversation(
                phone="+5521988887777",
                mode=ConversationMode.HUMAN,
                last_message_at=BASE_TIME - timedelta(hours=1),
            ),
        ]
    )


@pytest.fixture
def override_service(repository) -> Iterator[None]:
    app.dependency_overrides[get_telegram_feed_service] = lambda: TelegramFeedService(
        conversations=repository
    )
    yield
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_list_conversations_returns_feed(override_service, repository) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        response = await client.get(ENDPOINT, params={"status": "open", "search": "maria"})

    assert response.status_code == 200
    body = response.json()
    assert body["counts"] == {
        "total": 2,
        "resolved": 0,
        "handoff_requested": 1,
        "human_active": 1,
        "ai_active": 0,
    }
    first = body["conversations"][0]
    assert first["contactName"] == "Maria Souza"
    assert first["contactPhone"] == "+5511999998888"
    assert first["status"] == "handoff_requested"
    assert first["lastMessage"] == "Socorro"
    assert first["lastMessageAt"].startswith("2026-10-18T12:00:00")
    assert first["unreadCount"] == 2
    assert first["aiAgentName"] == "Atendente Virtual"
    assert body["conversations"][1]["contactName"] == "(21) 98888-7777"
    assert body["conversations"][1]["lastMessage"] == "Sem mensagens"
    assert "aiAgentName" not in body["conversations"][1]

    assert repository.calls == [
        {"status_filter": InboxConversationStatus.OPEN, "search": "maria", "limit": 50}
    ]


@pytest.mark.asyncio
async def test_list_conversations_without_filters(override_service, repository) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        response = await client.get(ENDPOINT, params={"limit": 5})

    assert response.status_code == 200
    assert repository.calls[0] == {"status_filter": None, "search": None, "limit": 5}


@pytest.mark.asyncio
async def test_invalid_status_is_rejected(override_service) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        response = await client.get(ENDPOINT, params={"status": "pending"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_limit_is_bounded(override_service) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        response = await client.get(ENDPOINT, params={"limit": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unavailable_database_returns_500() -> None:
    app.dependency_overrides[get_telegram_feed_service] = lambda: UnavailableService()
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
            response = await client.get(ENDPOINT)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Database not available"}


@pytest.mark.asyncio
async def test_unexpected_error_returns_generic_500() -> None:
    app.dependency_overrides[get_telegram_feed_service] = lambda: ExplodingService()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
            response = await client.get(ENDPOINT)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "Internal server error"
    assert body["path"] == ENDPOINT


@pytest.mark.asyncio
async def test_health() -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
