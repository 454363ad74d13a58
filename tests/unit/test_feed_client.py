from datetime import UTC, datetime

import httpx
import pytest

from app.domain.enums import FeedStatus, InboxConversationStatus
from app.infra.http.feed_client import CONVERSATIONS_PATH, FeedQuery, TelegramFeedClient
from app.services.errors import FeedResponseError, FeedUnavailableError

BASE_URL = "http://inbox.test"

FEED_PAYLOAD = {
    "conversations": [
        {
            "id": "c1",
            "contactName": "Maria Souza",
            "contactPhone": "+5511999998888",
            "status": "handoff_requested",
            "lastMessage": "Quero falar com alguém",
            "lastMessageAt": "2026-10-18T11:55:00+00:00",
            "unreadCount": 2,
            "aiAgentName": "Atendente Virtual",
        },
        {
            "id": "c2",
            "contactName": "(21) 98888-7777",
            "contactPhone": "+5521988887777",
            "status": "ai_active",
            "lastMessage": "Sem mensagens",
            "lastMessageAt": "2026-10-18T10:00:00Z",
            "unreadCount": 0,
        },
    ],
    "counts": {
        "total": 2,
        "resolved": 0,
        "handoff_requested": 1,
        "human_active": 0,
        "ai_active": 1,
    },
}


def _client(handler) -> TelegramFeedClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return TelegramFeedClient(BASE_URL, client=http_client)


@pytest.mark.asyncio
async def test_fetch_feed_decodes_payload_and_sends_params() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=FEED_PAYLOAD)

    client = _client(handler)
    feed = await client.fetch_feed(
        FeedQuery(status=InboxConversationStatus.OPEN, search="maria", limit=20)
    )

    assert requests[0].url.path == CONVERSATIONS_PATH
    assert dict(requests[0].url.params) == {"status": "open", "search": "maria", "limit": "20"}
    assert [item.status for item in feed.items] == [
        FeedStatus.HANDOFF_REQUESTED,
        FeedStatus.AI_ACTIVE,
    ]
    assert feed.items[0].last_message_at == datetime(2026, 10, 18, 11, 55, tzinfo=UTC)
    assert feed.items[0].ai_agent_name == "Atendente Virtual"
    assert feed.items[1].ai_agent_name is None
    assert feed.counts.total == 2
    assert feed.counts.handoff_requested == 1


@pytest.mark.asyncio
async def test_empty_query_sends_no_params() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"conversations": [], "counts": {}})

    feed = await _client(handler).fetch_feed()

    assert requests[0].url.query == b""
    assert feed.items == []
    assert feed.counts.total == 0


@pytest.mark.asyncio
async def test_server_error_raises_response_error_with_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Database not available"})

    with pytest.raises(FeedResponseError) as exc_info:
        await _client(handler).fetch_feed()

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Database not available"


@pytest.mark.asyncio
async def test_transport_error_raises_feed_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedUnavailableError):
        await _client(handler).fetch_feed()


@pytest.mark.asyncio
async def test_invalid_body_raises_feed_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(FeedUnavailableError):
        await _client(handler).fetch_feed()
