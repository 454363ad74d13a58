import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from app.domain.enums import InboxConversationStatus
from app.domain.feed import ConversationFeed
from app.schemas.telegram import TelegramConversationListResponse
from app.services.errors import FeedResponseError, FeedUnavailableError

logger = logging.getLogger(__name__)

CONVERSATIONS_PATH = "/api/v1/telegram/conversations"
FEED_UNAVAILABLE_MESSAGE = "Falha ao carregar conversas"


@dataclass(frozen=True, slots=True)
class FeedQuery:
    status: InboxConversationStatus | None = None
    search: str | None = None
    limit: int | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.status is not None:
            params["status"] = self.status.value
        if self.search:
            params["search"] = self.search
        if self.limit is not None:
            params["limit"] = str(self.limit)
        return params


class TelegramFeedClient:
    """Async client for the mini-app conversation feed endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def fetch_feed(self, query: FeedQuery | None = None) -> ConversationFeed:
        params = (query or FeedQuery()).to_params()

        try:
            response = await self._client.get(CONVERSATIONS_PATH, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Feed request failed: %s", exc)
            raise FeedUnavailableError(FEED_UNAVAILABLE_MESSAGE) from exc

        if response.is_error:
            raise FeedResponseError(response.status_code, self._error_detail(response))

        try:
            payload = TelegramConversationListResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Feed response could not be decoded: %s", exc)
            raise FeedUnavailableError(FEED_UNAVAILABLE_MESSAGE) from exc

        return payload.to_feed()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TelegramFeedClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or FEED_UNAVAILABLE_MESSAGE
        if isinstance(body, dict) and body.get("detail"):
            return str(body["detail"])
        return FEED_UNAVAILABLE_MESSAGE
