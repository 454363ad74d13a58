import logging
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import InboxConversationStatus
from app.domain.feed import ConversationFeed, ConversationFeedAggregator
from app.infra.db.repositories import InboxConversationRepository
from app.services.errors import FeedUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 50


class FeedConversationSource(Protocol):
    async def list_for_feed(
        self,
        status_filter: InboxConversationStatus | None = None,
        search: str | None = None,
        limit: int = DEFAULT_FEED_LIMIT,
    ) -> list[Any]: ...


class TelegramFeedService:
    def __init__(
        self,
        session: AsyncSession | None = None,
        conversations: FeedConversationSource | None = None,
        aggregator: ConversationFeedAggregator | None = None,
    ) -> None:
        if conversations is None:
            if session is None:
                raise ValueError("Either a session or a conversation source is required.")
            conversations = InboxConversationRepository(session)
        self.conversations = conversations
        self.aggregator = aggregator or ConversationFeedAggregator()

    async def get_feed(
        self,
        status_filter: InboxConversationStatus | None = None,
        search: str | None = None,
        limit: int = DEFAULT_FEED_LIMIT,
    ) -> ConversationFeed:
        search_term = search.strip() if search else None

        try:
            rows = await self.conversations.list_for_feed(
                status_filter=status_filter,
                search=search_term or None,
                limit=limit,
            )
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Error fetching conversations: %s", exc)
            raise FeedUnavailableError(str(exc) or "Database not available") from exc

        feed = self.aggregator.build_feed(rows)
        logger.debug(
            "Built feed with %d of %d conversations (status=%s, search=%r)",
            feed.counts.total,
            len(rows),
            status_filter.value if status_filter else None,
            search_term,
        )
        return feed
