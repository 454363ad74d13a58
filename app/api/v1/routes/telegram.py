from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.db import get_db_session
from app.domain.enums import InboxConversationStatus
from app.schemas.common import ApiError
from app.schemas.telegram import TelegramConversationListResponse
from app.services.errors import FeedUnavailableError
from app.services.telegram_feed_service import TelegramFeedService

router = APIRouter()
settings = get_settings()


async def get_telegram_feed_service(
    session: AsyncSession = Depends(get_db_session),
) -> TelegramFeedService:
    return TelegramFeedService(session=session)


@router.get(
    "/conversations",
    response_model=TelegramConversationListResponse,
    response_model_exclude_none=True,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiError}},
)
async def list_telegram_conversations(
    status_filter: InboxConversationStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=120),
    limit: int = Query(default=settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
    service: TelegramFeedService = Depends(get_telegram_feed_service),
) -> TelegramConversationListResponse:
    try:
        feed = await service.get_feed(
            status_filter=status_filter,
            search=search,
            limit=limit,
        )
    except FeedUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=exc.reason,
        ) from exc
    return TelegramConversationListResponse.from_feed(feed)
