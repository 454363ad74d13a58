from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.domain.enums import FeedStatus
from app.domain.feed import ConversationFeed, ConversationViewModel, CountsSummary


class TelegramConversationResponse(BaseModel):
    id: str
    contact_name: str
    contact_phone: str
    status: FeedStatus
    last_message: str
    last_message_at: datetime
    unread_count: int
    ai_agent_name: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_view_model(self) -> ConversationViewModel:
        return ConversationViewModel(
            id=self.id,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            status=self.status,
            last_message=self.last_message,
            last_message_at=self.last_message_at,
            unread_count=self.unread_count,
            ai_agent_name=self.ai_agent_name,
        )


class ConversationCountsResponse(BaseModel):
    total: int = 0
    resolved: int = 0
    handoff_requested: int = 0
    human_active: int = 0
    ai_active: int = 0

    model_config = ConfigDict(from_attributes=True)

    def to_summary(self) -> CountsSummary:
        return CountsSummary(
            total=self.total,
            resolved=self.resolved,
            handoff_requested=self.handoff_requested,
            human_active=self.human_active,
            ai_active=self.ai_active,
        )


class TelegramConversationListResponse(BaseModel):
    conversations: list[TelegramConversationResponse]
    counts: ConversationCountsResponse

    @classmethod
    def from_feed(cls, feed: ConversationFeed) -> "TelegramConversationListResponse":
        return cls(
            conversations=[
                TelegramConversationResponse.model_validate(item) for item in feed.items
            ],
            counts=ConversationCountsResponse.model_validate(feed.counts),
        )

    def to_feed(self) -> ConversationFeed:
        return ConversationFeed(
            items=[conversation.to_view_model() for conversation in self.conversations],
            counts=self.counts.to_summary(),
        )
