import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.domain.enums import FeedStatus, FeedTab
from app.domain.status_classifier import ConversationStatusClassifier
from app.utils.formatting import format_phone_for_display, parse_timestamp

logger = logging.getLogger(__name__)

NO_MESSAGES_PLACEHOLDER = "Sem mensagens"

_TAB_STATUS: dict[FeedTab, FeedStatus] = {
    FeedTab.URGENT: FeedStatus.HANDOFF_REQUESTED,
    FeedTab.AI: FeedStatus.AI_ACTIVE,
    FeedTab.HUMAN: FeedStatus.HUMAN_ACTIVE,
}


@dataclass(frozen=True, slots=True)
class ConversationViewModel:
    id: str
    contact_name: str
    contact_phone: str
    status: FeedStatus
    last_message: str
    last_message_at: datetime
    unread_count: int
    ai_agent_name: str | None = None


@dataclass(frozen=True, slots=True)
class CountsSummary:
    total: int = 0
    resolved: int = 0
    handoff_requested: int = 0
    human_active: int = 0
    ai_active: int = 0

    @classmethod
    def from_items(cls, items: Sequence[ConversationViewModel]) -> "CountsSummary":
        by_status = {status: 0 for status in FeedStatus}
        for item in items:
            by_status[item.status] += 1
        return cls(
            total=len(items),
            resolved=by_status[FeedStatus.RESOLVED],
            handoff_requested=by_status[FeedStatus.HANDOFF_REQUESTED],
            human_active=by_status[FeedStatus.HUMAN_ACTIVE],
            ai_active=by_status[FeedStatus.AI_ACTIVE],
        )

    def for_status(self, status: FeedStatus) -> int:
        return getattr(self, status.value)

    def for_tab(self, tab: FeedTab) -> int:
        if tab == FeedTab.ALL:
            return self.total
        return self.for_status(_TAB_STATUS[tab])


@dataclass(frozen=True, slots=True)
class ConversationFeed:
    items: list[ConversationViewModel] = field(default_factory=list)
    counts: CountsSummary = field(default_factory=CountsSummary)


class ConversationFeedAggregator:
    """Turns joined inbox rows into the mini-app feed.

    Rows are read by attribute, so ORM instances and plain objects with the
    same shape are both accepted.
    """

    def __init__(self, classifier: type[ConversationStatusClassifier] | None = None) -> None:
        self.classifier = classifier or ConversationStatusClassifier

    def transform(self, raw: Any) -> ConversationViewModel:
        phone = raw.phone or ""
        contact = getattr(raw, "contact", None)
        contact_name = getattr(contact, "name", None) if contact is not None else None
        ai_agent = getattr(raw, "ai_agent", None)

        return ConversationViewModel(
            id=str(raw.id),
            contact_name=contact_name or format_phone_for_display(phone),
            contact_phone=phone,
            status=self.classifier.classify(raw),
            last_message=getattr(raw, "last_message_preview", None) or NO_MESSAGES_PLACEHOLDER,
            last_message_at=self._resolve_last_message_at(raw),
            unread_count=max(int(getattr(raw, "unread_count", 0) or 0), 0),
            ai_agent_name=getattr(ai_agent, "name", None) if ai_agent is not None else None,
        )

    def build_feed(self, raw_conversations: Iterable[Any]) -> ConversationFeed:
        items: list[ConversationViewModel] = []
        for raw in raw_conversations:
            try:
                items.append(self.transform(raw))
            except Exception:
                logger.warning(
                    "Skipping malformed conversation %r",
                    getattr(raw, "id", None),
                    exc_info=True,
                )
        return ConversationFeed(items=items, counts=CountsSummary.from_items(items))

    @staticmethod
    def _resolve_last_message_at(raw: Any) -> datetime:
        for candidate in (
            getattr(raw, "last_message_at", None),
            getattr(raw, "created_at", None),
        ):
            if candidate is None:
                continue
            try:
                return parse_timestamp(candidate)
            except (TypeError, ValueError):
                continue
        return datetime.now(UTC)


def filter_by_tab(
    items: Iterable[ConversationViewModel], tab: FeedTab
) -> list[ConversationViewModel]:
    if tab == FeedTab.ALL:
        return list(items)
    wanted = _TAB_STATUS[tab]
    return [item for item in items if item.status == wanted]


def sort_urgent_first(
    items: Iterable[ConversationViewModel],
) -> list[ConversationViewModel]:
    # Two stable passes: recency first, then the urgent partition on top.
    by_recency = sorted(items, key=lambda item: item.last_message_at, reverse=True)
    return sorted(
        by_recency,
        key=lambda item: not ConversationStatusClassifier.is_urgent(item.status),
    )


def refine_feed(
    items: Iterable[ConversationViewModel], tab: FeedTab = FeedTab.ALL
) -> list[ConversationViewModel]:
    return sort_urgent_first(filter_by_tab(items, tab))


def tab_counts(counts: CountsSummary) -> dict[FeedTab, int]:
    return {tab: counts.for_tab(tab) for tab in FeedTab}
