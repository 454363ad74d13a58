from datetime import timedelta

import pytest

from app.domain.enums import FeedStatus, FeedTab
from app.domain.feed import (
    ConversationViewModel,
    CountsSummary,
    refine_feed,
    tab_counts,
)
from tests.unit.fakes import BASE_TIME


def _view(conversation_id: str, status: FeedStatus, minutes_ago: int) -> ConversationViewModel:
    return ConversationViewModel(
        id=conversation_id,
        contact_name=conversation_id,
        contact_phone="+5511999998888",
        status=status,
        last_message="...",
        last_message_at=BASE_TIME - timedelta(minutes=minutes_ago),
        unread_count=0,
    )


@pytest.fixture
def items() -> list[ConversationViewModel]:
    return [
        _view("ai-recent", FeedStatus.AI_ACTIVE, 1),
        _view("urgent-old", FeedStatus.HANDOFF_REQUESTED, 120),
        _view("human-mid", FeedStatus.HUMAN_ACTIVE, 30),
        _view("urgent-new", FeedStatus.HANDOFF_REQUESTED, 10),
        _view("ai-old", FeedStatus.AI_ACTIVE, 300),
        _view("resolved", FeedStatus.RESOLVED, 5),
    ]


def test_all_tab_sorts_urgent_first_then_recency(items) -> None:
    refined = refine_feed(items, FeedTab.ALL)

    assert [item.id for item in refined] == [
        "urgent-new",
        "urgent-old",
        "ai-recent",
        "resolved",
        "human-mid",
        "ai-old",
    ]


@pytest.mark.parametrize(
    ("tab", "expected"),
    [
        (FeedTab.URGENT, ["urgent-new", "urgent-old"]),
        (FeedTab.AI, ["ai-recent", "ai-old"]),
        (FeedTab.HUMAN, ["human-mid"]),
    ],
)
def test_tabs_filter_by_status(items, tab, expected) -> None:
    assert [item.id for item in refine_feed(items, tab)] == expected


def test_no_non_urgent_item_precedes_an_urgent_one(items) -> None:
    statuses = [item.status for item in refine_feed(items)]
    last_urgent = max(
        index for index, status in enumerate(statuses) if status == FeedStatus.HANDOFF_REQUESTED
    )
    first_other = min(
        index for index, status in enumerate(statuses) if status != FeedStatus.HANDOFF_REQUESTED
    )
    assert last_urgent < first_other


def test_equal_timestamps_keep_original_order() -> None:
    items = [
        _view("first", FeedStatus.AI_ACTIVE, 5),
        _view("second", FeedStatus.HUMAN_ACTIVE, 5),
        _view("urgent", FeedStatus.HANDOFF_REQUESTED, 5),
    ]

    assert [item.id for item in refine_feed(items)] == ["urgent", "first", "second"]


def test_refine_does_not_mutate_input(items) -> None:
    original = list(items)
    refine_feed(items, FeedTab.URGENT)
    assert items == original


def test_refine_empty_feed() -> None:
    assert refine_feed([], FeedTab.HUMAN) == []


def test_tab_counts_map_statuses_to_tabs() -> None:
    counts = CountsSummary(total=7, resolved=1, handoff_requested=2, human_active=3, ai_active=1)

    assert tab_counts(counts) == {
        FeedTab.ALL: 7,
        FeedTab.URGENT: 2,
        FeedTab.AI: 1,
        FeedTab.HUMAN: 3,
    }
