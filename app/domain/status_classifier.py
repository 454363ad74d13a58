from collections.abc import Callable
from typing import Any

from app.domain.enums import (
    ConversationMode,
    ConversationPriority,
    FeedStatus,
    InboxConversationStatus,
)

StatusRule = tuple[Callable[[Any], bool], FeedStatus]


def _is_closed(conversation: Any) -> bool:
    return getattr(conversation, "status", None) == InboxConversationStatus.CLOSED


def _is_bot_mode(conversation: Any) -> bool:
    return getattr(conversation, "mode", None) == ConversationMode.BOT


def _is_urgent_bot(conversation: Any) -> bool:
    return (
        _is_bot_mode(conversation)
        and getattr(conversation, "priority", None) == ConversationPriority.URGENT
    )


def _has_bot_handoff_summary(conversation: Any) -> bool:
    return _is_bot_mode(conversation) and bool(
        getattr(conversation, "handoff_summary", None)
    )


def _is_human_mode(conversation: Any) -> bool:
    return getattr(conversation, "mode", None) == ConversationMode.HUMAN


class ConversationStatusClassifier:
    """Maps an inbox conversation to its mini-app lifecycle state.

    Rules are evaluated in order and the first match wins. Closed conversations
    short-circuit everything else; a human-mode conversation is never flagged
    as a handoff request even when it is urgent.
    """

    _rules: tuple[StatusRule, ...] = (
        (_is_closed, FeedStatus.RESOLVED),
        (_is_urgent_bot, FeedStatus.HANDOFF_REQUESTED),
        (_has_bot_handoff_summary, FeedStatus.HANDOFF_REQUESTED),
        (_is_human_mode, FeedStatus.HUMAN_ACTIVE),
    )
    _fallback: FeedStatus = FeedStatus.AI_ACTIVE

    @classmethod
    def classify(cls, conversation: Any) -> FeedStatus:
        for predicate, result in cls._rules:
            if predicate(conversation):
                return result
        return cls._fallback

    @staticmethod
    def is_urgent(status: FeedStatus) -> bool:
        return status == FeedStatus.HANDOFF_REQUESTED
