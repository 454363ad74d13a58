from enum import Enum


class InboxConversationStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ConversationMode(str, Enum):
    BOT = "bot"
    HUMAN = "human"


class ConversationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class FeedStatus(str, Enum):
    AI_ACTIVE = "ai_active"
    HUMAN_ACTIVE = "human_active"
    HANDOFF_REQUESTED = "handoff_requested"
    RESOLVED = "resolved"


class FeedTab(str, Enum):
    ALL = "all"
    URGENT = "urgent"
    AI = "ai"
    HUMAN = "human"
