import re
from datetime import UTC, datetime

from app.domain.enums import FeedStatus

JUST_NOW_LABEL = "agora"
BRAZILIAN_MOBILE_DIGITS = 13

_NON_DIGITS = re.compile(r"\D")

_STATUS_LABELS: dict[FeedStatus, str] = {
    FeedStatus.AI_ACTIVE: "IA Ativo",
    FeedStatus.HUMAN_ACTIVE: "Humano",
    FeedStatus.HANDOFF_REQUESTED: "Quer Humano",
    FeedStatus.RESOLVED: "Resolvido",
}

_STATUS_EMOJIS: dict[FeedStatus, str] = {
    FeedStatus.AI_ACTIVE: "\U0001f916",
    FeedStatus.HUMAN_ACTIVE: "\U0001f464",
    FeedStatus.HANDOFF_REQUESTED: "\U0001f6a8",
    FeedStatus.RESOLVED: "✅",
}


def format_phone_for_display(phone: str) -> str:
    """Render a 13-digit Brazilian mobile number as ``(AA) NNNNN-NNNN``.

    Anything else is returned untouched.
    """
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) != BRAZILIAN_MOBILE_DIGITS:
        return phone
    return f"({digits[2:4]}) {digits[4:9]}-{digits[9:13]}"


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_timestamp(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.fromisoformat(value))


def format_relative_time(value: datetime | str, now: datetime | None = None) -> str:
    moment = parse_timestamp(value)
    reference = ensure_aware(now) if now is not None else datetime.now(UTC)

    elapsed_seconds = (reference - moment).total_seconds()
    minutes = int(elapsed_seconds // 60)
    hours = int(elapsed_seconds // 3600)
    days = int(elapsed_seconds // 86400)

    if minutes < 1:
        return JUST_NOW_LABEL
    if minutes < 60:
        return f"{minutes}min"
    if hours < 24:
        return f"{hours}h"
    if days < 7:
        return f"{days}d"
    return moment.strftime("%d/%m")


def status_label(status: FeedStatus) -> str:
    return _STATUS_LABELS[status]


def status_emoji(status: FeedStatus) -> str:
    return _STATUS_EMOJIS[status]
