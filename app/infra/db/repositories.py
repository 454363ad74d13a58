from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from app.domain.enums import InboxConversationStatus
from app.infra.db.models import Contact, InboxConversation

LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class InboxConversationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def feed_statement(
        status_filter: InboxConversationStatus | None = None,
        search: str | None = None,
        limit: int = 50,
    ) -> Select[tuple[InboxConversation]]:
        stmt: Select[tuple[InboxConversation]] = (
            select(InboxConversation)
            .outerjoin(InboxConversation.contact)
            .options(
                contains_eager(InboxConversation.contact),
                joinedload(InboxConversation.ai_agent),
            )
            .order_by(
                InboxConversation.last_message_at.desc().nulls_last(),
                InboxConversation.created_at.desc(),
            )
            .limit(limit)
        )

        if status_filter is not None:
            stmt = stmt.where(InboxConversation.status == status_filter)

        if search:
            pattern = f"%{_escape_like(search)}%"
            stmt = stmt.where(
                or_(
                    InboxConversation.phone.ilike(pattern, escape=LIKE_ESCAPE),
                    Contact.name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        return stmt

    async def list_for_feed(
        self,
        status_filter: InboxConversationStatus | None = None,
        search: str | None = None,
        limit: int = 50,
    ) -> list[InboxConversation]:
        stmt = self.feed_statement(status_filter=status_filter, search=search, limit=limit)
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())
