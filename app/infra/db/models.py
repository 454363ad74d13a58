from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.domain.enums import ConversationMode, ConversationPriority, InboxConversationStatus


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Contact(Base, TimestampMixin):
    __tablename__ = "contacts"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    phone: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(160), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    conversations: Mapped[list["InboxConversation"]] = relationship(back_populates="contact")


class AiAgent(Base, TimestampMixin):
    __tablename__ = "ai_agents"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    conversations: Mapped[list["InboxConversation"]] = relationship(back_populates="ai_agent")


class InboxConversation(Base, TimestampMixin):
    __tablename__ = "inbox_conversations"
    __table_args__ = (
        CheckConstraint("unread_count >= 0", name="ck_inbox_conversations_unread_count"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    phone: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    contact_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    ai_agent_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("ai_agents.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[InboxConversationStatus] = mapped_column(
        Enum(
            InboxConversationStatus,
            name="inbox_conversation_status",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=InboxConversationStatus.OPEN,
    )
    mode: Mapped[ConversationMode] = mapped_column(
        Enum(ConversationMode, name="inbox_conversation_mode", values_callable=_enum_values),
        nullable=False,
        default=ConversationMode.BOT,
    )
    priority: Mapped[ConversationPriority] = mapped_column(
        Enum(
            ConversationPriority,
            name="inbox_conversation_priority",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ConversationPriority.NORMAL,
    )
    handoff_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_message_preview: Mapped[str | None] = mapped_column(String(500), nullable=True)
    last_message_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    unread_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    contact: Mapped[Contact | None] = relationship(back_populates="conversations")
    ai_agent: Mapped[AiAgent | None] = relationship(back_populates="conversations")
