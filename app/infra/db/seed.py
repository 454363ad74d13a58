from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.enums import ConversationMode, ConversationPriority, InboxConversationStatus
from app.infra.db.models import AiAgent, Contact, InboxConversation

DEFAULT_AI_AGENT_NAME = "Atendente Virtual"

DEMO_CONVERSATIONS: list[dict[str, str | int | None]] = [
    {
        "phone": "+5511999998888",
        "name": "Maria Souza",
        "status": "open",
        "mode": "bot",
        "priority": "urgent",
        "handoff_summary": None,
        "preview": "Quero falar com um atendente, por favor",
        "minutes_ago": 3,
        "unread_count": 2,
    },
    {
        "phone": "+5521988887777",
        "name": "João Lima",
        "status": "open",
        "mode": "bot",
        "priority": "normal",
        "handoff_summary": "Cliente pediu segunda via do boleto",
        "preview": "Pode me mandar o boleto?",
        "minutes_ago": 42,
        "unread_count": 1,
    },
    {
        "phone": "+5531977776666",
        "name": None,
        "status": "open",
        "mode": "bot",
        "priority": "normal",
        "handoff_summary": None,
        "preview": "Qual o horário de funcionamento?",
        "minutes_ago": 180,
        "unread_count": 0,
    },
    {
        "phone": "+5541966665555",
        "name": "Ana Ribeiro",
        "status": "open",
        "mode": "human",
        "priority": "high",
        "handoff_summary": None,
        "preview": "Obrigada pelo retorno!",
        "minutes_ago": 15,
        "unread_count": 0,
    },
    {
        "phone": "+5551955554444",
        "name": "Carlos Mendes",
        "status": "closed",
        "mode": "human",
        "priority": "normal",
        "handoff_summary": None,
        "preview": "Pedido entregue, valeu!",
        "minutes_ago": 60 * 24 * 9,
        "unread_count": 0,
    },
]


async def seed_demo_inbox(session: AsyncSession) -> None:
    existing_rows = await session.execute(select(Contact.phone))
    existing_phones = {phone for phone in existing_rows.scalars().all()}

    agent_row = await session.execute(
        select(AiAgent).where(AiAgent.name == DEFAULT_AI_AGENT_NAME).limit(1)
    )
    ai_agent = agent_row.scalar_one_or_none()
    if ai_agent is None:
        ai_agent = AiAgent(name=DEFAULT_AI_AGENT_NAME, is_active=True)
        session.add(ai_agent)
        await session.flush()

    now = datetime.now(UTC)
    for item in DEMO_CONVERSATIONS:
        phone = str(item["phone"])
        if phone in existing_phones:
            continue

        contact = Contact(phone=phone, name=item["name"])
        session.add(contact)
        await session.flush()

        mode = ConversationMode(str(item["mode"]))
        session.add(
            InboxConversation(
                phone=phone,
                contact_id=contact.id,
                ai_agent_id=ai_agent.id if mode == ConversationMode.BOT else None,
                status=InboxConversationStatus(str(item["status"])),
                mode=mode,
                priority=ConversationPriority(str(item["priority"])),
                handoff_summary=item["handoff_summary"],
                last_message_preview=str(item["preview"]),
                last_message_at=now - timedelta(minutes=int(item["minutes_ago"])),
                unread_count=int(item["unread_count"]),
            )
        )
        await session.flush()
