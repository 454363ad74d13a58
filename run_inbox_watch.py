"""Terminal view of the mini-app inbox.

Polls the conversation feed endpoint and prints the refined list, urgent
conversations first, using the same labels as the Telegram mini-app.
"""

import argparse
import asyncio
import logging

from app.application.feed_poller import ConversationFeedPoller, FeedState
from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.domain.enums import FeedTab, InboxConversationStatus
from app.domain.feed import refine_feed, tab_counts
from app.infra.http.feed_client import FeedQuery, TelegramFeedClient
from app.utils.formatting import format_relative_time, status_emoji, status_label

logger = logging.getLogger(__name__)

TAB_TITLES: dict[FeedTab, str] = {
    FeedTab.ALL: "Todas",
    FeedTab.URGENT: "Urgente",
    FeedTab.AI: "IA",
    FeedTab.HUMAN: "Humano",
}


def render(state: FeedState, tab: FeedTab) -> str:
    lines: list[str] = []
    counts = tab_counts(state.counts)
    lines.append(
        "  ".join(f"{TAB_TITLES[item]}: {counts[item]}" for item in FeedTab)
    )

    if state.error is not None:
        suffix = " (showing last loaded feed)" if state.snapshot else ""
        lines.append(f"! {state.error}{suffix}")

    conversations = refine_feed(state.conversations, tab)
    if not conversations and state.error is None:
        lines.append("Nenhuma conversa")

    for conversation in conversations:
        unread = f" [{conversation.unread_count}]" if conversation.unread_count else ""
        agent = f" · {conversation.ai_agent_name}" if conversation.ai_agent_name else ""
        lines.append(
            f"{status_emoji(conversation.status)} {conversation.contact_name}{unread}"
            f" - {status_label(conversation.status)}{agent}"
            f" - {format_relative_time(conversation.last_message_at)}"
        )
        lines.append(f"    {conversation.last_message}")
    return "\n".join(lines)


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Watch the SmartZap inbox feed.")
    parser.add_argument("--base-url", default=settings.feed_api_base_url)
    parser.add_argument(
        "--status",
        choices=[status.value for status in InboxConversationStatus],
        default=InboxConversationStatus.OPEN.value,
    )
    parser.add_argument("--search", default=None)
    parser.add_argument(
        "--tab",
        choices=[tab.value for tab in FeedTab],
        default=FeedTab.ALL.value,
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.feed_poll_interval_seconds,
        help="Seconds between refreshes",
    )
    parser.add_argument("--once", action="store_true", help="Fetch a single time and exit")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings.log_level)
    tab = FeedTab(args.tab)

    async def print_state(state: FeedState) -> None:
        print(render(state, tab))
        print()

    query = FeedQuery(
        status=InboxConversationStatus(args.status),
        search=args.search,
    )
    async with TelegramFeedClient(
        args.base_url, timeout=settings.feed_client_timeout_seconds
    ) as client:
        poller = ConversationFeedPoller(
            client,
            query,
            interval_seconds=args.interval,
            stale_seconds=settings.feed_stale_seconds,
            on_update=print_state,
        )
        if args.once:
            await poller.refresh()
            return

        poller.start()
        try:
            await asyncio.Event().wait()
        finally:
            await poller.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped")
