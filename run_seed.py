import asyncio
import logging

from app.core.config import get_settings
from app.core.db import close_engine, get_session_factory, init_engine
from app.core.logging_config import configure_logging
from app.infra.db.seed import seed_demo_inbox

logger = logging.getLogger(__name__)


async def main() -> None:
    configure_logging(get_settings().log_level)
    engine = init_engine()
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await seed_demo_inbox(session)
            await session.commit()
        logger.info("Demo inbox loaded")
    finally:
        await close_engine(engine)


if __name__ == "__main__":
    asyncio.run(main())
