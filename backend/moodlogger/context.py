"""Per-application resources with explicit setup and teardown."""
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from moodlogger.config import Settings
from moodlogger.db.session import build_engine, build_session_factory, create_tables
from moodlogger.services.gateway import GatewayClient

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    gateway: GatewayClient

    @classmethod
    async def create(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings)
        if settings.database_create_tables:
            logger.info("Creating tables on the configured database")
            await create_tables(engine)
        if not settings.gateway_configured:
            logger.warning("LLM gateway credential missing; chat requests will fail")
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            gateway=GatewayClient.from_settings(settings),
        )

    async def close(self) -> None:
        await self.gateway.aclose()
        await self.engine.dispose()
