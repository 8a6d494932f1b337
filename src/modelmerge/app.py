"""Application wiring entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from modelmerge.adapters.sqlalchemy.unit_of_work import startup
from modelmerge.common.logging import configure_logging
from modelmerge.config import get_database_config, get_logging_config

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

log = getLogger(__name__)


async def bootstrap(*, engine: AsyncEngine | None = None, force: bool = False) -> None:
    """Load ``.env``, configure logging, and start the SQLAlchemy adapter.

    Record types persisted through the adapter must be mapped (see
    ``map_persistent_entity``) before this runs so their tables are created.
    """

    load_dotenv()
    configure_logging(level=get_logging_config().level, force=force)
    if engine is None:
        await startup(database_uri=get_database_config().uri, force=force)
    else:
        await startup(engine=engine, force=force)
    log.info("modelmerge bootstrapped")
