# opsboard/storage/factory.py
import logging
from typing import Optional

from opsboard.core.config import Settings, StorageBackend
from opsboard.core.exceptions import ConfigurationError
from opsboard.storage.base import Storage
from opsboard.storage.memory_storage import MemoryStorage
from opsboard.storage.sql_storage import SqlStorage

logger = logging.getLogger(__name__)


def select_backend(settings: Settings) -> StorageBackend:
    if settings.STORAGE_BACKEND is not None:
        return StorageBackend(settings.STORAGE_BACKEND)
    return StorageBackend.SQL if settings.DATABASE_URL else StorageBackend.MEMORY


def create_storage(settings: Optional[Settings] = None) -> Storage:
    """Build the storage handle for this process.

    Called once at startup. A persistent backend that cannot be built raises
    ``ConfigurationError``; there is no fallback to memory.
    """
    if settings is None:
        settings = Settings()

    backend = select_backend(settings)

    if backend is StorageBackend.SQL:
        if not settings.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is required when STORAGE_BACKEND=sql")
        storage = SqlStorage(
            settings.DATABASE_URL,
            echo=settings.SQL_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
    else:
        if settings.DATABASE_URL:
            logger.warning("DATABASE_URL is set but STORAGE_BACKEND=memory; data will not be persisted")
        storage = MemoryStorage()

    logger.info(f"Using {storage.backend_name} storage backend")
    return storage


async def open_storage(settings: Settings) -> Storage:
    storage = create_storage(settings)
    if settings.AUTO_CREATE_TABLES:
        await storage.init_schema()
    return storage
