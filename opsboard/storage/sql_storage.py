# opsboard/storage/sql_storage.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlalchemy.future import select
from sqlalchemy.sql import delete, update

from opsboard.core.database import (
    close_db,
    create_engine_from_url,
    create_session_factory,
    init_db,
    session_scope,
)
from opsboard.core.decorators import log_execution_time
from opsboard.models import model
from opsboard.schemas import schema
from opsboard.storage.base import S, Storage
from opsboard.storage.repository import Repository

logger = logging.getLogger(__name__)

MODELS = {
    schema.User: model.User,
    schema.Project: model.Project,
    schema.Task: model.Task,
    schema.Employee: model.Employee,
    schema.Finance: model.Finance,
    schema.Attendance: model.Attendance,
}


class SqlRepository(Repository[S]):
    """One statement per call against a single mapped table"""

    def __init__(
        self,
        record_type: Type[S],
        model_class,
        engine: AsyncEngine,
        session_factory: async_sessionmaker,
    ):
        super().__init__(record_type)
        self.model_class = model_class
        self.table = model_class.__table__
        self._engine = engine
        self._session_factory = session_factory

    def _to_record(self, row) -> S:
        return self.record_type.model_validate(row)

    async def _select(self, *criteria) -> List[S]:
        query = select(self.model_class).where(*criteria).order_by(self.model_class.id)
        async with session_scope(self._session_factory) as session:
            result = await session.execute(query)
            return [self._to_record(obj) for obj in result.scalars().all()]

    @log_execution_time
    async def get_all(self) -> List[S]:
        return await self._select()

    @log_execution_time
    async def get(self, id_value: int) -> Optional[S]:
        records = await self._select(self.model_class.id == id_value)
        return records[0] if records else None

    @log_execution_time
    async def find_by(self, field: str, value: Any) -> List[S]:
        return await self._select(getattr(self.model_class, field) == value)

    @log_execution_time
    async def find_between(self, field: str, start: datetime, end: datetime) -> List[S]:
        column = getattr(self.model_class, field)
        return await self._select(column >= start, column <= end)

    @log_execution_time
    async def create(self, obj_data: Dict[str, Any]) -> S:
        async with session_scope(self._session_factory) as session:
            db_obj = self.model_class(**obj_data)
            session.add(db_obj)
            await session.flush()
            await session.refresh(db_obj)
            record = self._to_record(db_obj)

        logger.debug(f"{self.name} {record.id} created")
        return record

    @log_execution_time
    async def update(self, id_value: int, obj_data: Dict[str, Any]) -> Optional[S]:
        if not obj_data:
            return await self.get(id_value)

        stmt = update(self.table).where(self.table.c.id == id_value).values(**obj_data)

        async with session_scope(self._session_factory) as session:
            if self._engine.dialect.update_returning:
                result = await session.execute(stmt.returning(*self.table.c))
                row = result.mappings().first()
            else:
                # No UPDATE ... RETURNING (MySQL); re-read inside the same transaction
                await session.execute(stmt)
                result = await session.execute(select(self.table).where(self.table.c.id == id_value))
                row = result.mappings().first()

        return self._to_record(dict(row)) if row is not None else None

    @log_execution_time
    async def delete(self, id_value: int) -> bool:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(delete(self.table).where(self.table.c.id == id_value))
            return result.rowcount > 0


class SqlStorage(Storage):
    """Relational backend on an async SQLAlchemy engine.

    Every call opens its own session and transaction; the database is the only
    arbiter of concurrent writes.
    """

    backend_name = "sql"

    def __init__(
        self,
        database_url: Optional[str],
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
    ):
        self.engine = create_engine_from_url(
            database_url, echo=echo, pool_size=pool_size, max_overflow=max_overflow
        )
        self._session_factory = create_session_factory(self.engine)
        super().__init__()

    def _repository(self, record_type: Type[S]) -> Repository[S]:
        return SqlRepository(record_type, MODELS[record_type], self.engine, self._session_factory)

    async def init_schema(self) -> None:
        await init_db(self.engine)

    async def close(self) -> None:
        await close_db(self.engine)
