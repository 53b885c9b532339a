# opsboard/storage/memory_storage.py
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type

from opsboard.storage.base import S, Storage
from opsboard.storage.repository import Repository

logger = logging.getLogger(__name__)


class MemoryRepository(Repository[S]):
    """Dict-backed repository with a per-entity id counter.

    Nothing here awaits, so each call runs to completion on the event loop
    without interleaving. There is no locking; do not share an instance
    across threads.
    """

    def __init__(self, record_type: Type[S], clock: Callable[[], datetime] = datetime.now):
        super().__init__(record_type)
        self._records: Dict[int, S] = {}
        self._next_id = 1
        self._clock = clock
        self._timestamped = "created_at" in record_type.model_fields

    def _scan(self, predicate: Callable[[S], bool]) -> List[S]:
        return [record.model_copy() for record in self._records.values() if predicate(record)]

    async def get_all(self) -> List[S]:
        return self._scan(lambda record: True)

    async def get(self, id_value: int) -> Optional[S]:
        record = self._records.get(id_value)
        return record.model_copy() if record is not None else None

    async def find_by(self, field: str, value: Any) -> List[S]:
        return self._scan(lambda record: getattr(record, field) == value)

    async def find_between(self, field: str, start: datetime, end: datetime) -> List[S]:
        return self._scan(lambda record: start <= getattr(record, field) <= end)

    async def create(self, obj_data: Dict[str, Any]) -> S:
        id_value = self._next_id
        self._next_id += 1

        values = dict(obj_data)
        values["id"] = id_value
        if self._timestamped:
            values["created_at"] = self._clock()

        record = self.record_type.model_validate(values)
        self._records[id_value] = record
        logger.debug(f"{self.name} {id_value} created in memory")
        return record.model_copy()

    async def update(self, id_value: int, obj_data: Dict[str, Any]) -> Optional[S]:
        current = self._records.get(id_value)
        if current is None:
            return None

        merged = current.model_dump()
        for field, value in obj_data.items():
            if field in ("id", "created_at"):
                continue
            merged[field] = value

        record = self.record_type.model_validate(merged)
        self._records[id_value] = record
        return record.model_copy()

    async def delete(self, id_value: int) -> bool:
        return self._records.pop(id_value, None) is not None


class MemoryStorage(Storage):
    """Volatile backend used when no database is configured.

    State lives only as long as the process. Ids start at 1 for every entity
    and are never handed out twice, even after a delete.
    """

    backend_name = "memory"

    def _repository(self, record_type: Type[S]) -> Repository[S]:
        return MemoryRepository(record_type)
