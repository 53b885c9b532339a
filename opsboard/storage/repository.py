# opsboard/storage/repository.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class Repository(ABC, Generic[T]):
    """Record access for a single entity.

    Every backend implements this once; ``Storage`` composes one repository
    per entity and builds the named operations on top of it. Repositories
    deal in plain dicts on the way in and ``record_type`` instances on the
    way out.
    """

    def __init__(self, record_type: Type[T]):
        self.record_type = record_type

    @property
    def name(self) -> str:
        return self.record_type.__name__

    @abstractmethod
    async def get_all(self) -> List[T]:
        ...

    @abstractmethod
    async def get(self, id_value: int) -> Optional[T]:
        ...

    @abstractmethod
    async def find_by(self, field: str, value: Any) -> List[T]:
        """Records whose ``field`` equals ``value``"""

    async def find_one_by(self, field: str, value: Any) -> Optional[T]:
        records = await self.find_by(field, value)
        return records[0] if records else None

    @abstractmethod
    async def find_between(self, field: str, start: datetime, end: datetime) -> List[T]:
        """Records with ``start <= field <= end``"""

    @abstractmethod
    async def create(self, obj_data: Dict[str, Any]) -> T:
        ...

    @abstractmethod
    async def update(self, id_value: int, obj_data: Dict[str, Any]) -> Optional[T]:
        """Apply ``obj_data`` over the stored record; ``None`` if it does not exist"""

    @abstractmethod
    async def delete(self, id_value: int) -> bool:
        ...
