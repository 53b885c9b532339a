"""
Storage layer.

One capability, two backends: ``SqlStorage`` for a configured database and
``MemoryStorage`` for everything else. Use ``create_storage`` to pick one.
"""
from .base import Storage
from .factory import create_storage, open_storage
from .memory_storage import MemoryStorage
from .sql_storage import SqlStorage

__all__ = ['Storage', 'MemoryStorage', 'SqlStorage', 'create_storage', 'open_storage']
