import pytest
import pytest_asyncio
from datetime import datetime

from opsboard.core.config import Settings
from opsboard.storage import MemoryStorage, SqlStorage


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep variables exported by a local .env out of the settings under test"""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)


def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'opsboard-test.db'}"


@pytest_asyncio.fixture
async def memory_storage():
    storage = MemoryStorage()
    yield storage
    await storage.close()


@pytest_asyncio.fixture
async def sql_storage(tmp_path):
    storage = SqlStorage(sqlite_url(tmp_path))
    await storage.init_schema()
    yield storage
    await storage.close()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def storage(request, tmp_path):
    """Each contract test runs once per backend"""
    if request.param == "memory":
        backend = MemoryStorage()
    else:
        backend = SqlStorage(sqlite_url(tmp_path))
        await backend.init_schema()
    yield backend
    await backend.close()


@pytest.fixture
def project_data():
    """Sample project data"""
    return {
        "name": "Website relaunch",
        "description": "New marketing site",
        "status": "active",
        "client": "Acme Corp",
        "budget": "25000.00",
        "progress": 10,
        "start_date": datetime(2024, 3, 1),
    }


@pytest.fixture
def employee_data():
    """Sample employee data"""
    return {
        "name": "John Doe",
        "position": "Software Engineer",
        "department": "Engineering",
        "email": "john.doe@example.com",
        "phone": "+1 555 0100",
    }
