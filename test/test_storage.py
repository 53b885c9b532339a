import pytest
from datetime import date, datetime, timedelta, timezone

from pydantic import ValidationError

from opsboard.core.utils import end_of_day, start_of_day
from opsboard.schemas.schema import (
    EmployeeCreate,
    FinanceCreate,
    FinanceType,
    ProjectUpdate,
    TaskCreate,
)


@pytest.mark.asyncio
async def test_create_then_get_returns_created_record(storage, project_data):
    """A created record reads back unchanged"""
    created = await storage.create_project(project_data)

    assert created.id == 1
    assert created.created_at is not None
    assert created.name == "Website relaunch"
    assert created.budget == "25000.00"

    fetched = await storage.get_project(created.id)
    assert fetched == created


@pytest.mark.asyncio
async def test_create_fills_defaults(storage):
    """Fields with defaults are populated on create"""
    project = await storage.create_project({"name": "Internal tooling"})
    assert project.status == "active"
    assert project.progress == 0
    assert project.description is None

    task = await storage.create_task(TaskCreate(title="Set up CI", project_id=project.id))
    assert task.status == "todo"
    assert task.priority == "medium"


@pytest.mark.asyncio
async def test_get_missing_returns_none(storage):
    """Absence is not an error"""
    assert await storage.get_project(42) is None
    assert await storage.get_task(42) is None
    assert await storage.get_employee(42) is None
    assert await storage.get_finance(42) is None
    assert await storage.get_attendance_by_id(42) is None
    assert await storage.get_user(42) is None
    assert await storage.get_user_by_username("nobody") is None


@pytest.mark.asyncio
async def test_ids_increase_and_are_never_reused(storage, employee_data):
    """Deleting the newest record does not free its id"""
    ids = []
    for _ in range(3):
        employee = await storage.create_employee(employee_data)
        ids.append(employee.id)

    assert ids == [1, 2, 3]

    assert await storage.delete_employee(3) is True
    employee = await storage.create_employee(employee_data)
    assert employee.id == 4


@pytest.mark.asyncio
async def test_ids_are_per_entity(storage, project_data, employee_data):
    """Each entity has its own id sequence"""
    project = await storage.create_project(project_data)
    employee = await storage.create_employee(employee_data)
    assert project.id == 1
    assert employee.id == 1


@pytest.mark.asyncio
async def test_update_changes_only_supplied_fields(storage, project_data):
    """Fields missing from the payload keep their values"""
    created = await storage.create_project(project_data)

    updated = await storage.update_project(created.id, ProjectUpdate(status="completed", progress=100))

    assert updated.status == "completed"
    assert updated.progress == 100
    assert updated.model_dump(exclude={"status", "progress"}) == created.model_dump(
        exclude={"status", "progress"}
    )
    assert await storage.get_project(created.id) == updated


@pytest.mark.asyncio
async def test_update_can_clear_nullable_field(storage, project_data):
    """An explicit null is applied, an omitted field is not"""
    created = await storage.create_project(project_data)

    updated = await storage.update_project(created.id, {"description": None})

    assert updated.description is None
    assert updated.client == "Acme Corp"


@pytest.mark.asyncio
async def test_update_rejects_null_for_required_field(storage, project_data):
    """Required columns cannot be nulled through an update"""
    created = await storage.create_project(project_data)

    with pytest.raises(ValidationError):
        await storage.update_project(created.id, {"name": None})

    assert (await storage.get_project(created.id)).name == "Website relaunch"


@pytest.mark.asyncio
async def test_update_missing_returns_none_and_changes_nothing(storage, project_data):
    """Updating an unknown id is a no-op"""
    await storage.create_project(project_data)
    before = await storage.get_all_projects()

    result = await storage.update_project(99, {"status": "archived"})

    assert result is None
    assert await storage.get_all_projects() == before


@pytest.mark.asyncio
async def test_empty_update_returns_current_record(storage, employee_data):
    """An update with no fields returns the stored record"""
    created = await storage.create_employee(employee_data)
    assert await storage.update_employee(created.id, {}) == created


@pytest.mark.asyncio
async def test_delete(storage, employee_data):
    """Delete reports whether a row existed"""
    created = await storage.create_employee(EmployeeCreate(**employee_data))

    assert await storage.delete_employee(created.id) is True
    assert await storage.get_employee(created.id) is None
    assert await storage.delete_employee(created.id) is False
    assert await storage.delete_employee(1000) is False


@pytest.mark.asyncio
async def test_users(storage):
    """Users can be found by username and updated"""
    user = await storage.create_user({"username": "admin", "password": "s3cret"})
    await storage.create_user({"username": "jdoe", "password": "hunter2"})

    found = await storage.get_user_by_username("admin")
    assert found == user

    updated = await storage.update_user(user.id, {"password": "changed"})
    assert updated.username == "admin"
    assert updated.password == "changed"

    assert len(await storage.get_all_users()) == 2
    assert await storage.delete_user(user.id) is True
    assert await storage.get_user_by_username("admin") is None


@pytest.mark.asyncio
async def test_tasks_by_project(storage, project_data):
    """Tasks are filtered by their owning project"""
    first = await storage.create_project(project_data)
    second = await storage.create_project({"name": "Mobile app"})

    await storage.create_task({"title": "Wireframes", "project_id": first.id})
    await storage.create_task({"title": "Copywriting", "project_id": first.id})
    await storage.create_task({"title": "Push notifications", "project_id": second.id})

    first_tasks = await storage.get_tasks_by_project(first.id)
    assert [t.title for t in first_tasks] == ["Wireframes", "Copywriting"]

    second_tasks = await storage.get_tasks_by_project(second.id)
    assert [t.title for t in second_tasks] == ["Push notifications"]

    assert await storage.get_tasks_by_project(999) == []
    assert len(await storage.get_all_tasks()) == 3


@pytest.mark.asyncio
async def test_finance_records(storage):
    """Enum fields are stored as their plain values"""
    finance = await storage.create_finance(
        FinanceCreate(
            type=FinanceType.INCOME,
            category="Consulting",
            description="Invoice #1042",
            amount="500.00",
            date=datetime(2024, 3, 15),
        )
    )

    assert finance.type == "income"
    assert finance.status == "pending"
    assert finance.amount == "500.00"

    updated = await storage.update_finance(finance.id, {"status": "received"})
    assert updated.status == "received"
    assert updated.amount == "500.00"
    assert await storage.get_all_finances() == [updated]


@pytest.mark.asyncio
async def test_finance_amount_must_be_decimal(storage):
    """Malformed amounts never reach the backend"""
    with pytest.raises(ValidationError):
        await storage.create_finance(
            {
                "type": "expense",
                "category": "Rent",
                "description": "Office",
                "amount": "twelve",
                "date": datetime(2024, 3, 1),
            }
        )
    assert await storage.get_all_finances() == []


@pytest.mark.asyncio
async def test_attendance_by_employee(storage, employee_data):
    """Attendance is filtered by employee"""
    alice = await storage.create_employee(employee_data)
    bob = await storage.create_employee({**employee_data, "name": "Bob"})

    await storage.create_attendance({"employee_id": alice.id, "date": datetime(2024, 3, 15, 9, 0)})
    await storage.create_attendance({"employee_id": bob.id, "date": datetime(2024, 3, 15, 9, 5)})
    await storage.create_attendance(
        {"employee_id": alice.id, "date": datetime(2024, 3, 16, 9, 0), "status": "late"}
    )

    records = await storage.get_attendance_by_employee(alice.id)
    assert [r.status for r in records] == ["present", "late"]
    assert len(await storage.get_attendance_by_employee(bob.id)) == 1


@pytest.fixture
def day_edges():
    return [
        datetime(2024, 3, 14, 23, 59, 59, 999999),
        datetime(2024, 3, 15, 0, 0, 0),
        datetime(2024, 3, 15, 12, 30),
        datetime(2024, 3, 15, 23, 59, 59, 999999),
        datetime(2024, 3, 16, 0, 0, 0),
    ]


@pytest.mark.asyncio
async def test_attendance_by_date_matches_whole_day_range(storage, employee_data, day_edges):
    """Single-day lookups and whole-day ranges agree at the boundaries"""
    employee = await storage.create_employee(employee_data)
    for moment in day_edges:
        await storage.create_attendance({"employee_id": employee.id, "date": moment})

    by_date = await storage.get_attendance_by_date(date(2024, 3, 15))
    by_range = await storage.get_attendance_by_date_range(
        start_of_day(date(2024, 3, 15)), end_of_day(date(2024, 3, 15))
    )

    assert [r.date for r in by_date] == day_edges[1:4]
    assert by_date == by_range


@pytest.mark.asyncio
async def test_attendance_by_date_ignores_time_of_day(storage, employee_data, day_edges):
    """A datetime argument selects its whole calendar day"""
    employee = await storage.create_employee(employee_data)
    for moment in day_edges:
        await storage.create_attendance({"employee_id": employee.id, "date": moment})

    evening = await storage.get_attendance_by_date(datetime(2024, 3, 15, 18, 45))
    assert [r.date for r in evening] == day_edges[1:4]


@pytest.mark.asyncio
async def test_attendance_date_range_is_inclusive_on_instants(storage, employee_data, day_edges):
    """Range bounds are instants and both are inclusive"""
    employee = await storage.create_employee(employee_data)
    for moment in day_edges:
        await storage.create_attendance({"employee_id": employee.id, "date": moment})

    records = await storage.get_attendance_by_date_range(
        datetime(2024, 3, 15, 0, 0, 0), datetime(2024, 3, 15, 12, 30)
    )
    assert [r.date for r in records] == day_edges[1:3]

    # Plain dates are widened to whole days
    records = await storage.get_attendance_by_date_range(date(2024, 3, 15), date(2024, 3, 16))
    assert [r.date for r in records] == day_edges[1:]


@pytest.mark.asyncio
async def test_update_attendance(storage, employee_data):
    """Attendance updates merge like every other entity"""
    employee = await storage.create_employee(employee_data)
    record = await storage.create_attendance(
        {"employee_id": employee.id, "date": datetime(2024, 3, 15, 9, 0), "notes": "badge"}
    )

    updated = await storage.update_attendance(record.id, {"status": "late"})

    assert updated.status == "late"
    assert updated.notes == "badge"
    assert updated.created_at == record.created_at
    assert await storage.delete_attendance(record.id) is True
    assert await storage.get_all_attendance() == []


@pytest.mark.asyncio
async def test_aware_timestamps_are_stored_as_naive_utc(storage, employee_data):
    """Offsets are converted to UTC before storage and lookup"""
    employee = await storage.create_employee(employee_data)
    utc_morning = await storage.create_attendance(
        {"employee_id": employee.id, "date": "2024-03-15T09:00:00Z"}
    )
    new_york_night = await storage.create_attendance(
        {"employee_id": employee.id, "date": "2024-03-15T23:30:00-05:00"}
    )

    assert utc_morning.date == datetime(2024, 3, 15, 9, 0)
    assert new_york_night.date == datetime(2024, 3, 16, 4, 30)

    by_date = await storage.get_attendance_by_date(date(2024, 3, 15))
    assert [r.id for r in by_date] == [utc_morning.id]

    updated = await storage.update_attendance(
        utc_morning.id, {"date": datetime(2024, 3, 15, 10, 0, tzinfo=timezone(timedelta(hours=2)))}
    )
    assert updated.date == datetime(2024, 3, 15, 8, 0)


@pytest.mark.asyncio
async def test_aware_range_bounds(storage, employee_data):
    """Aware range bounds select the same records as their UTC equivalents"""
    employee = await storage.create_employee(employee_data)
    await storage.create_attendance({"employee_id": employee.id, "date": datetime(2024, 3, 15, 9, 0)})
    await storage.create_attendance({"employee_id": employee.id, "date": datetime(2024, 3, 15, 18, 0)})

    plus_two = timezone(timedelta(hours=2))
    records = await storage.get_attendance_by_date_range(
        datetime(2024, 3, 15, 10, 0, tzinfo=plus_two), datetime(2024, 3, 15, 12, 0, tzinfo=plus_two)
    )
    assert [r.date for r in records] == [datetime(2024, 3, 15, 9, 0)]

    evening = await storage.get_attendance_by_date(datetime(2024, 3, 15, 23, 0, tzinfo=timezone.utc))
    assert len(evening) == 2


@pytest.mark.asyncio
async def test_amount_longer_than_column_is_rejected(storage, project_data):
    """Decimal text must fit the 32 character money columns"""
    too_long = "1" * 30 + ".00"

    with pytest.raises(ValidationError):
        await storage.create_finance(
            {
                "type": "income",
                "category": "Consulting",
                "description": "Oversized",
                "amount": too_long,
                "date": datetime(2024, 3, 15),
            }
        )

    project = await storage.create_project(project_data)
    with pytest.raises(ValidationError):
        await storage.update_project(project.id, {"budget": too_long})

    widest = "9" * 29 + ".00"
    finance = await storage.create_finance(
        {
            "type": "income",
            "category": "Consulting",
            "description": "Largest allowed",
            "amount": widest,
            "date": datetime(2024, 3, 15),
        }
    )
    assert finance.amount == widest
    assert (await storage.get_finance(finance.id)).amount == widest
