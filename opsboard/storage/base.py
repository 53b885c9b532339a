# opsboard/storage/base.py
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from opsboard.core.utils import day_bounds, to_naive_utc
from opsboard.schemas.schema import (
    Attendance,
    AttendanceCreate,
    AttendanceUpdate,
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
    Finance,
    FinanceCreate,
    FinanceUpdate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    Task,
    TaskCreate,
    TaskUpdate,
    User,
    UserCreate,
    UserUpdate,
)
from opsboard.storage.repository import Repository

S = TypeVar("S", bound=BaseModel)

Payload = Union[BaseModel, Mapping[str, Any]]


def _validated(schema: Type[S], data: Payload) -> S:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    return schema.model_validate(data)


def insert_values(schema: Type[BaseModel], data: Payload) -> Dict[str, Any]:
    """Full column set for a new record, defaults included"""
    return _validated(schema, data).model_dump()


def merge_values(schema: Type[BaseModel], data: Payload) -> Dict[str, Any]:
    """Only the fields the caller actually supplied.

    Fields left out of the payload are left out of the result, so the backend
    never touches them. A field explicitly set to ``None`` is kept.
    """
    return _validated(schema, data).model_dump(exclude_unset=True)


class Storage(ABC):
    """Storage capability shared by every backend.

    Subclasses only decide how a ``Repository`` is built for a record type.
    The named operations, payload handling and date normalization all live
    here so the backends cannot drift apart.
    """

    backend_name = "abstract"

    def __init__(self):
        self.users: Repository[User] = self._repository(User)
        self.projects: Repository[Project] = self._repository(Project)
        self.tasks: Repository[Task] = self._repository(Task)
        self.employees: Repository[Employee] = self._repository(Employee)
        self.finances: Repository[Finance] = self._repository(Finance)
        self.attendance: Repository[Attendance] = self._repository(Attendance)

    @abstractmethod
    def _repository(self, record_type: Type[S]) -> Repository[S]:
        ...

    async def init_schema(self) -> None:
        """Make sure the backing store can hold every entity"""

    async def close(self) -> None:
        """Release resources held by the backend"""

    def __repr__(self):
        return f"<{type(self).__name__}(backend='{self.backend_name}')>"

    # Users
    async def get_all_users(self) -> List[User]:
        return await self.users.get_all()

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self.users.find_one_by("username", username)

    async def create_user(self, user: Union[UserCreate, Payload]) -> User:
        return await self.users.create(insert_values(UserCreate, user))

    async def update_user(self, user_id: int, user: Union[UserUpdate, Payload]) -> Optional[User]:
        return await self.users.update(user_id, merge_values(UserUpdate, user))

    async def delete_user(self, user_id: int) -> bool:
        return await self.users.delete(user_id)

    # Projects
    async def get_all_projects(self) -> List[Project]:
        return await self.projects.get_all()

    async def get_project(self, project_id: int) -> Optional[Project]:
        return await self.projects.get(project_id)

    async def create_project(self, project: Union[ProjectCreate, Payload]) -> Project:
        return await self.projects.create(insert_values(ProjectCreate, project))

    async def update_project(
        self, project_id: int, project: Union[ProjectUpdate, Payload]
    ) -> Optional[Project]:
        return await self.projects.update(project_id, merge_values(ProjectUpdate, project))

    async def delete_project(self, project_id: int) -> bool:
        return await self.projects.delete(project_id)

    # Tasks
    async def get_all_tasks(self) -> List[Task]:
        return await self.tasks.get_all()

    async def get_task(self, task_id: int) -> Optional[Task]:
        return await self.tasks.get(task_id)

    async def get_tasks_by_project(self, project_id: int) -> List[Task]:
        return await self.tasks.find_by("project_id", project_id)

    async def create_task(self, task: Union[TaskCreate, Payload]) -> Task:
        return await self.tasks.create(insert_values(TaskCreate, task))

    async def update_task(self, task_id: int, task: Union[TaskUpdate, Payload]) -> Optional[Task]:
        return await self.tasks.update(task_id, merge_values(TaskUpdate, task))

    async def delete_task(self, task_id: int) -> bool:
        return await self.tasks.delete(task_id)

    # Employees
    async def get_all_employees(self) -> List[Employee]:
        return await self.employees.get_all()

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        return await self.employees.get(employee_id)

    async def create_employee(self, employee: Union[EmployeeCreate, Payload]) -> Employee:
        return await self.employees.create(insert_values(EmployeeCreate, employee))

    async def update_employee(
        self, employee_id: int, employee: Union[EmployeeUpdate, Payload]
    ) -> Optional[Employee]:
        return await self.employees.update(employee_id, merge_values(EmployeeUpdate, employee))

    async def delete_employee(self, employee_id: int) -> bool:
        return await self.employees.delete(employee_id)

    # Finances
    async def get_all_finances(self) -> List[Finance]:
        return await self.finances.get_all()

    async def get_finance(self, finance_id: int) -> Optional[Finance]:
        return await self.finances.get(finance_id)

    async def create_finance(self, finance: Union[FinanceCreate, Payload]) -> Finance:
        return await self.finances.create(insert_values(FinanceCreate, finance))

    async def update_finance(
        self, finance_id: int, finance: Union[FinanceUpdate, Payload]
    ) -> Optional[Finance]:
        return await self.finances.update(finance_id, merge_values(FinanceUpdate, finance))

    async def delete_finance(self, finance_id: int) -> bool:
        return await self.finances.delete(finance_id)

    # Attendance
    async def get_all_attendance(self) -> List[Attendance]:
        return await self.attendance.get_all()

    async def get_attendance_by_id(self, attendance_id: int) -> Optional[Attendance]:
        return await self.attendance.get(attendance_id)

    async def get_attendance_by_employee(self, employee_id: int) -> List[Attendance]:
        return await self.attendance.find_by("employee_id", employee_id)

    async def get_attendance_by_date(self, day: Union[date, datetime]) -> List[Attendance]:
        start, end = day_bounds(day)
        return await self.get_attendance_by_date_range(start, end)

    async def get_attendance_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> List[Attendance]:
        """Attendance whose timestamp lies in ``[start_date, end_date]``.

        Bounds are compared as instants. A plain ``date`` is widened to
        midnight for the start and to the last instant of that day for the end.
        Aware bounds are converted to naive UTC, like stored timestamps.
        """
        if not isinstance(start_date, datetime):
            start_date = day_bounds(start_date)[0]
        if not isinstance(end_date, datetime):
            end_date = day_bounds(end_date)[1]
        start_date, end_date = to_naive_utc(start_date), to_naive_utc(end_date)
        return await self.attendance.find_between("date", start_date, end_date)

    async def create_attendance(self, attendance: Union[AttendanceCreate, Payload]) -> Attendance:
        return await self.attendance.create(insert_values(AttendanceCreate, attendance))

    async def update_attendance(
        self, attendance_id: int, attendance: Union[AttendanceUpdate, Payload]
    ) -> Optional[Attendance]:
        return await self.attendance.update(
            attendance_id, merge_values(AttendanceUpdate, attendance)
        )

    async def delete_attendance(self, attendance_id: int) -> bool:
        return await self.attendance.delete(attendance_id)
