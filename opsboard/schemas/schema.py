# opsboard/schemas/schema.py
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

from opsboard.core.utils import to_naive_utc


class FinanceType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class FinanceStatus(str, Enum):
    RECEIVED = "received"
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"


def _decimal_text(v):
    """Accept a decimal-like value and keep it as text"""
    if v is None:
        return v
    if isinstance(v, bool):
        raise ValueError("Amount must be a decimal number")
    if isinstance(v, (int, float, Decimal)):
        v = str(v)
    if not isinstance(v, str):
        raise ValueError("Amount must be a decimal number")
    v = v.strip()
    try:
        parsed = Decimal(v)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal amount: {v!r}")
    if not parsed.is_finite():
        raise ValueError(f"Invalid decimal amount: {v!r}")
    return v


def _not_null(v):
    if v is None:
        raise ValueError("Field cannot be set to null")
    return v


# Money columns are String(32)
DecimalText = Annotated[str, StringConstraints(max_length=32), BeforeValidator(_decimal_text)]

# Aware values are stored as naive UTC
Timestamp = Annotated[datetime, AfterValidator(to_naive_utc)]


class SchemaModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)


class RecordModel(SchemaModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# Users

class UserCreate(SchemaModel):
    """Schema for creating a user"""
    username: str = Field(..., min_length=1, max_length=50, examples=["jdoe"])
    password: str = Field(..., min_length=1, description="Credential material, stored as given")


class UserUpdate(SchemaModel):
    """Schema for updating a user"""
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    password: Optional[str] = Field(None, min_length=1)

    @field_validator("username", "password")
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class User(RecordModel):
    id: int
    username: str
    password: str


# Projects

class ProjectBase(SchemaModel):
    name: str = Field(..., min_length=1, max_length=200, examples=["Website relaunch"])
    description: Optional[str] = None
    status: str = Field("active", max_length=20, examples=["active"])
    client: Optional[str] = Field(None, max_length=200)
    budget: Optional[DecimalText] = Field(None, description="Decimal amount kept as text", examples=["25000.00"])
    progress: int = Field(0, ge=0, le=100)
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None


class ProjectCreate(ProjectBase):
    """Schema for creating a project"""


class ProjectUpdate(SchemaModel):
    """Schema for updating a project"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = Field(None, max_length=20)
    client: Optional[str] = Field(None, max_length=200)
    budget: Optional[DecimalText] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[Timestamp] = None
    end_date: Optional[Timestamp] = None

    @field_validator("name", "status", "progress")
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class Project(ProjectBase, RecordModel):
    id: int
    created_at: datetime


# Tasks

class TaskBase(SchemaModel):
    title: str = Field(..., min_length=1, max_length=200, examples=["Draft wireframes"])
    description: Optional[str] = None
    status: str = Field("todo", max_length=20, examples=["in_progress"])
    priority: str = Field("medium", max_length=20, examples=["high"])
    project_id: int = Field(..., gt=0)
    assignee: Optional[str] = Field(None, max_length=100)
    due_date: Optional[Timestamp] = None


class TaskCreate(TaskBase):
    """Schema for creating a task"""


class TaskUpdate(SchemaModel):
    """Schema for updating a task"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[str] = Field(None, max_length=20)
    priority: Optional[str] = Field(None, max_length=20)
    project_id: Optional[int] = Field(None, gt=0)
    assignee: Optional[str] = Field(None, max_length=100)
    due_date: Optional[Timestamp] = None

    @field_validator("title", "status", "priority", "project_id")
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class Task(TaskBase, RecordModel):
    id: int
    created_at: datetime


# Employees

class EmployeeBase(SchemaModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["John Doe"])
    position: str = Field(..., min_length=1, max_length=100, examples=["Software Engineer"])
    department: Optional[str] = Field(None, max_length=50, examples=["Engineering"])
    email: str = Field(..., min_length=3, max_length=100, examples=["john.doe@example.com"])
    phone: Optional[str] = Field(None, max_length=30)


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee"""


class EmployeeUpdate(SchemaModel):
    """Schema for updating an employee"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, min_length=3, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("name", "position", "email")
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class Employee(EmployeeBase, RecordModel):
    id: int


# Finances

class FinanceBase(SchemaModel):
    type: FinanceType = Field(..., examples=["income"])
    category: str = Field(..., min_length=1, max_length=100, examples=["Consulting"])
    description: str = Field(..., examples=["Invoice #1042"])
    amount: DecimalText = Field(..., description="Decimal amount kept as text", examples=["500.00"])
    status: FinanceStatus = Field("pending", validate_default=True, examples=["pending"])
    date: Timestamp = Field(..., description="Transaction date")


class FinanceCreate(FinanceBase):
    """Schema for creating a finance transaction"""


class FinanceUpdate(SchemaModel):
    """Schema for updating a finance transaction"""
    type: Optional[FinanceType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    amount: Optional[DecimalText] = None
    status: Optional[FinanceStatus] = None
    date: Optional[Timestamp] = None

    @field_validator(
        "type", "category", "description", "amount", "status", "date"
    )
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class Finance(FinanceBase, RecordModel):
    id: int
    created_at: datetime


# Attendance

class AttendanceBase(SchemaModel):
    employee_id: int = Field(..., gt=0)
    date: Timestamp = Field(..., description="Attendance timestamp")
    status: str = Field("present", max_length=20, examples=["late"])
    notes: Optional[str] = None


class AttendanceCreate(AttendanceBase):
    """Schema for creating an attendance record"""


class AttendanceUpdate(SchemaModel):
    """Schema for updating an attendance record"""
    employee_id: Optional[int] = Field(None, gt=0)
    date: Optional[Timestamp] = None
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None

    @field_validator("employee_id", "date", "status")
    @classmethod
    def check_not_null(cls, v):
        return _not_null(v)


class Attendance(AttendanceBase, RecordModel):
    id: int
    created_at: datetime
