# opsboard/models/model.py
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite reuses the highest rowid after a delete unless AUTOINCREMENT is set
_TABLE_ARGS = {"sqlite_autoincrement": True}


class User(Base):
    __tablename__ = "users"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    client = Column(String(200), nullable=True)
    budget = Column(String(32), nullable=True)
    progress = Column(Integer, nullable=False, default=0)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}')>"


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="todo")
    priority = Column(String(20), nullable=False, default="medium")
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    assignee = Column(String(100), nullable=True)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}')>"


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    department = Column(String(50), nullable=True, index=True)
    email = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)

    def __repr__(self):
        return f"<Employee(id={self.id}, name='{self.name}')>"


class Finance(Base):
    __tablename__ = "finances"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(10), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(String(32), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Finance(id={self.id}, type='{self.type}', amount='{self.amount}')>"


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = _TABLE_ARGS

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="present")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Attendance(id={self.id}, employee_id={self.employee_id}, status='{self.status}')>"
