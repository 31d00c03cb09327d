# projecthub/models/task.py
from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from projecthub.database import Base
import enum
from datetime import datetime


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class TaskStatus(str, enum.Enum):
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AssignmentStatus(str, enum.Enum):
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Relationships
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Task properties
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=_enum_values),
        default=TaskStatus.BACKLOG,
        nullable=False
    )
    priority = Column(
        Enum(TaskPriority, name="task_priority", values_callable=_enum_values),
        default=TaskPriority.MEDIUM,
        nullable=False
    )
    estimated_hours = Column(Float, nullable=True)
    actual_hours = Column(Float, nullable=True)
    due_date = Column(Date, nullable=True)

    # System dates
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    creator = relationship("User", foreign_keys=[creator_id], back_populates="created_tasks")
    assignments = relationship(
        "Assignment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="[Assignment.assigned_at, Assignment.user_id]"
    )
    comments = relationship("Comment", back_populates="task", cascade="all, delete-orphan")


class Assignment(Base):
    """Join record between a user and a task; the only record of who works on what"""
    __tablename__ = "user_tasks"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    status = Column(
        Enum(AssignmentStatus, name="assignment_status", values_callable=_enum_values),
        default=AssignmentStatus.ASSIGNED,
        nullable=False
    )
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="assignments")
    task = relationship("Task", back_populates="assignments")
