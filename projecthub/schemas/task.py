# projecthub/schemas/task.py
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, List

from projecthub.models.task import TaskStatus, TaskPriority, AssignmentStatus
from .project import ProjectBasic
from .user import UserSummary


class TaskBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.BACKLOG
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None


class TaskCreate(TaskBase):
    project_id: int
    assignee_ids: List[int] = []

    @field_validator('assignee_ids')
    @classmethod
    def drop_duplicate_assignees(cls, v):
        return list(dict.fromkeys(v))


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    project_id: Optional[int] = None

    @model_validator(mode="after")
    def required_fields_cannot_be_cleared(self):
        for name in ("title", "status", "priority", "project_id"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be null')
        return self


class AssignmentOut(BaseModel):
    user_id: int
    status: AssignmentStatus
    assigned_at: datetime
    user: UserSummary

    model_config = {
        "from_attributes": True
    }


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    due_date: Optional[date] = None
    project_id: int
    creator_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    project: ProjectBasic
    creator: UserSummary
    assignments: List[AssignmentOut] = []

    model_config = {
        "from_attributes": True
    }


class AssigneesReplace(BaseModel):
    user_ids: List[int]


class AssigneeAdd(BaseModel):
    user_id: int


class AssignmentStatusUpdate(BaseModel):
    status: AssignmentStatus
