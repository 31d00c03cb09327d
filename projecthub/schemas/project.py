from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime

from projecthub.models.project import ProjectStatus
from projecthub.models.task import TaskStatus
from .user import UserSummary


def _check_date_range(start_date: Optional[date], end_date: Optional[date]):
    if start_date and end_date and end_date < start_date:
        raise ValueError('End date cannot be before start date')


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    # Defaults to the caller
    manager_id: Optional[int] = None

    @model_validator(mode="after")
    def end_date_must_not_precede_start_date(self):
        _check_date_range(self.start_date, self.end_date)
        return self


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    manager_id: Optional[int] = None

    model_config = {
        "from_attributes": True
    }

    @model_validator(mode="after")
    def required_fields_cannot_be_cleared(self):
        for name in ("title", "status", "manager_id"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} cannot be null')
        _check_date_range(self.start_date, self.end_date)
        return self


class ProjectBasic(BaseModel):
    id: int
    title: str
    status: ProjectStatus

    model_config = {
        "from_attributes": True
    }


class ProjectOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: ProjectStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    manager_id: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    manager: UserSummary

    model_config = {
        "from_attributes": True
    }


class ProjectStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    backlog_tasks: int
    todo_tasks: int
    review_tasks: int
    completion_rate: float
    total_estimated_hours: float
    total_actual_hours: float
    hours_variance: float


class TeamTaskOut(BaseModel):
    id: int
    title: str
    status: TaskStatus

    model_config = {
        "from_attributes": True
    }


class TeamMemberOut(BaseModel):
    user: UserSummary
    project_role: str
    tasks: List[TeamTaskOut] = []

    model_config = {
        "from_attributes": True
    }


class ProjectTeamAdd(BaseModel):
    user_id: int
