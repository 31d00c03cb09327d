# projecthub/services/projects.py
import logging
from typing import List

from sqlalchemy.orm import joinedload

from projecthub.errors import ValidationFailed
from projecthub.models import Project, Task, TaskStatus, User
from projecthub.schemas.project import ProjectCreate, ProjectStats, ProjectUpdate
from projecthub.services.base import ServiceBase
from projecthub.services.transaction import atomic
from projecthub.utils.permissions import Action
from projecthub.utils.security_logger import log_security_event
from projecthub.utils.team import TeamMember, TeamResolver

logger = logging.getLogger(__name__)


class ProjectService(ServiceBase):
    """Project CRUD, statistics and team management"""

    def _load(self, project_id: int) -> Project:
        return self._get(Project, project_id, "project", options=[joinedload(Project.manager)])

    def list_projects(self) -> List[Project]:
        self._authorize(Action.VIEW, kind="project")
        return (
            self.db.query(Project)
            .options(joinedload(Project.manager))
            .order_by(Project.id)
            .all()
        )

    def get_project(self, project_id: int) -> Project:
        project = self._load(project_id)
        self._authorize(Action.VIEW, project)
        return project

    def create_project(self, data: ProjectCreate) -> Project:
        self._authorize(Action.CREATE, kind="project")
        manager_id = data.manager_id if data.manager_id is not None else self.identity.id
        self._get(User, manager_id, "user")

        project = Project(
            title=data.title,
            description=data.description,
            status=data.status,
            start_date=data.start_date,
            end_date=data.end_date,
            manager_id=manager_id,
        )
        with atomic(self.db):
            self.db.add(project)
        self.db.refresh(project)
        logger.info(f"Project {project.id} created by user {self.identity.id}")
        return project

    def update_project(self, project_id: int, data: ProjectUpdate) -> Project:
        project = self._load(project_id)
        changes = data.model_dump(exclude_unset=True)
        self._authorize(Action.UPDATE, project, fields=changes.keys())

        start_date = changes.get("start_date", project.start_date)
        end_date = changes.get("end_date", project.end_date)
        if start_date and end_date and end_date < start_date:
            raise ValidationFailed.single("end_date", "End date cannot be before start date")
        if "manager_id" in changes:
            self._get(User, changes["manager_id"], "user")

        with atomic(self.db):
            for name, value in changes.items():
                setattr(project, name, value)
        return project

    def delete_project(self, project_id: int) -> None:
        """Remove the project with its tasks, assignments and comments"""
        project = self._load(project_id)
        self._authorize(Action.DELETE, project)

        task_count = len(project.tasks)
        with atomic(self.db):
            self.db.delete(project)
        log_security_event(
            "project_deleted", "success",
            actor_id=self.identity.id, project_id=project_id, tasks=task_count,
        )

    def project_tasks(self, project_id: int) -> List[Task]:
        project = self.get_project(project_id)
        return list(project.tasks)

    def project_stats(self, project_id: int) -> ProjectStats:
        tasks = self.project_tasks(project_id)

        def count(status: TaskStatus) -> int:
            return sum(1 for task in tasks if task.status == status)

        total = len(tasks)
        completed = count(TaskStatus.DONE)
        estimated = sum(task.estimated_hours or 0 for task in tasks)
        actual = sum(task.actual_hours or 0 for task in tasks)
        return ProjectStats(
            total_tasks=total,
            completed_tasks=completed,
            in_progress_tasks=count(TaskStatus.IN_PROGRESS),
            backlog_tasks=count(TaskStatus.BACKLOG),
            todo_tasks=count(TaskStatus.TODO),
            review_tasks=count(TaskStatus.REVIEW),
            completion_rate=round(completed / total * 100, 2) if total else 0.0,
            total_estimated_hours=estimated,
            total_actual_hours=actual,
            hours_variance=actual - estimated,
        )

    # Team

    def get_team(self, project_id: int) -> List[TeamMember]:
        project = self.get_project(project_id)
        return TeamResolver(self.db).resolve_team(project)

    def available_users(self, project_id: int) -> List[User]:
        project = self._load(project_id)
        self._authorize(Action.MANAGE_TEAM, project)
        return TeamResolver(self.db).available_users(project)

    def add_team_member(self, project_id: int, user_id: int) -> List[TeamMember]:
        project = self._load(project_id)
        self._authorize(Action.MANAGE_TEAM, project)
        user = self._get(User, user_id, "user")

        resolver = TeamResolver(self.db)
        with atomic(self.db):
            task = resolver.add_member(project, user, actor_id=self.identity.id)
        logger.info(f"User {user.id} joined project {project.id} through task {task.id}")
        return resolver.resolve_team(project)

    def remove_team_member(self, project_id: int, user_id: int) -> List[TeamMember]:
        project = self._load(project_id)
        self._authorize(Action.MANAGE_TEAM, project)
        self._get(User, user_id, "user")

        resolver = TeamResolver(self.db)
        with atomic(self.db):
            removed = resolver.remove_member(project, user_id)
        logger.info(f"User {user_id} removed from project {project.id}; {removed} assignment(s) dropped")
        return resolver.resolve_team(project)
