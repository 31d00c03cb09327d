# projecthub/utils/team.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from projecthub.errors import Conflict
from projecthub.models import Assignment, Project, Task, TaskPriority, TaskStatus, User
from projecthub.services.assignments import AssignmentLedger

PLACEHOLDER_TASK_TITLE = "Project Setup"
PLACEHOLDER_TASK_DESCRIPTION = "Initial project setup and planning"


@dataclass
class TeamTask:
    id: int
    title: str
    status: TaskStatus


@dataclass
class TeamMember:
    user: User
    project_role: str
    tasks: List[TeamTask] = field(default_factory=list)


class TeamResolver:
    """Derives project teams from the manager and the task assignments.

    There is no stored team: membership is recomputed from current rows on
    every call.
    """

    MANAGER = "manager"
    MEMBER = "member"

    def __init__(self, db: Session):
        self.db = db
        self.ledger = AssignmentLedger(db)

    def _project_tasks(self, project: Project) -> List[Task]:
        return (
            self.db.query(Task)
            .options(selectinload(Task.assignments).selectinload(Assignment.user))
            .filter(Task.project_id == project.id)
            .order_by(Task.id)
            .all()
        )

    def resolve_team(self, project: Project) -> List[TeamMember]:
        """Manager first, then assignees in first-seen task order"""
        team: Dict[int, TeamMember] = {}
        team[project.manager_id] = TeamMember(user=project.manager, project_role=self.MANAGER)

        for task in self._project_tasks(project):
            for assignment in task.assignments:
                member = team.get(assignment.user_id)
                if member is None:
                    member = TeamMember(user=assignment.user, project_role=self.MEMBER)
                    team[assignment.user_id] = member
                member.tasks.append(TeamTask(id=task.id, title=task.title, status=task.status))

        return list(team.values())

    def team_user_ids(self, project: Project) -> List[int]:
        return [member.user.id for member in self.resolve_team(project)]

    def is_member(self, project: Project, user_id: int) -> bool:
        return user_id in self.team_user_ids(project)

    def available_users(self, project: Project) -> List[User]:
        """Every user not yet on the project team"""
        member_ids = self.team_user_ids(project)
        return (
            self.db.query(User)
            .filter(User.id.notin_(member_ids))
            .order_by(User.id)
            .all()
        )

    def add_member(self, project: Project, user: User, actor_id: int) -> Task:
        """Join the team by being assigned to a task of the project.

        Uses the first task; a project without tasks gets a placeholder
        "Project Setup" task created by ``actor_id``. Returns the task used.
        """
        if self.is_member(project, user.id):
            raise Conflict(f"User {user.id} is already on the team of project {project.id}")

        task: Optional[Task] = (
            self.db.query(Task)
            .filter(Task.project_id == project.id)
            .order_by(Task.id)
            .first()
        )
        if task is None:
            task = Task(
                title=PLACEHOLDER_TASK_TITLE,
                description=PLACEHOLDER_TASK_DESCRIPTION,
                status=TaskStatus.TODO,
                priority=TaskPriority.MEDIUM,
                project_id=project.id,
                creator_id=actor_id,
            )
            self.db.add(task)
            self.db.flush()

        self.ledger.assign(task, user)
        return task

    def remove_member(self, project: Project, user_id: int) -> int:
        """Drop the user's assignment from every task of the project.

        Returns the number of assignments removed. The manager keeps their
        place on the team regardless.
        """
        removed = 0
        for task in self._project_tasks(project):
            if self.ledger.find(task, user_id) is not None:
                self.ledger.unassign(task, user_id)
                removed += 1
        return removed
