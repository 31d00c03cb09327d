# projecthub/services/tasks.py
"""
Task lifecycle and assignee management.

Updates are checked field by field: assignees that are neither the creator
nor the project manager may only touch ``ASSIGNEE_TASK_FIELDS``. Moving a
task to another project additionally requires managing the destination.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import joinedload, selectinload

from projecthub.models import Assignment, AssignmentStatus, Project, Task, TaskPriority, TaskStatus, User
from projecthub.schemas.task import TaskCreate, TaskUpdate
from projecthub.services.assignments import AssignmentLedger
from projecthub.services.base import ServiceBase
from projecthub.services.transaction import atomic
from projecthub.utils.permissions import Action, restricted_fields

logger = logging.getLogger(__name__)

_TASK_OPTIONS = (
    joinedload(Task.project),
    joinedload(Task.creator),
    selectinload(Task.assignments).joinedload(Assignment.user),
)


class TaskService(ServiceBase):

    def __init__(self, db, identity=None):
        super().__init__(db, identity)
        self.ledger = AssignmentLedger(db)

    def _load(self, task_id: int) -> Task:
        return self._get(Task, task_id, "task", options=_TASK_OPTIONS)

    def _load_users(self, user_ids: List[int]) -> List[User]:
        """Resolve every id up front; one unknown id fails the whole request"""
        return [self._get(User, user_id, "user") for user_id in dict.fromkeys(user_ids)]

    def list_tasks(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        project_id: Optional[int] = None,
    ) -> List[Task]:
        self._authorize(Action.VIEW, kind="task")
        query = self.db.query(Task).options(*_TASK_OPTIONS)
        if status is not None:
            query = query.filter(Task.status == status)
        if priority is not None:
            query = query.filter(Task.priority == priority)
        if project_id is not None:
            query = query.filter(Task.project_id == project_id)
        return query.order_by(Task.id).all()

    def get_task(self, task_id: int) -> Task:
        task = self._load(task_id)
        self._authorize(Action.VIEW, task)
        return task

    def create_task(self, data: TaskCreate) -> Task:
        project = self._get(Project, data.project_id, "project")
        self._authorize(Action.CREATE, project, kind="task")
        assignees = self._load_users(data.assignee_ids)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            estimated_hours=data.estimated_hours,
            actual_hours=data.actual_hours,
            due_date=data.due_date,
            project_id=project.id,
            creator_id=self.identity.id,
        )
        with atomic(self.db):
            self.db.add(task)
            self.db.flush()
            for user in assignees:
                self.ledger.assign(task, user)

        logger.info(f"Task {task.id} created in project {project.id} with {len(assignees)} assignee(s)")
        return self._load(task.id)

    def update_task(self, task_id: int, data: TaskUpdate) -> Task:
        task = self._load(task_id)
        changes = data.model_dump(exclude_unset=True)

        allowed = restricted_fields(self.identity, Action.UPDATE, task)
        message = None
        if allowed:
            message = f"Assignees may only update: {', '.join(sorted(allowed))}"
        self._authorize(Action.UPDATE, task, fields=changes.keys(), message=message)

        destination_id = changes.get("project_id")
        if destination_id is not None and destination_id != task.project_id:
            destination = self._get(Project, destination_id, "project")
            self._authorize(Action.MOVE, destination, kind="task")

        with atomic(self.db):
            for name, value in changes.items():
                setattr(task, name, value)
        return self._load(task.id)

    def delete_task(self, task_id: int) -> None:
        task = self._load(task_id)
        self._authorize(Action.DELETE, task)
        with atomic(self.db):
            self.db.delete(task)
        logger.info(f"Task {task_id} deleted by user {self.identity.id}")

    # Assignees

    def assign_user(self, task_id: int, user_id: int) -> Task:
        task = self._load(task_id)
        self._authorize(Action.ASSIGN, task)
        user = self._get(User, user_id, "user")
        with atomic(self.db):
            self.ledger.assign(task, user)
        return self._load(task.id)

    def unassign_user(self, task_id: int, user_id: int) -> Task:
        task = self._load(task_id)
        self._authorize(Action.ASSIGN, task)
        with atomic(self.db):
            self.ledger.unassign(task, user_id)
        return self._load(task.id)

    def set_assignees(self, task_id: int, user_ids: List[int]) -> Task:
        task = self._load(task_id)
        self._authorize(Action.ASSIGN, task)
        users = self._load_users(user_ids)
        with atomic(self.db):
            self.ledger.set_assignees(task, users)
        return self._load(task.id)

    def set_assignment_status(self, task_id: int, status: AssignmentStatus) -> Task:
        """Move the caller's own assignment; completes the task when everyone is done"""
        task = self._load(task_id)
        self._authorize(Action.SET_ASSIGNMENT_STATUS, task)
        with atomic(self.db):
            self.ledger.set_assignment_status(task, self.identity.id, status)
        return self._load(task.id)
