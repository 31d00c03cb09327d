# projecthub/services/assignments.py
"""
Assignment ledger: the many-to-many relation between users and tasks.

Writes go through ``Task.assignments`` so the in-memory collection, the
authorization relations computed from it and the status rollup always see the
same state within a transaction. Nothing here commits; callers wrap the
ledger in ``atomic``.
"""

import logging
from typing import Dict, List, Sequence

from sqlalchemy.orm import Session

from projecthub.errors import AlreadyAssigned, NotAssigned
from projecthub.models import Assignment, AssignmentStatus, Task, TaskStatus, User

logger = logging.getLogger(__name__)


class AssignmentLedger:
    """Assign, unassign and track per-assignee progress on tasks"""

    def __init__(self, db: Session):
        self.db = db

    def find(self, task: Task, user_id: int):
        for assignment in task.assignments:
            if assignment.user_id == user_id:
                return assignment
        return None

    def assign(self, task: Task, user: User) -> Assignment:
        if self.find(task, user.id) is not None:
            raise AlreadyAssigned(task.id, user.id)

        assignment = Assignment(user=user, status=AssignmentStatus.ASSIGNED)
        task.assignments.append(assignment)
        self.db.flush()
        logger.info(f"User {user.id} assigned to task {task.id}")
        return assignment

    def unassign(self, task: Task, user_id: int) -> None:
        assignment = self.find(task, user_id)
        if assignment is None:
            raise NotAssigned(task.id, user_id)

        # delete-orphan removes the row on flush
        task.assignments.remove(assignment)
        self.db.flush()
        logger.info(f"User {user_id} unassigned from task {task.id}")

    def set_assignment_status(self, task: Task, user_id: int, status: AssignmentStatus) -> Assignment:
        """Update the caller's own assignment; never touches another assignee"""
        assignment = self.find(task, user_id)
        if assignment is None:
            raise NotAssigned(task.id, user_id)

        assignment.status = AssignmentStatus(status)
        if assignment.status == AssignmentStatus.COMPLETED:
            self.rollup(task)
        self.db.flush()
        return assignment

    def set_assignees(self, task: Task, users: Sequence[User]) -> List[Assignment]:
        """Replace the assignee set; surviving assignments keep their status"""
        desired: Dict[int, User] = {}
        for user in users:
            desired.setdefault(user.id, user)

        for assignment in list(task.assignments):
            if assignment.user_id not in desired:
                task.assignments.remove(assignment)

        current = {assignment.user_id for assignment in task.assignments}
        for user_id, user in desired.items():
            if user_id not in current:
                task.assignments.append(Assignment(user=user, status=AssignmentStatus.ASSIGNED))

        self.db.flush()
        logger.info(f"Task {task.id} assignees set to {sorted(desired)}")
        return list(task.assignments)

    def rollup(self, task: Task) -> bool:
        """
        Force the task to done once every assignment is completed.

        One-way: a done task is never reopened here, even when a new assignee
        joins later. Returns True when the status was changed.
        """
        assignments = task.assignments
        if not assignments:
            return False
        if not all(a.status == AssignmentStatus.COMPLETED for a in assignments):
            return False
        if task.status == TaskStatus.DONE:
            return False
        task.status = TaskStatus.DONE
        logger.info(f"Task {task.id} rolled up to done; all {len(assignments)} assignments completed")
        return True
