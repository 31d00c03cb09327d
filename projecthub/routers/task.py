# projecthub/routers/task.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from projecthub.database import get_db
from projecthub.models.task import TaskStatus, TaskPriority
from projecthub.schemas.task import (
    TaskCreate, TaskUpdate, TaskOut, AssigneesReplace, AssigneeAdd, AssignmentStatusUpdate,
)
from projecthub.services.tasks import TaskService
from projecthub.utils.auth import get_current_identity
from projecthub.utils.permissions import Identity

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TaskService:
    return TaskService(db, identity)


@router.get("/", response_model=List[TaskOut])
def get_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    project_id: Optional[int] = Query(None),
    service: TaskService = Depends(get_task_service)
):
    """Get tasks, optionally filtered by status, priority or project"""
    return service.list_tasks(status=status_filter, priority=priority, project_id=project_id)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    return service.get_task(task_id)


@router.post("/", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, service: TaskService = Depends(get_task_service)):
    """Create a task, optionally with its initial assignees"""
    return service.create_task(task_data)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: int, task_data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    """
    Update a task.

    Assignees who are neither the creator nor the project manager may only
    change the status and the actual hours.
    """
    return service.update_task(task_id, task_data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    service.delete_task(task_id)


# Assignment endpoints

@router.post("/{task_id}/assign", response_model=TaskOut)
def replace_assignees(task_id: int, body: AssigneesReplace, service: TaskService = Depends(get_task_service)):
    """Replace the full assignee list; existing assignees keep their progress"""
    return service.set_assignees(task_id, body.user_ids)


@router.post("/{task_id}/assign-user", response_model=TaskOut)
def assign_user(task_id: int, body: AssigneeAdd, service: TaskService = Depends(get_task_service)):
    return service.assign_user(task_id, body.user_id)


@router.delete("/{task_id}/assign/{user_id}", response_model=TaskOut)
def unassign_user(task_id: int, user_id: int, service: TaskService = Depends(get_task_service)):
    return service.unassign_user(task_id, user_id)


@router.put("/{task_id}/status", response_model=TaskOut)
def update_assignment_status(
    task_id: int,
    body: AssignmentStatusUpdate,
    service: TaskService = Depends(get_task_service)
):
    """Update the caller's own assignment status on the task"""
    return service.set_assignment_status(task_id, body.status)
