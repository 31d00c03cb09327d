# projecthub/routers/project.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from projecthub.database import get_db
from projecthub.schemas.project import (
    ProjectCreate, ProjectUpdate, ProjectOut, ProjectStats, ProjectTeamAdd, TeamMemberOut,
)
from projecthub.schemas.task import TaskOut
from projecthub.schemas.user import UserSummary
from projecthub.services.projects import ProjectService
from projecthub.utils.auth import get_current_identity
from projecthub.utils.permissions import Identity

router = APIRouter()


def get_project_service(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> ProjectService:
    return ProjectService(db, identity)


@router.get("/", response_model=List[ProjectOut])
def get_all_projects(service: ProjectService = Depends(get_project_service)):
    """Get all projects with their managers"""
    return service.list_projects()


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, service: ProjectService = Depends(get_project_service)):
    return service.get_project(project_id)


@router.post("/", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(project_data: ProjectCreate, service: ProjectService = Depends(get_project_service)):
    """Create a new project - only admins and managers"""
    return service.create_project(project_data)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    service: ProjectService = Depends(get_project_service)
):
    """Update a project - admin or the project's manager"""
    return service.update_project(project_id, project_data)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, service: ProjectService = Depends(get_project_service)):
    """Delete a project together with its tasks, assignments and comments"""
    service.delete_project(project_id)


@router.get("/{project_id}/tasks", response_model=List[TaskOut])
def get_project_tasks(project_id: int, service: ProjectService = Depends(get_project_service)):
    return service.project_tasks(project_id)


@router.get("/{project_id}/stats", response_model=ProjectStats)
def get_project_stats(project_id: int, service: ProjectService = Depends(get_project_service)):
    return service.project_stats(project_id)


# Team endpoints

@router.get("/{project_id}/team", response_model=List[TeamMemberOut])
def get_project_team(project_id: int, service: ProjectService = Depends(get_project_service)):
    """Manager plus everyone assigned to a task of the project"""
    return service.get_team(project_id)


@router.get("/{project_id}/team/available", response_model=List[UserSummary])
def get_available_users(project_id: int, service: ProjectService = Depends(get_project_service)):
    return service.available_users(project_id)


@router.post("/{project_id}/team", response_model=List[TeamMemberOut], status_code=status.HTTP_201_CREATED)
def add_team_member(
    project_id: int,
    member: ProjectTeamAdd,
    service: ProjectService = Depends(get_project_service)
):
    """Add a user to the team by assigning them to the project's first task"""
    return service.add_team_member(project_id, member.user_id)


@router.delete("/{project_id}/team/{user_id}", response_model=List[TeamMemberOut])
def remove_team_member(project_id: int, user_id: int, service: ProjectService = Depends(get_project_service)):
    return service.remove_team_member(project_id, user_id)
