# projecthub/routers/user.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from projecthub.database import get_db
from projecthub.models.user import User
from projecthub.schemas.project import ProjectOut
from projecthub.schemas.task import TaskOut
from projecthub.schemas.user import UserCreate, UserOut, UserUpdate, UserWithCounts
from projecthub.services.users import UserService
from projecthub.utils.auth import get_current_identity, get_current_user
from projecthub.utils.permissions import Identity

router = APIRouter()


def get_user_service(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UserService:
    return UserService(db, identity)


@router.get("/", response_model=List[UserWithCounts])
def get_all_users(service: UserService = Depends(get_user_service)):
    """List every user with their project and task counts (managers and admins)"""
    return service.list_users()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, service: UserService = Depends(get_user_service)):
    """Create a user with any role (admin only)"""
    return service.create_user(user)


@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: int, user_update: UserUpdate, service: UserService = Depends(get_user_service)):
    """Update a profile; only admins may change roles"""
    return service.update_user(user_id, user_update)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    service.delete_user(user_id)


@router.get("/{user_id}/tasks", response_model=List[TaskOut])
def get_user_tasks(user_id: int, service: UserService = Depends(get_user_service)):
    """Tasks the user is assigned to"""
    return service.user_tasks(user_id)


@router.get("/{user_id}/projects", response_model=List[ProjectOut])
def get_user_projects(user_id: int, service: UserService = Depends(get_user_service)):
    """Projects the user manages or works on"""
    return service.user_projects(user_id)
