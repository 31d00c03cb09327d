# projecthub/services/users.py
"""User accounts: registration, login and profile management."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from projecthub.config.security import SecurityConfig
from projecthub.errors import Conflict, ValidationFailed
from projecthub.models import Assignment, Project, Task, User, UserRole
from projecthub.schemas.user import UserCreate, UserRegister, UserUpdate, UserOut, UserWithCounts
from projecthub.services.base import ServiceBase
from projecthub.services.transaction import atomic
from projecthub.utils.permissions import Action
from projecthub.utils.security import get_password_hash, verify_password
from projecthub.utils.security_logger import log_login_attempt, log_role_change, log_security_event

logger = logging.getLogger(__name__)


def _project_ids(user: User) -> set:
    """Projects the user manages or works on through an assignment"""
    ids = {project.id for project in user.managed_projects}
    ids.update(assignment.task.project_id for assignment in user.assignments)
    return ids


class UserService(ServiceBase):

    def _find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def _check_unique(self, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None):
        if email is not None:
            existing = self._find_by_email(email)
            if existing is not None and existing.id != exclude_id:
                raise Conflict("Email already registered")
        if username is not None:
            existing = self.db.query(User).filter(User.username == username).first()
            if existing is not None and existing.id != exclude_id:
                raise Conflict("Username already taken")

    def _create(self, data: UserRegister, role: UserRole) -> User:
        self._check_unique(data.username, data.email)
        user = User(
            username=data.username,
            email=data.email,
            hashed_password=get_password_hash(data.password),
            role=role,
        )
        with atomic(self.db):
            self.db.add(user)
        self.db.refresh(user)
        return user

    def register(self, data: UserRegister) -> User:
        """Public sign-up; privileged roles need an admin"""
        role = data.role or UserRole(SecurityConfig.ROLES['default'])
        if not SecurityConfig.is_self_registration_role(role.value):
            allowed = ", ".join(sorted(SecurityConfig.self_registration_roles()))
            raise ValidationFailed.single("role", f"Role must be one of: {allowed}")

        user = self._create(data, role)
        log_security_event("registration", "success", user_id=user.id, role=role.value)
        logger.info(f"User {user.id} registered as {role.value}")
        return user

    def create_user(self, data: UserCreate) -> User:
        self._authorize(Action.CREATE, kind="user")
        user = self._create(data, data.role)
        log_security_event("user_created", "success", actor_id=self.identity.id, user_id=user.id, role=user.role.value)
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self._find_by_email(email)
        if user is None:
            log_login_attempt(email, False, "unknown email")
            return None
        if not verify_password(password, user.hashed_password):
            log_login_attempt(email, False, "wrong password")
            return None
        log_login_attempt(email, True)
        return user

    def list_users(self) -> List[UserWithCounts]:
        self._authorize(Action.LIST, kind="user")
        users = (
            self.db.query(User)
            .options(
                selectinload(User.managed_projects),
                selectinload(User.assignments).selectinload(Assignment.task),
            )
            .order_by(User.id)
            .all()
        )
        return [
            UserWithCounts(
                **UserOut.model_validate(user).model_dump(),
                projects=len(_project_ids(user)),
                tasks=len(user.assignments),
            )
            for user in users
        ]

    def get_user(self, user_id: int) -> User:
        user = self._get(User, user_id, "user")
        self._authorize(Action.VIEW, user)
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = self._get(User, user_id, "user")
        changes = data.model_dump(exclude_unset=True)
        self._authorize(Action.UPDATE, user, fields=changes.keys())

        for name in ("username", "email"):
            if name in changes and changes[name] is None:
                raise ValidationFailed.single(name, f"{name} cannot be null")
        self._check_unique(changes.get("username"), changes.get("email"), exclude_id=user.id)

        old_role = user.role
        with atomic(self.db):
            for name, value in changes.items():
                if name == "password":
                    if value is not None:
                        user.hashed_password = get_password_hash(value)
                elif name == "role":
                    if value is not None:
                        user.role = value
                else:
                    setattr(user, name, value)

        if user.role != old_role:
            log_role_change(self.identity.id, user.id, UserRole(old_role).value, UserRole(user.role).value)
        return user

    def delete_user(self, user_id: int) -> None:
        user = self._get(User, user_id, "user")
        self._authorize(Action.DELETE, user)

        if user.id == self.identity.id:
            raise Conflict("You cannot delete your own account")
        if user.managed_projects:
            raise Conflict(f"User {user.id} still manages {len(user.managed_projects)} project(s)")
        if user.created_tasks:
            raise Conflict(f"User {user.id} still owns {len(user.created_tasks)} created task(s)")

        with atomic(self.db):
            self.db.delete(user)
        log_security_event("user_deleted", "success", actor_id=self.identity.id, user_id=user_id)

    def user_tasks(self, user_id: int) -> List[Task]:
        user = self._get(User, user_id, "user")
        self._authorize(Action.VIEW, user)
        return (
            self.db.query(Task)
            .join(Assignment, Assignment.task_id == Task.id)
            .filter(Assignment.user_id == user.id)
            .order_by(Task.id)
            .all()
        )

    def user_projects(self, user_id: int) -> List[Project]:
        """Managed projects first, then projects reached through assignments"""
        user = self._get(User, user_id, "user")
        self._authorize(Action.VIEW, user)

        managed = (
            self.db.query(Project)
            .filter(Project.manager_id == user.id)
            .order_by(Project.id)
            .all()
        )
        assigned = (
            self.db.query(Project)
            .join(Task, Task.project_id == Project.id)
            .join(Assignment, Assignment.task_id == Task.id)
            .filter(Assignment.user_id == user.id)
            .order_by(Project.id)
            .all()
        )
        projects = {}
        for project in managed + assigned:
            projects.setdefault(project.id, project)
        return list(projects.values())
