import pytest

from projecthub.errors import Forbidden
from projecthub.models import Assignment, Comment, Project, Task, User, UserRole
from projecthub.utils.permissions import (
    ASSIGNEE_TASK_FIELDS, Action, Identity, authorize, is_allowed, restricted_fields,
)

ADMIN = Identity(id=1, role=UserRole.ADMIN)
MANAGER = Identity(id=2, role=UserRole.MANAGER)
OTHER_MANAGER = Identity(id=3, role=UserRole.MANAGER)
DEVELOPER = Identity(id=7, role=UserRole.DEVELOPER)
TESTER = Identity(id=8, role=UserRole.TESTER)


def _project(project_id=5, manager_id=MANAGER.id):
    return Project(id=project_id, title="Website", manager_id=manager_id)


def _task(project=None, creator_id=MANAGER.id, assignee_ids=()):
    task = Task(id=11, title="Hero banner", creator_id=creator_id)
    task.project = project or _project()
    for user_id in assignee_ids:
        task.assignments.append(Assignment(user_id=user_id))
    return task


def test_admin_is_allowed_everything():
    user = User(id=9, username="zed", email="zed@example.com", role=UserRole.DEVELOPER)
    assert is_allowed(ADMIN, Action.DELETE, user)
    assert is_allowed(ADMIN, Action.UPDATE, user, fields={"role"})
    assert is_allowed(ADMIN, Action.MOVE, _project(manager_id=99), kind="task")
    assert is_allowed(ADMIN, Action.CREATE, kind="user")


def test_only_managers_create_projects():
    assert is_allowed(MANAGER, Action.CREATE, kind="project")
    assert not is_allowed(DEVELOPER, Action.CREATE, kind="project")


def test_project_update_requires_project_manager():
    project = _project()
    assert is_allowed(MANAGER, Action.UPDATE, project, fields={"title"})
    assert not is_allowed(OTHER_MANAGER, Action.UPDATE, project, fields={"title"})
    assert not is_allowed(DEVELOPER, Action.DELETE, project)


def test_any_manager_manages_any_team():
    project = _project()
    assert is_allowed(OTHER_MANAGER, Action.MANAGE_TEAM, project)
    assert not is_allowed(DEVELOPER, Action.MANAGE_TEAM, project)


def test_task_creation_is_checked_against_the_project():
    project = _project(manager_id=DEVELOPER.id)
    assert is_allowed(DEVELOPER, Action.CREATE, project, kind="task")
    assert not is_allowed(TESTER, Action.CREATE, project, kind="task")
    assert is_allowed(OTHER_MANAGER, Action.CREATE, project, kind="task")


def test_assignee_limited_to_status_and_hours():
    task = _task(assignee_ids=[DEVELOPER.id])
    assert is_allowed(DEVELOPER, Action.UPDATE, task, fields={"status"})
    assert is_allowed(DEVELOPER, Action.UPDATE, task, fields={"status", "actual_hours"})
    assert not is_allowed(DEVELOPER, Action.UPDATE, task, fields={"title"})


def test_out_of_list_field_fails_the_whole_request():
    task = _task(assignee_ids=[DEVELOPER.id])
    assert not is_allowed(DEVELOPER, Action.UPDATE, task, fields={"status", "title"})


def test_creator_may_edit_any_field():
    task = _task(creator_id=DEVELOPER.id, assignee_ids=[DEVELOPER.id])
    assert is_allowed(DEVELOPER, Action.UPDATE, task, fields={"title", "priority"})
    assert restricted_fields(DEVELOPER, Action.UPDATE, task) is None


def test_unrelated_developer_cannot_touch_task():
    task = _task(assignee_ids=[DEVELOPER.id])
    assert not is_allowed(TESTER, Action.UPDATE, task, fields={"status"})
    assert not is_allowed(TESTER, Action.DELETE, task)
    assert is_allowed(TESTER, Action.VIEW, task)


def test_global_manager_does_not_edit_foreign_tasks():
    task = _task()
    assert not is_allowed(OTHER_MANAGER, Action.UPDATE, task, fields={"title"})
    assert is_allowed(OTHER_MANAGER, Action.ASSIGN, task)


def test_move_requires_managing_the_destination():
    destination = _project(project_id=6, manager_id=OTHER_MANAGER.id)
    assert not is_allowed(MANAGER, Action.MOVE, destination, kind="task")
    assert is_allowed(OTHER_MANAGER, Action.MOVE, destination, kind="task")


def test_user_self_service():
    me = User(id=DEVELOPER.id, username="dev", email="dev@example.com", role=UserRole.DEVELOPER)
    assert is_allowed(DEVELOPER, Action.VIEW, me)
    assert is_allowed(DEVELOPER, Action.UPDATE, me, fields={"username", "password"})
    assert not is_allowed(DEVELOPER, Action.UPDATE, me, fields={"role"})
    assert not is_allowed(DEVELOPER, Action.LIST, kind="user")


def test_manager_cannot_delete_users_or_change_roles():
    user = User(id=DEVELOPER.id, username="dev", email="dev@example.com", role=UserRole.DEVELOPER)
    assert is_allowed(MANAGER, Action.VIEW, user)
    assert not is_allowed(MANAGER, Action.DELETE, user)
    assert not is_allowed(MANAGER, Action.UPDATE, user, fields={"role"})


def test_comment_edit_by_author_or_manager():
    comment = Comment(id=3, content="Looks good", user_id=DEVELOPER.id, task_id=11)
    assert is_allowed(DEVELOPER, Action.UPDATE, comment)
    assert is_allowed(OTHER_MANAGER, Action.DELETE, comment)
    assert not is_allowed(TESTER, Action.UPDATE, comment)


def test_authorize_raises_forbidden_with_target_in_message():
    with pytest.raises(Forbidden) as exc:
        authorize(OTHER_MANAGER, Action.UPDATE, _project(), fields={"title"})
    assert exc.value.status_code == 403
    assert exc.value.detail == "Not authorized to update project 5"


def test_restricted_fields_for_plain_assignee():
    task = _task(assignee_ids=[DEVELOPER.id])
    assert restricted_fields(DEVELOPER, Action.UPDATE, task) == ASSIGNEE_TASK_FIELDS
    assert restricted_fields(TESTER, Action.UPDATE, task) == frozenset()
