from conftest import PASSWORD, auth_headers, make_task
from projecthub.models import Task, TaskStatus


def test_root_and_health(client):
    assert client.get("/").json() == {"message": "ProjectHub API"}
    assert client.get("/health").json() == {"status": "ok"}


def test_register_then_login(client):
    response = client.post("/auth/register", json={
        "username": "newbie",
        "email": "Newbie@Example.com",
        "password": "secret123",
        "role": "designer",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "designer"

    response = client.post("/auth/login", json={"email": "newbie@example.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["username"] == "newbie"


def test_register_privileged_role_is_a_validation_error(client):
    response = client.post("/auth/register", json={
        "username": "mallory",
        "email": "mallory@example.com",
        "password": "secret123",
        "role": "admin",
    })
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "role"


def test_request_validation_errors_list_fields(client):
    response = client.post("/auth/register", json={"username": "x", "email": "not-an-email", "password": "1"})
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"username", "email", "password"}


def test_login_with_wrong_password(client, developer):
    response = client.post("/auth/login", json={"email": developer.email, "password": "nope"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"

    assert client.post("/auth/login", json={"email": developer.email, "password": PASSWORD}).status_code == 200


def test_missing_or_bad_token_is_unauthorized(client):
    assert client.get("/projects/").status_code == 401
    response = client.get("/projects/", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_not_found_and_forbidden_are_distinct(client, developer, project):
    missing = client.get("/projects/999", headers=auth_headers(developer))
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Project 999 not found"

    denied = client.put(f"/projects/{project.id}", json={"title": "Mine now"}, headers=auth_headers(developer))
    assert denied.status_code == 403
    assert denied.json()["detail"] == f"Not authorized to update project {project.id}"


def test_users_list_requires_manager(client, manager, developer):
    assert client.get("/users/", headers=auth_headers(developer)).status_code == 403

    response = client.get("/users/", headers=auth_headers(manager))
    assert response.status_code == 200
    assert {row["username"] for row in response.json()} == {"maria", "alice"}


def test_admin_creates_user_with_any_role(client, admin, manager):
    payload = {"username": "omar", "email": "omar@example.com", "password": "secret123", "role": "manager"}
    assert client.post("/users/", json=payload, headers=auth_headers(manager)).status_code == 403

    response = client.post("/users/", json=payload, headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["role"] == "manager"


def test_create_task_and_list_by_filter(client, manager, developer, project):
    response = client.post("/tasks/", json={
        "title": "Set up CI",
        "project_id": project.id,
        "priority": "high",
        "assignee_ids": [developer.id],
    }, headers=auth_headers(manager))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "backlog"
    assert [a["user_id"] for a in body["assignments"]] == [developer.id]

    listed = client.get("/tasks/", params={"priority": "high"}, headers=auth_headers(developer))
    assert [t["id"] for t in listed.json()] == [body["id"]]
    assert client.get("/tasks/", params={"status": "done"}, headers=auth_headers(developer)).json() == []


def test_assignee_cannot_change_title(client, db_session, manager, developer, project):
    task = make_task(db_session, project, manager, "Original", assignees=[developer])

    response = client.put(f"/tasks/{task.id}", json={"title": "Renamed"}, headers=auth_headers(developer))
    assert response.status_code == 403

    db_session.expire_all()
    assert db_session.get(Task, task.id).title == "Original"

    response = client.put(f"/tasks/{task.id}", json={"status": "review"}, headers=auth_headers(developer))
    assert response.status_code == 200
    assert response.json()["status"] == "review"


def test_clearing_a_required_task_field_is_rejected(client, db_session, manager, project):
    task = make_task(db_session, project, manager)
    response = client.put(f"/tasks/{task.id}", json={"title": None}, headers=auth_headers(manager))
    assert response.status_code == 400


def test_last_assignee_completing_marks_task_done(client, db_session, manager, developer, project):
    task = make_task(db_session, project, manager, assignees=[developer], status=TaskStatus.IN_PROGRESS)

    response = client.put(f"/tasks/{task.id}/status", json={"status": "completed"}, headers=auth_headers(developer))
    assert response.status_code == 200
    assert response.json()["status"] == "done"
    assert response.json()["assignments"][0]["status"] == "completed"


def test_assignment_endpoints(client, manager, developer, designer, db_session, project):
    task = make_task(db_session, project, manager)
    headers = auth_headers(manager)

    response = client.post(f"/tasks/{task.id}/assign-user", json={"user_id": developer.id}, headers=headers)
    assert response.status_code == 200

    again = client.post(f"/tasks/{task.id}/assign-user", json={"user_id": developer.id}, headers=headers)
    assert again.status_code == 400

    response = client.post(f"/tasks/{task.id}/assign", json={"user_ids": [designer.id]}, headers=headers)
    assert [a["user_id"] for a in response.json()["assignments"]] == [designer.id]

    response = client.delete(f"/tasks/{task.id}/assign/{designer.id}", headers=headers)
    assert response.json()["assignments"] == []

    missing = client.delete(f"/tasks/{task.id}/assign/{designer.id}", headers=headers)
    assert missing.status_code == 400


def test_status_update_without_assignment(client, db_session, manager, developer, project):
    task = make_task(db_session, project, manager)
    response = client.put(f"/tasks/{task.id}/status", json={"status": "in_progress"}, headers=auth_headers(developer))
    assert response.status_code == 400


def test_comment_flow(client, db_session, manager, developer, designer, project):
    task = make_task(db_session, project, manager)

    created = client.post("/comments/", json={"task_id": task.id, "content": "Kickoff done"},
                          headers=auth_headers(developer))
    assert created.status_code == 201
    comment_id = created.json()["id"]
    assert created.json()["author"]["id"] == developer.id

    assert client.put(f"/comments/{comment_id}", json={"content": "Edited"},
                      headers=auth_headers(designer)).status_code == 403
    edited = client.put(f"/comments/{comment_id}", json={"content": "Edited"}, headers=auth_headers(developer))
    assert edited.json()["content"] == "Edited"

    listed = client.get(f"/comments/task/{task.id}", headers=auth_headers(designer))
    assert [c["content"] for c in listed.json()] == ["Edited"]

    assert client.delete(f"/comments/{comment_id}", headers=auth_headers(developer)).status_code == 204
    assert client.get(f"/comments/task/{task.id}", headers=auth_headers(designer)).json() == []


def test_user_tasks_and_projects(client, db_session, manager, developer, project):
    task = make_task(db_session, project, manager, assignees=[developer])

    tasks = client.get(f"/users/{developer.id}/tasks", headers=auth_headers(developer))
    assert [t["id"] for t in tasks.json()] == [task.id]

    projects = client.get(f"/users/{developer.id}/projects", headers=auth_headers(developer))
    assert [p["id"] for p in projects.json()] == [project.id]

    assert client.get(f"/users/{manager.id}", headers=auth_headers(developer)).status_code == 403
