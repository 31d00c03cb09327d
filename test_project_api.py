from conftest import auth_headers, make_task, make_user
from projecthub.models import Assignment, Project, Task, UserRole


def test_manager_creates_project_and_developer_cannot(client, manager, developer):
    payload = {"title": "Analytics", "start_date": "2025-01-01", "end_date": "2025-06-30"}

    denied = client.post("/projects/", json=payload, headers=auth_headers(developer))
    assert denied.status_code == 403

    response = client.post("/projects/", json=payload, headers=auth_headers(manager))
    assert response.status_code == 201
    body = response.json()
    assert body["manager"]["id"] == manager.id
    assert body["status"] == "planning"


def test_project_dates_must_be_ordered(client, manager):
    response = client.post("/projects/", json={
        "title": "Backwards",
        "start_date": "2025-06-30",
        "end_date": "2025-01-01",
    }, headers=auth_headers(manager))
    assert response.status_code == 400
    assert response.json()["detail"] == "Validation failed"


def test_foreign_manager_update_leaves_title_unchanged(client, db_session, project, other_manager, manager):
    response = client.put(f"/projects/{project.id}", json={"title": "Renamed"}, headers=auth_headers(other_manager))
    assert response.status_code == 403

    assert client.get(f"/projects/{project.id}", headers=auth_headers(manager)).json()["title"] == "Website Relaunch"

    response = client.put(f"/projects/{project.id}", json={"title": "Renamed"}, headers=auth_headers(manager))
    assert response.json()["title"] == "Renamed"


def test_manager_reassignment(client, project, manager, other_manager):
    response = client.put(f"/projects/{project.id}", json={"manager_id": other_manager.id},
                          headers=auth_headers(manager))
    assert response.status_code == 200
    assert response.json()["manager"]["id"] == other_manager.id

    response = client.put(f"/projects/{project.id}", json={"manager_id": 999}, headers=auth_headers(other_manager))
    assert response.status_code == 404


def test_team_endpoints(client, db_session, project, manager, developer, designer):
    headers = auth_headers(manager)

    team = client.get(f"/projects/{project.id}/team", headers=headers).json()
    assert [(m["user"]["id"], m["project_role"]) for m in team] == [(manager.id, "manager")]

    available = client.get(f"/projects/{project.id}/team/available", headers=headers).json()
    assert [u["id"] for u in available] == [developer.id, designer.id]

    response = client.post(f"/projects/{project.id}/team", json={"user_id": developer.id}, headers=headers)
    assert response.status_code == 201
    team = response.json()
    assert [(m["user"]["id"], m["project_role"]) for m in team] == [
        (manager.id, "manager"),
        (developer.id, "member"),
    ]
    assert team[1]["tasks"][0]["title"] == "Project Setup"

    again = client.post(f"/projects/{project.id}/team", json={"user_id": developer.id}, headers=headers)
    assert again.status_code == 400

    response = client.delete(f"/projects/{project.id}/team/{developer.id}", headers=headers)
    assert [m["user"]["id"] for m in response.json()] == [manager.id]


def test_available_users_requires_team_management(client, project, developer):
    response = client.get(f"/projects/{project.id}/team/available", headers=auth_headers(developer))
    assert response.status_code == 403


def test_project_tasks_and_stats(client, db_session, project, manager, developer):
    make_task(db_session, project, manager, "One", assignees=[developer])
    make_task(db_session, project, manager, "Two")

    tasks = client.get(f"/projects/{project.id}/tasks", headers=auth_headers(developer)).json()
    assert [t["title"] for t in tasks] == ["One", "Two"]

    stats = client.get(f"/projects/{project.id}/stats", headers=auth_headers(developer)).json()
    assert stats["total_tasks"] == 2
    assert stats["todo_tasks"] == 2
    assert stats["completion_rate"] == 0


def test_delete_project_cascades(client, db_session, admin, project, manager, developer, designer):
    tester = make_user(db_session, "tom", UserRole.TESTER)
    make_task(db_session, project, manager, "One", assignees=[developer, designer])
    make_task(db_session, project, manager, "Two", assignees=[developer, tester])
    make_task(db_session, project, manager, "Three", assignees=[designer])
    project_id = project.id

    response = client.delete(f"/projects/{project_id}", headers=auth_headers(admin))
    assert response.status_code == 204

    db_session.expire_all()
    assert db_session.query(Project).count() == 0
    assert db_session.query(Task).count() == 0
    assert db_session.query(Assignment).count() == 0

    assert client.delete(f"/projects/{project_id}", headers=auth_headers(admin)).status_code == 404


def test_developer_cannot_delete_project(client, project, developer):
    assert client.delete(f"/projects/{project.id}", headers=auth_headers(developer)).status_code == 403
