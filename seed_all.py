"""
Master Database Seeding Script
Creates database tables and populates them with demo data
"""

import sys
from datetime import date, timedelta

from dotenv import load_dotenv

load_dotenv()

from create_tables import create_tables  # noqa: E402
from projecthub.database import SessionLocal  # noqa: E402
from projecthub.models import (  # noqa: E402
    AssignmentStatus, Project, ProjectStatus, Task, TaskPriority, TaskStatus, User, UserRole,
)
from projecthub.services.assignments import AssignmentLedger  # noqa: E402
from projecthub.services.transaction import atomic  # noqa: E402
from projecthub.utils.security import get_password_hash  # noqa: E402

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"username": "maria.manager", "email": "maria@example.com", "role": UserRole.MANAGER},
    {"username": "omar.manager", "email": "omar@example.com", "role": UserRole.MANAGER},
    {"username": "dev.alice", "email": "alice@example.com", "role": UserRole.DEVELOPER},
    {"username": "dev.bob", "email": "bob@example.com", "role": UserRole.DEVELOPER},
    {"username": "dana.designer", "email": "dana@example.com", "role": UserRole.DESIGNER},
    {"username": "tom.tester", "email": "tom@example.com", "role": UserRole.TESTER},
]

# manager refers to a DEMO_USERS username
DEMO_PROJECTS = [
    {
        "title": "Customer Portal",
        "description": "Self-service portal for customer accounts",
        "status": ProjectStatus.IN_PROGRESS,
        "manager": "maria.manager",
        "start_offset": -30,
        "length": 90,
    },
    {
        "title": "Mobile App Redesign",
        "description": "New navigation and visual language for the mobile app",
        "status": ProjectStatus.PLANNING,
        "manager": "omar.manager",
        "start_offset": 7,
        "length": 60,
    },
]

# assignees are (username, assignment status) pairs
DEMO_TASKS = [
    {
        "project": "Customer Portal",
        "title": "Design login flow",
        "status": TaskStatus.DONE,
        "priority": TaskPriority.HIGH,
        "estimated_hours": 8,
        "actual_hours": 10,
        "assignees": [("dana.designer", AssignmentStatus.COMPLETED)],
    },
    {
        "project": "Customer Portal",
        "title": "Implement account API",
        "status": TaskStatus.IN_PROGRESS,
        "priority": TaskPriority.CRITICAL,
        "estimated_hours": 24,
        "actual_hours": 12,
        "assignees": [("dev.alice", AssignmentStatus.IN_PROGRESS), ("dev.bob", AssignmentStatus.ASSIGNED)],
    },
    {
        "project": "Customer Portal",
        "title": "Regression test plan",
        "status": TaskStatus.TODO,
        "priority": TaskPriority.MEDIUM,
        "estimated_hours": 6,
        "actual_hours": None,
        "assignees": [("tom.tester", AssignmentStatus.ASSIGNED)],
    },
    {
        "project": "Mobile App Redesign",
        "title": "Navigation wireframes",
        "status": TaskStatus.BACKLOG,
        "priority": TaskPriority.HIGH,
        "estimated_hours": 16,
        "actual_hours": None,
        "assignees": [("dana.designer", AssignmentStatus.ASSIGNED)],
    },
]


def seed_demo_users(session):
    """Create demo users, skipping any that already exist"""
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Users")
    print(f"{'='*60}")

    users = {}
    with atomic(session):
        for user_data in DEMO_USERS:
            user = session.query(User).filter(User.email == user_data["email"]).first()
            if user:
                print(f"[SKIP] User {user_data['email']} already exists, skipping...")
            else:
                user = User(
                    username=user_data["username"],
                    email=user_data["email"],
                    hashed_password=get_password_hash(DEMO_PASSWORD),
                    role=user_data["role"],
                )
                session.add(user)
                print(f"[SUCCESS] Created user: {user_data['username']} ({user_data['role'].value})")
            users[user_data["username"]] = user
    return users


def seed_demo_projects(session, users):
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Projects")
    print(f"{'='*60}")

    projects = {}
    with atomic(session):
        for project_data in DEMO_PROJECTS:
            project = session.query(Project).filter(Project.title == project_data["title"]).first()
            if project:
                print(f"[SKIP] Project {project_data['title']} already exists, skipping...")
            else:
                start = date.today() + timedelta(days=project_data["start_offset"])
                project = Project(
                    title=project_data["title"],
                    description=project_data["description"],
                    status=project_data["status"],
                    start_date=start,
                    end_date=start + timedelta(days=project_data["length"]),
                    manager=users[project_data["manager"]],
                )
                session.add(project)
                print(f"[SUCCESS] Created project: {project_data['title']}")
            projects[project_data["title"]] = project
    return projects


def seed_demo_tasks(session, users, projects):
    print(f"\n{'='*60}")
    print("🚀 Creating Demo Tasks and Assignments")
    print(f"{'='*60}")

    ledger = AssignmentLedger(session)
    with atomic(session):
        for task_data in DEMO_TASKS:
            project = projects[task_data["project"]]
            existing = (
                session.query(Task)
                .filter(Task.project_id == project.id, Task.title == task_data["title"])
                .first()
            )
            if existing:
                print(f"[SKIP] Task {task_data['title']} already exists, skipping...")
                continue

            task = Task(
                title=task_data["title"],
                status=task_data["status"],
                priority=task_data["priority"],
                estimated_hours=task_data["estimated_hours"],
                actual_hours=task_data["actual_hours"],
                due_date=project.end_date,
                project_id=project.id,
                creator_id=project.manager_id,
            )
            session.add(task)
            session.flush()

            for username, assignment_status in task_data["assignees"]:
                assignment = ledger.assign(task, users[username])
                assignment.status = assignment_status
            print(f"[SUCCESS] Created task: {task_data['title']} ({len(task_data['assignees'])} assignee(s))")


def main():
    create_tables()

    session = SessionLocal()
    try:
        users = seed_demo_users(session)
        projects = seed_demo_projects(session, users)
        seed_demo_tasks(session, users, projects)
    except Exception as e:
        print(f"[ERROR] Seeding failed: {e}")
        return 1
    finally:
        session.close()

    print(f"\n{'='*60}")
    print("✅ Demo data ready")
    print(f"   Demo password for every user: {DEMO_PASSWORD}")
    print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
