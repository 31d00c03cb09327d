import os
import tempfile

# Must be set before projecthub reads its configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECURITY_LOG_FILE"] = os.path.join(tempfile.mkdtemp(prefix="projecthub-tests-"), "security-events.log")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import projecthub.models as models  # noqa: E402
from projecthub.database import Base, get_db  # noqa: E402
from projecthub.utils.permissions import Identity  # noqa: E402
from projecthub.utils.security import create_access_token, get_password_hash  # noqa: E402

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
def db_session() -> Session:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    from main import app

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(session: Session, username: str, role=models.UserRole.DEVELOPER, email: str = None) -> models.User:
    user = models.User(
        username=username,
        email=email or f"{username}@example.com",
        hashed_password=PASSWORD_HASH,
        role=role,
    )
    session.add(user)
    session.commit()
    return user


def make_project(session: Session, manager: models.User, title: str = "Website Relaunch") -> models.Project:
    project = models.Project(title=title, manager_id=manager.id)
    session.add(project)
    session.commit()
    return project


def make_task(
    session: Session,
    project: models.Project,
    creator: models.User,
    title: str = "Write copy",
    assignees=(),
    status=models.TaskStatus.TODO,
) -> models.Task:
    task = models.Task(title=title, project_id=project.id, creator_id=creator.id, status=status)
    session.add(task)
    session.flush()
    for user in assignees:
        task.assignments.append(models.Assignment(user=user))
    session.commit()
    return task


def identity(user: models.User) -> Identity:
    return Identity.from_user(user)


def auth_headers(user: models.User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin", models.UserRole.ADMIN)


@pytest.fixture
def manager(db_session):
    return make_user(db_session, "maria", models.UserRole.MANAGER)


@pytest.fixture
def other_manager(db_session):
    return make_user(db_session, "omar", models.UserRole.MANAGER)


@pytest.fixture
def developer(db_session):
    return make_user(db_session, "alice", models.UserRole.DEVELOPER)


@pytest.fixture
def designer(db_session):
    return make_user(db_session, "dana", models.UserRole.DESIGNER)


@pytest.fixture
def project(db_session, manager):
    return make_project(db_session, manager)
