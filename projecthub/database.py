from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./projecthub.db")


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with the request threadpool
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    # If you're using PostgreSQL on Render or similar, keep sslmode=require
    if os.getenv("DATABASE_SSLMODE"):
        return {"sslmode": os.getenv("DATABASE_SSLMODE")}
    return {}


engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """Create every table registered on Base"""
    import projecthub.models  # noqa: F401  (registers the mappers)
    Base.metadata.create_all(bind=engine)


# Request-scoped session; one request is one transaction
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
