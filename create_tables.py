# create_tables.py
import logging
import os

from projecthub.database import SessionLocal, init_db
from projecthub.models import User, UserRole
from projecthub.services.transaction import atomic
from projecthub.utils.security import get_password_hash

logger = logging.getLogger(__name__)

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def create_tables():
    """Create all tables and the default admin"""
    init_db()
    print("✅ All tables created successfully!")
    create_default_admin()


def create_default_admin():
    """Create a default admin user unless one already exists"""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == ADMIN_EMAIL).first():
            print("ℹ️  Admin user already exists")
            return

        with atomic(db):
            db.add(User(
                username="admin",
                email=ADMIN_EMAIL,
                hashed_password=get_password_hash(ADMIN_PASSWORD),
                role=UserRole.ADMIN,
            ))
        print("✅ Default admin user created!")
        print(f"   Email: {ADMIN_EMAIL}")
        print(f"   Password: {ADMIN_PASSWORD}")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
