import argparse
import getpass
import logging

from officer_duty.core.logging_config import setup_logging
from officer_duty.core.policy import Role
from officer_duty.core.security import hash_password
from officer_duty.database.base import Base
from officer_duty.database.session import SessionLocal, engine
from officer_duty.models.user import User

logger = logging.getLogger(__name__)


def create_admin(username: str = "admin", password: str | None = None, full_name: str = "System Admin"):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing_admin = db.query(User).filter(User.role == Role.admin).first()
        if existing_admin:
            logger.info("Admin already exists (%s)", existing_admin.username)
            return existing_admin

        admin = User(
            username=username,
            password_hash=hash_password(password or getpass.getpass("Admin password: ")),
            role=Role.admin,
            full_name=full_name,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        logger.info("Admin %s created successfully", admin.username)
        return admin
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first admin account")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password")
    parser.add_argument("--full-name", default="System Admin")
    args = parser.parse_args()

    setup_logging()
    create_admin(args.username, args.password, args.full_name)
