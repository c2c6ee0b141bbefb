"""Create the ADMIN role and an initial administrator.

Usage: ``python -m ensemble.seed`` (reads SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD).
Running it again re-attaches the role and resets the admin password.
"""
import logging

from sqlalchemy.orm import Session

from ensemble.config import settings
from ensemble.database import SessionLocal
from ensemble.logging_config import setup_logging
from ensemble.models.role import Role
from ensemble.models.user import ADMIN_ROLE, User
from ensemble.services.auth_service import hash_password
from ensemble.services.permissions import ALL_PERMISSIONS

logger = logging.getLogger(__name__)


def seed_admin(db: Session, email: str, password: str) -> User:
    role = db.query(Role).filter(Role.name == ADMIN_ROLE).first()
    if role is None:
        role = Role(name=ADMIN_ROLE)
        role.permission_list = ALL_PERMISSIONS
        db.add(role)
        db.flush()
        logger.info("Created role %s", ADMIN_ROLE)

    admin = db.query(User).filter(User.email == email).first()
    if admin is None:
        admin = User(name="Admin User", email=email, must_change_password=False)
        db.add(admin)
        logger.info("Created admin user %s", email)
    admin.password_hash = hash_password(password)
    if role not in admin.roles:
        admin.roles.append(role)

    db.commit()
    db.refresh(admin)
    return admin


def main() -> None:
    setup_logging()
    db = SessionLocal()
    try:
        admin = seed_admin(db, settings.SEED_ADMIN_EMAIL, settings.SEED_ADMIN_PASSWORD)
        logger.info("Admin %s ready (roles=%s)", admin.email, admin.role_names)
    finally:
        db.close()


if __name__ == "__main__":
    main()
