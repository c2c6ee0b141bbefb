"""Credential checks and signed session tokens.

Login embeds the caller's role names and the union of their role
permissions into a JWT, so later requests authorize from the token alone.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from ensemble.config import settings
from ensemble.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # Placeholder or corrupted hashes never match
        return False


def session_claims(user: User) -> dict[str, Any]:
    """Claims describing ``user`` for the session token."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "roles": user.role_names,
        "permissions": user.permissions,
        "must_change_password": bool(user.must_change_password),
    }


def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Return the user for valid credentials, None otherwise.

    Unknown emails and wrong passwords are indistinguishable to the caller.
    """
    if not email or not password:
        return None
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(user.password_hash, password):
        logger.warning("Failed login attempt for %s", email)
        return None
    logger.info("User %s logged in (roles=%s)", user.id, user.role_names)
    return user


def create_session_token(user: User, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.SESSION_EXPIRES_MINUTES)
    payload = {**session_claims(user), "sub": user.id, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> dict[str, Any]:
    """Decode and verify a session token. Raises ``jwt.PyJWTError`` when invalid."""
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
