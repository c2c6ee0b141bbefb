"""Request dependencies: resolve the session token into an explicit Principal."""
import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ensemble.config import settings
from ensemble.database import get_db
from ensemble.models.user import User
from ensemble.services import auth_service
from ensemble.services.permissions import Permission, Principal

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """Any valid session, including ones that must change their password."""
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        claims = auth_service.decode_session_token(token)
        return Principal.from_claims(claims)
    except (jwt.PyJWTError, KeyError) as exc:
        logger.info("Rejected session token: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session") from exc


def get_active_principal(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> Principal:
    """A valid session for an existing user that is not pending a forced password change."""
    if db.query(User.id).filter(User.id == principal.id).first() is None:
        logger.info("Rejected session for deleted user %s", principal.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")
    if principal.must_change_password:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Password change required")
    return principal


def require_permission(*required: Permission):
    """Dependency factory: the caller must be an admin or hold one of ``required``."""

    def _check(principal: Principal = Depends(get_active_principal)) -> Principal:
        if not principal.can(*required):
            logger.warning(
                "User %s denied: needs one of %s",
                principal.id, [p.value for p in required],
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return principal

    return _check
