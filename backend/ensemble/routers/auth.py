"""Authentication routes — login, logout, session introspection, password change."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ensemble.config import settings
from ensemble.database import get_db
from ensemble.deps import get_principal
from ensemble.models.user import User
from ensemble.schemas.auth import LoginRequest, LoginResponse, PasswordChange, SessionOut
from ensemble.services import auth_service
from ensemble.services.permissions import Principal

logger = logging.getLogger(__name__)
router = APIRouter()


def _issue_session(response: Response, user: User) -> LoginResponse:
    token = auth_service.create_session_token(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRES_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return LoginResponse(access_token=token, user=SessionOut(**auth_service.session_claims(user)))


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Exchange email + password for a signed session (cookie and bearer token)."""
    user = auth_service.authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _issue_session(response, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


@router.get("/session", response_model=SessionOut)
def read_session(principal: Principal = Depends(get_principal)):
    """Claims carried by the caller's session token."""
    return SessionOut(
        id=principal.id,
        email=principal.email,
        name=principal.name,
        role=principal.role,
        roles=list(principal.roles),
        permissions=sorted(principal.permissions),
        must_change_password=principal.must_change_password,
    )


@router.post("/change-password", response_model=LoginResponse)
def change_password(
    payload: PasswordChange,
    response: Response,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Set a new password, clear the forced-change flag and re-issue the session."""
    user = db.query(User).filter(User.id == principal.id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user.password_hash = auth_service.hash_password(payload.password)
    user.must_change_password = False
    db.commit()
    db.refresh(user)
    logger.info("User %s changed their password", user.id)
    return _issue_session(response, user)
