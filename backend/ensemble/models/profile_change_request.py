"""ProfileChangeRequest ORM model — member-proposed profile edits awaiting review."""
import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Index, Enum as SAEnum, text
from sqlalchemy.orm import relationship
from ensemble.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProfileChangeRequest(Base):
    __tablename__ = "profile_change_requests"
    __table_args__ = (
        # One PENDING request per user
        Index(
            "uq_profile_change_requests_pending_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    new_name = Column(String(150), nullable=True)
    new_email = Column(String(255), nullable=True)
    new_instrument = Column(String(100), nullable=True)
    new_image = Column(Text, nullable=True)
    status = Column(SAEnum(RequestStatus), nullable=False, default=RequestStatus.PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="change_requests")
