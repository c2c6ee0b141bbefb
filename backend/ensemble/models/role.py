"""Role ORM model — a named set of permission tokens."""
import json
import logging
import uuid
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ensemble.database import Base
from ensemble.models.user import user_roles

logger = logging.getLogger(__name__)


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, unique=True)
    permissions = Column(Text, nullable=False, default="[]")  # JSON-encoded list
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", secondary=user_roles, back_populates="roles")

    @property
    def permission_list(self) -> list[str]:
        try:
            parsed = json.loads(self.permissions or "[]")
        except ValueError:
            logger.warning("Role %s has unreadable permissions: %r", self.id, self.permissions)
            return []
        if not isinstance(parsed, list):
            return []
        return [str(p) for p in parsed]

    @permission_list.setter
    def permission_list(self, values) -> None:
        self.permissions = json.dumps(sorted({str(v) for v in values}))
