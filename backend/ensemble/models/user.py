"""User ORM model and the user_roles association table."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text, Table, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ensemble.database import Base

ADMIN_ROLE = "ADMIN"
MEMBER_ROLE = "USER"

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    instrument = Column(String(100), nullable=True)
    membership_number = Column(String(50), nullable=True, unique=True)
    image = Column(Text, nullable=True)  # URL or data URI
    must_change_password = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    roles = relationship("Role", secondary=user_roles, back_populates="users", lazy="selectin")
    clothing_items = relationship(
        "ClothingItem", back_populates="user", cascade="all, delete-orphan",
        order_by="ClothingItem.created_at.desc()",
    )
    attendances = relationship("Attendance", back_populates="user", cascade="all, delete-orphan")
    attendance_history = relationship("AttendanceHistory", back_populates="user", cascade="all, delete-orphan")
    change_requests = relationship("ProfileChangeRequest", back_populates="user", cascade="all, delete-orphan")

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name.upper() for role in self.roles)

    @property
    def role(self) -> str:
        """Legacy single-role view, derived from the role set."""
        return ADMIN_ROLE if ADMIN_ROLE in self.role_names else MEMBER_ROLE

    @property
    def permissions(self) -> list[str]:
        """Union of the permissions granted by every assigned role."""
        granted: set[str] = set()
        for role in self.roles:
            granted.update(role.permission_list)
        return sorted(granted)
