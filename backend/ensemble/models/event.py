"""Event ORM model — registration is open until `is_closed` is set."""
import uuid
from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ensemble.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    location = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    is_closed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    attendances = relationship("Attendance", back_populates="event", cascade="all, delete-orphan")
    attendance_history = relationship(
        "AttendanceHistory", back_populates="event", cascade="all, delete-orphan",
        order_by="AttendanceHistory.created_at.desc()",
    )
