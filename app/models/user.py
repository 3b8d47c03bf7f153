# app/models/user.py
"""
Customer account as seen by the booking service.
Registration, passwords and profile data are owned by the account service.
"""
from sqlalchemy import Column, String, Uuid
from sqlalchemy.sql import func
import uuid

from app.models.base import Base
from app.models.types import UTCDateTime


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
