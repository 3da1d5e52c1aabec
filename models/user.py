"""
Profile and role models for PostgreSQL
Identity itself lives in Firebase Auth; these rows hold storefront-side data
"""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class Profile(RecordMixin, Base):
    __tablename__ = "profiles"

    # Primary key - Firebase Auth UID
    id = Column(String(128), primary_key=True, index=True)

    email = Column(String(255), index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)


class UserRole(RecordMixin, Base):
    __tablename__ = "user_roles"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), index=True, nullable=False)
    role = Column(String(20), nullable=False, default="user")  # admin, user

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
