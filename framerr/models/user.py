"""User account model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, func

from framerr.core.constants import GROUP_ADMIN, GROUP_USER
from framerr.core.helpers import utcnow
from framerr.models import Base


class User(Base):
    """A Framerr account. ``group`` decides admin vs regular user."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), nullable=False, unique=True)
    display_name = Column(String(100), nullable=True)
    password_hash = Column(String(100), nullable=True)
    group = Column(String(20), nullable=False, default=GROUP_USER)
    is_setup_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.group == GROUP_ADMIN

    @classmethod
    def admins(cls, db) -> list["User"]:
        """All admin accounts, oldest first."""
        return db.query(cls).filter_by(group=GROUP_ADMIN).order_by(cls.created_at).all()

    @classmethod
    def find_by_username(cls, db, username: str) -> "User | None":
        """Case-insensitive username lookup."""
        normalised = username.strip().lower()
        if not normalised:
            return None
        return db.query(cls).filter(func.lower(cls.username) == normalised).first()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name or self.username,
            "group": self.group,
            "isSetupAdmin": self.is_setup_admin,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }
