from datetime import timedelta

from sqlalchemy import Column, DateTime, ForeignKey, String

from framerr.core.helpers import generate_token, utcnow
from framerr.models import Base

DEFAULT_SESSION_TIMEOUT_MS = 86_400_000


class UserSession(Base):
    """Login session referenced by the session cookie."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True, default=generate_token)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    @classmethod
    def start(
        cls,
        db,
        user_id: str,
        timeout_ms: int = DEFAULT_SESSION_TIMEOUT_MS,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> "UserSession":
        """Create and commit a new session for ``user_id``."""
        session = cls(
            user_id=user_id,
            ip_address=ip_address,
            user_agent=(user_agent or "")[:255] or None,
            expires_at=utcnow() + timedelta(milliseconds=timeout_ms),
        )
        db.add(session)
        db.commit()
        return session

    @property
    def expired(self) -> bool:
        return self.expires_at <= utcnow()
