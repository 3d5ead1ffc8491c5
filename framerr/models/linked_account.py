from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String

from framerr.core.helpers import utcnow
from framerr.models import Base


class LinkedAccount(Base):
    """External account (e.g. Plex SSO) linked to a Framerr user."""

    __tablename__ = "linked_accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    service = Column(String(50), nullable=False)
    external_id = Column(String(255), nullable=False)
    external_username = Column(String(255), nullable=True)
    external_email = Column(String(255), nullable=True)
    extra = Column("metadata", JSON, default=dict)
    linked_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_linked_accounts_user_service", "user_id", "service", unique=True),
        Index("ix_linked_accounts_service_username", "service", "external_username"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "service": self.service,
            "externalId": self.external_id,
            "externalUsername": self.external_username,
            "externalEmail": self.external_email,
            "metadata": self.extra or {},
            "linkedAt": self.linked_at.isoformat() if self.linked_at else None,
        }
