from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from framerr.core.helpers import utcnow
from framerr.models import Base


class PushSubscription(Base):
    """A browser Web Push subscription belonging to a user's device."""

    __tablename__ = "push_subscriptions"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)
    device_name = Column(String(100), nullable=True)
    last_used = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def subscription_info(self) -> dict:
        """Shape expected by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "endpoint": self.endpoint,
            "deviceName": self.device_name,
            "lastUsed": self.last_used.isoformat() if self.last_used else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
