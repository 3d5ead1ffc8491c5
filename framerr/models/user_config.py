"""Per-user configuration (preferences document)."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from framerr.core.helpers import deep_merge, utcnow
from framerr.models import Base


class UserConfig(Base):
    """
    JSON preferences owned by a single user.

    Notification-relevant keys:
        notifications.receiveUnmatched            (admins, default True)
        notifications.integrations.<service>      {"enabled": bool, "events": [...]}
        linkedAccounts.overseerr.username         manual Overseerr link
    """

    __tablename__ = "user_configs"

    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    preferences = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @classmethod
    def get_preferences(cls, db, user_id: str) -> dict:
        """Return the user's preferences, or an empty dict."""
        config = db.get(cls, user_id)
        return dict(config.preferences or {}) if config else {}

    @classmethod
    def merge_preferences(
        cls, db, user_id: str, updates: dict, commit: bool = True
    ) -> dict:
        """
        Deep-merge ``updates`` into the stored preferences.

        Args:
            db: Database session.
            user_id: Owner of the preferences.
            updates: Partial preferences document.
            commit: Whether to commit the transaction.

        Returns:
            The merged preferences.
        """
        config = db.get(cls, user_id)
        if config is None:
            config = cls(user_id=user_id, preferences={})
            db.add(config)

        # Assign a new object so SQLAlchemy sees the JSON column change
        config.preferences = deep_merge(config.preferences or {}, updates)
        if commit:
            db.commit()
        return config.preferences
