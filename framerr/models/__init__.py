from sqlalchemy.orm import declarative_base

Base = declarative_base()

from framerr.models.linked_account import LinkedAccount  # noqa: E402
from framerr.models.notification import Notification  # noqa: E402
from framerr.models.push_subscription import PushSubscription  # noqa: E402
from framerr.models.session import UserSession  # noqa: E402
from framerr.models.settings import Settings  # noqa: E402
from framerr.models.user import User  # noqa: E402
from framerr.models.user_config import UserConfig  # noqa: E402

__all__ = [
    "Base",
    "LinkedAccount",
    "Notification",
    "PushSubscription",
    "Settings",
    "User",
    "UserConfig",
    "UserSession",
]
