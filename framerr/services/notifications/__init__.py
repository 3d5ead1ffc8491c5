"""
Notification sink.

Every notification, whatever produced it, is stored through
NotificationService.create() and then delivered live by the emitter.

Architecture
------------
- NotificationService
    Stores, lists and mutates per-user notifications.

- NotificationEmitter
    Delivers a stored notification over SSE when the user has a stream
    open, otherwise over Web Push.

- WebPushService
    Manages VAPID keys and browser subscriptions and sends pushes with
    pywebpush.

Basic Usage
-----------
    from framerr.services.notifications import NotificationService

    NotificationService.create(
        db,
        user_id=user.id,
        type="info",
        title="Sonarr: Episode Grabbed",
        message="Dune Season 1 Episode 2 has been grabbed",
    )
"""

from framerr.services.notifications.emitter import (
    NotificationEmitter as NotificationEmitter,
)
from framerr.services.notifications.emitter import (
    notification_emitter as notification_emitter,
)
from framerr.services.notifications.push import WebPushService as WebPushService
from framerr.services.notifications.service import (
    NotificationService as NotificationService,
)
