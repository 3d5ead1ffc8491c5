"""
Webhook ingestion.

Overseerr (and Jellyseerr/Seerr), Sonarr and Radarr post events to
``/api/webhooks/<service>/<token>``. Each call runs through:

1. validate_token()       token and "webhook enabled" check
2. normalize_event()      producer string -> EventKey (or ignored)
3. extract_fields() and
   build_content()        title and message for the event
4. route_notification()   pick recipients, honour preferences, create
                          notifications through NotificationService

Architecture
------------
- events.py
    EventKey vocabulary and per-producer mapping tables.

- content.py
    Field extraction and the title/message templates.

- resolver.py
    External username -> Framerr user, and per-user event preferences.

- routing.py
    RoutingDecision and per-recipient delivery.

- receiver.py
    handle_webhook(), the entry point used by the route.

Configuration
-------------
Per-integration settings live in the system configuration under
``integrations.<service>.webhookConfig``:

- webhookEnabled   accept calls at all
- webhookToken     secret carried in the URL path
- adminEvents      event keys admins receive
- userEvents       event keys regular users may receive
"""

from framerr.services.webhooks.events import EventKey as EventKey
from framerr.services.webhooks.events import normalize_event as normalize_event
from framerr.services.webhooks.receiver import handle_webhook as handle_webhook
from framerr.services.webhooks.receiver import validate_token as validate_token
