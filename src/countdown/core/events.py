"""Well-known event type constants.

Defined centrally so publishers and subscribers reference the same strings.
"""

# --- Countdown state (engine → presentation) -------------------------------

STATE_CHANGED = "countdown.state.changed"

# --- Fetch lifecycle ---------------------------------------------------------

FETCH_ISSUED = "countdown.fetch.issued"
FETCH_COMPLETED = "countdown.fetch.completed"

# --- Notifications -------------------------------------------------------------

NOTIFICATION_SCHEDULED = "countdown.notification.scheduled"
NOTIFICATION_CANCELLED = "countdown.notification.cancelled"
NOTIFICATION_FIRED = "countdown.notification.fired"

# --- Settings / system -----------------------------------------------------------

SETTINGS_COMMITTED = "system.settings.committed"
SYSTEM_STARTED = "system.started"
SHUTDOWN_INITIATED = "system.shutdown.initiated"
