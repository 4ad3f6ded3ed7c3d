class NotificationError(Exception):
    """Base exception for notification store errors."""


class NotificationNotFound(NotificationError):
    """Raised when a notification id is not in the feed."""
