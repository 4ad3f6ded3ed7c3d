class SessionClosed(Exception):
    """Raised when an operation reaches a session that has already ended."""
