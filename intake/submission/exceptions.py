class SubmissionError(Exception):
    """Base exception for all job service errors."""


class RejectedByServer(SubmissionError):
    """Raised when the job service refuses a request (validation or conflict)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Rejected by server: {reason}")


class JobServiceUnavailable(SubmissionError):
    """Raised when the job service cannot be reached or fails internally."""
