from intake.workflow.models import WorkflowStatus


class WorkflowError(Exception):
    """Base exception for all translation workflow errors."""


class InvalidTransition(WorkflowError):
    """Raised when an operation is attempted before its prerequisite state."""

    def __init__(
        self,
        operation: str,
        current: WorkflowStatus,
        required: tuple[WorkflowStatus, ...],
    ) -> None:
        self.operation = operation
        self.current = current
        self.required = required
        names = " or ".join(status.value for status in required)
        super().__init__(
            f"Cannot {operation} while {current.value}; requires {names}"
        )


class EmptySelection(WorkflowError):
    """Raised when calculation is requested with no target languages selected."""


class NotCalculated(WorkflowError):
    """Raised when submission is attempted on a request that is not Calculated."""

    def __init__(self, current: WorkflowStatus) -> None:
        self.current = current
        super().__init__(
            f"Request must be {WorkflowStatus.CALCULATED.value} to submit; "
            f"currently {current.value}"
        )


class SubmissionInProgress(InvalidTransition):
    """Raised when a workflow is changed while its submission is in flight."""

    def __init__(self, operation: str, current: WorkflowStatus) -> None:
        self.operation = operation
        self.current = current
        self.required = (current,)
        WorkflowError.__init__(
            self, f"Cannot {operation} while the request is being submitted"
        )
