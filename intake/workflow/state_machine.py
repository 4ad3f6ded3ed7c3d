import uuid
from collections.abc import Iterable
from decimal import Decimal

from intake.analysis.models import DocumentAnalysis
from intake.logging.logger import Log
from intake.pricing.calculator import CalculationSummary, CostCalculator
from intake.workflow.exceptions import (
    EmptySelection,
    InvalidTransition,
    SubmissionInProgress,
)
from intake.workflow.models import TranslationRequest, WorkflowStatus


class TranslationWorkflow:
    """Owns one request's lifecycle and rejects out-of-order operations.

    Draft -> Analyzed -> LanguagesSelected -> Calculated -> Submitted, with a
    single explicit rewind from Calculated back to LanguagesSelected.
    """

    def __init__(self, project_name: str | None = None) -> None:
        self.handle_id = uuid.uuid4().hex
        self._project_name = project_name
        self._status = WorkflowStatus.DRAFT
        self._request: TranslationRequest | None = None
        self._selection: frozenset[str] = frozenset()
        self._summary: CalculationSummary | None = None
        self._submitting = False

    @property
    def status(self) -> WorkflowStatus:
        return self._status

    @property
    def request(self) -> TranslationRequest | None:
        return self._request

    @property
    def selected_languages(self) -> frozenset[str]:
        return self._selection

    @property
    def summary(self) -> CalculationSummary | None:
        return self._summary

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def attach_analysis(self, analysis: DocumentAnalysis) -> None:
        self._require("attach analysis", WorkflowStatus.DRAFT)
        self._request = TranslationRequest(
            analysis=analysis, project_name=self._project_name
        )
        self._move_to(WorkflowStatus.ANALYZED)

    def select_languages(self, languages: Iterable[str]) -> None:
        """Replace the language selection.

        Re-entrant in LanguagesSelected; leaves Analyzed only once the
        selection is non-empty.
        """
        self._require(
            "select languages",
            WorkflowStatus.ANALYZED,
            WorkflowStatus.LANGUAGES_SELECTED,
        )
        self._selection = frozenset(
            language.strip() for language in languages if language.strip()
        )
        self._active_request().target_languages = self._selection
        if self._status == WorkflowStatus.ANALYZED and self._selection:
            self._move_to(WorkflowStatus.LANGUAGES_SELECTED)

    def complete_selection(self, calculator: CostCalculator) -> CalculationSummary:
        self._require("complete selection", WorkflowStatus.LANGUAGES_SELECTED)
        if not self._selection:
            raise EmptySelection("Select at least one target language")

        request = self._active_request()
        summary = calculator.calculate(request.analysis, self._selection)
        request.credits_required = summary.credits_required
        request.total_cost = summary.total_cost
        self._summary = summary
        self._move_to(WorkflowStatus.CALCULATED)
        return summary

    def edit_selection(self) -> None:
        """Rewind to LanguagesSelected, discarding the computed cost."""
        self._require("edit selection", WorkflowStatus.CALCULATED)
        request = self._active_request()
        request.credits_required = 0
        request.total_cost = Decimal("0")
        self._summary = None
        self._move_to(WorkflowStatus.LANGUAGES_SELECTED)

    def begin_submission(self) -> None:
        """Freeze the request while the job service call is outstanding."""
        self._require("submit", WorkflowStatus.CALCULATED)
        self._submitting = True

    def abort_submission(self) -> None:
        """Unfreeze after a failed job service call; the request stays Calculated."""
        self._submitting = False

    def mark_submitted(self, job_id: int) -> None:
        self._require("mark submitted", WorkflowStatus.CALCULATED, frozen_ok=True)
        request = self._active_request()
        request.id = job_id
        self._submitting = False
        self._move_to(WorkflowStatus.SUBMITTED)

    def _require(
        self,
        operation: str,
        *allowed: WorkflowStatus,
        frozen_ok: bool = False,
    ) -> None:
        if self._submitting and not frozen_ok:
            raise SubmissionInProgress(operation, self._status)
        if self._status not in allowed:
            raise InvalidTransition(operation, self._status, allowed)

    def _active_request(self) -> TranslationRequest:
        if self._request is None:
            raise InvalidTransition("use request", self._status, (WorkflowStatus.ANALYZED,))
        return self._request

    def _move_to(self, status: WorkflowStatus) -> None:
        Log.info(
            "Workflow transition",
            workflow=self.handle_id,
            from_status=self._status.value,
            to_status=status.value,
        )
        self._status = status
        if self._request is not None:
            self._request.status = status
