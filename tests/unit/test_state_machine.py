from decimal import Decimal

import pytest

from intake.pricing.calculator import CostCalculator
from intake.workflow.exceptions import EmptySelection, InvalidTransition, SubmissionInProgress
from intake.workflow.models import WorkflowStatus
from intake.workflow.state_machine import TranslationWorkflow

CALCULATOR = CostCalculator(Decimal("0.01"))


def _analyzed(make_analysis, **overrides) -> TranslationWorkflow:  # type: ignore[no-untyped-def]
    workflow = TranslationWorkflow()
    workflow.attach_analysis(make_analysis(**overrides))
    return workflow


def _calculated(make_analysis) -> TranslationWorkflow:  # type: ignore[no-untyped-def]
    workflow = _analyzed(make_analysis)
    workflow.select_languages({"French", "German"})
    workflow.complete_selection(CALCULATOR)
    return workflow


class TestInitialState:
    def test_starts_in_draft(self) -> None:
        workflow = TranslationWorkflow()
        assert workflow.status == WorkflowStatus.DRAFT
        assert workflow.request is None

    def test_attach_analysis_moves_to_analyzed(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        assert workflow.status == WorkflowStatus.ANALYZED
        assert workflow.request is not None
        assert workflow.request.status == WorkflowStatus.ANALYZED
        assert workflow.request.id is None

    def test_attach_analysis_twice_is_rejected(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        with pytest.raises(InvalidTransition):
            workflow.attach_analysis(make_analysis())


class TestSelectLanguages:
    def test_non_empty_selection_advances(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])

        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
        assert workflow.selected_languages == frozenset({"French"})

    def test_empty_selection_stays_analyzed(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages([])
        assert workflow.status == WorkflowStatus.ANALYZED

    def test_reselection_is_reentrant(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])
        workflow.select_languages(["German", "Spanish"])

        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
        assert workflow.selected_languages == frozenset({"German", "Spanish"})

    def test_deselecting_everything_keeps_languages_selected(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])
        workflow.select_languages([])

        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
        assert workflow.selected_languages == frozenset()

    def test_blank_names_are_ignored(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["  ", " French "])
        assert workflow.selected_languages == frozenset({"French"})

    def test_rejected_in_draft(self) -> None:
        workflow = TranslationWorkflow()
        with pytest.raises(InvalidTransition) as exc_info:
            workflow.select_languages(["French"])

        assert exc_info.value.current == WorkflowStatus.DRAFT
        assert WorkflowStatus.ANALYZED in exc_info.value.required

    def test_rejected_in_calculated(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        with pytest.raises(InvalidTransition):
            workflow.select_languages(["Italian"])
        assert workflow.status == WorkflowStatus.CALCULATED


class TestCompleteSelection:
    def test_calculates_and_advances(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis, char_count=10000)
        workflow.select_languages({"French", "German"})

        summary = workflow.complete_selection(CALCULATOR)

        assert workflow.status == WorkflowStatus.CALCULATED
        assert summary.credits_required == 20000
        assert summary.total_cost == Decimal("200.00")
        assert workflow.request is not None
        assert workflow.request.credits_required == 20000
        assert workflow.request.total_cost == Decimal("200.00")
        assert workflow.summary == summary

    def test_empty_selection_raises_and_keeps_state(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])
        workflow.select_languages([])

        with pytest.raises(EmptySelection):
            workflow.complete_selection(CALCULATOR)

        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
        assert workflow.summary is None

    def test_rejected_before_languages_selected(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        with pytest.raises(InvalidTransition, match="complete selection"):
            workflow.complete_selection(CALCULATOR)
        assert workflow.status == WorkflowStatus.ANALYZED

    def test_rejected_in_draft(self) -> None:
        with pytest.raises(InvalidTransition):
            TranslationWorkflow().complete_selection(CALCULATOR)


class TestEditSelection:
    def test_rewinds_and_discards_cost(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.edit_selection()

        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
        assert workflow.summary is None
        assert workflow.request is not None
        assert workflow.request.credits_required == 0
        assert workflow.request.total_cost == Decimal("0")

    def test_preserves_analysis_and_languages(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        analysis = workflow.request.analysis  # type: ignore[union-attr]

        workflow.edit_selection()

        assert workflow.request is not None
        assert workflow.request.analysis is analysis
        assert workflow.selected_languages == frozenset({"French", "German"})

    def test_recalculates_after_new_selection(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.edit_selection()
        workflow.select_languages(["French"])

        summary = workflow.complete_selection(CALCULATOR)

        assert summary.credits_required == 10000
        assert workflow.status == WorkflowStatus.CALCULATED

    def test_second_rewind_without_recalculation_is_rejected(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.edit_selection()
        with pytest.raises(InvalidTransition):
            workflow.edit_selection()

    def test_rejected_before_calculation(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        with pytest.raises(InvalidTransition):
            workflow.edit_selection()


class TestMarkSubmitted:
    def test_assigns_id_and_finalizes(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.mark_submitted(42)

        assert workflow.status == WorkflowStatus.SUBMITTED
        assert workflow.request is not None
        assert workflow.request.id == 42
        assert workflow.request.status == WorkflowStatus.SUBMITTED

    def test_submitted_is_terminal(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.mark_submitted(42)

        with pytest.raises(InvalidTransition):
            workflow.edit_selection()
        with pytest.raises(InvalidTransition):
            workflow.select_languages(["Italian"])
        with pytest.raises(InvalidTransition):
            workflow.mark_submitted(43)

    def test_rejected_before_calculation(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])
        with pytest.raises(InvalidTransition):
            workflow.mark_submitted(1)


class TestMonotonicLifecycle:
    def test_status_only_regresses_through_edit_selection(self, make_analysis) -> None:
        workflow = TranslationWorkflow()
        observed = [workflow.status]

        def record(action) -> None:  # type: ignore[no-untyped-def]
            try:
                action()
            except (InvalidTransition, EmptySelection):
                pass
            observed.append(workflow.status)

        record(lambda: workflow.select_languages(["French"]))
        record(lambda: workflow.attach_analysis(make_analysis()))
        record(lambda: workflow.complete_selection(CALCULATOR))
        record(lambda: workflow.select_languages(["French"]))
        record(lambda: workflow.complete_selection(CALCULATOR))
        record(workflow.edit_selection)
        record(lambda: workflow.complete_selection(CALCULATOR))
        record(lambda: workflow.mark_submitted(7))
        record(workflow.edit_selection)

        regressions = [
            (before, after)
            for before, after in zip(observed, observed[1:])
            if after.rank < before.rank
        ]
        assert regressions == [
            (WorkflowStatus.CALCULATED, WorkflowStatus.LANGUAGES_SELECTED)
        ]
        assert observed[-1] == WorkflowStatus.SUBMITTED


class TestRequestLabel:
    def test_uses_project_name_when_given(self, make_analysis) -> None:
        workflow = TranslationWorkflow(project_name="Spring Campaign")
        workflow.attach_analysis(make_analysis())
        assert workflow.request is not None
        assert workflow.request.label == "Spring Campaign"

    def test_falls_back_to_file_name(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis, file_name="Manual.pdf")
        assert workflow.request is not None
        assert workflow.request.label == "Manual.pdf"


class TestSubmissionFreeze:
    def test_begin_submission_requires_calculated(self, make_analysis) -> None:
        workflow = _analyzed(make_analysis)
        workflow.select_languages(["French"])
        with pytest.raises(InvalidTransition):
            workflow.begin_submission()
        assert workflow.is_submitting is False

    def test_frozen_workflow_rejects_changes(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.begin_submission()

        with pytest.raises(SubmissionInProgress, match="being submitted"):
            workflow.edit_selection()
        with pytest.raises(SubmissionInProgress):
            workflow.begin_submission()

        assert workflow.status == WorkflowStatus.CALCULATED
        assert workflow.summary is not None

    def test_mark_submitted_unfreezes(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.begin_submission()
        workflow.mark_submitted(5)

        assert workflow.is_submitting is False
        assert workflow.status == WorkflowStatus.SUBMITTED

    def test_abort_keeps_calculated(self, make_analysis) -> None:
        workflow = _calculated(make_analysis)
        workflow.begin_submission()
        workflow.abort_submission()

        assert workflow.status == WorkflowStatus.CALCULATED
        workflow.edit_selection()
        assert workflow.status == WorkflowStatus.LANGUAGES_SELECTED
