from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from intake.analysis.models import DocumentAnalysis


class WorkflowStatus(str, Enum):
    """Lifecycle stages of a translation request, in forward order."""

    DRAFT = "draft"
    ANALYZED = "analyzed"
    LANGUAGES_SELECTED = "languages_selected"
    CALCULATED = "calculated"
    SUBMITTED = "submitted"

    @property
    def rank(self) -> int:
        return list(WorkflowStatus).index(self)


@dataclass
class TranslationRequest:
    """The request being built up by a workflow; finalized at submission."""

    analysis: DocumentAnalysis
    target_languages: frozenset[str] = field(default_factory=frozenset)
    credits_required: int = 0
    total_cost: Decimal = Decimal("0")
    status: WorkflowStatus = WorkflowStatus.ANALYZED
    id: int | None = None
    project_name: str | None = None

    @property
    def label(self) -> str:
        """Human-readable name used in notification messages."""
        return self.project_name or self.analysis.file_name
