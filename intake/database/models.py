from dataclasses import dataclass
from datetime import datetime


@dataclass
class TranslationRequestRecord:
    """Represents a row from the translation_requests table."""

    id: int
    file_name: str
    status: str
    project_name: str | None = None
    created_at: datetime | None = None
