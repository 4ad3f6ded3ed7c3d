import io
from collections.abc import Callable

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from intake.analysis.models import DocumentAnalysis, FileFormat


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_analysis() -> Callable[..., DocumentAnalysis]:
    """Factory for DocumentAnalysis values with overridable fields."""

    def _make(**overrides: object) -> DocumentAnalysis:
        fields: dict[str, object] = {
            "file_name": "Marketing Brochure.docx",
            "file_format": FileFormat.DOCX,
            "file_size_bytes": 20000,
            "word_count": 2000,
            "char_count": 10000,
            "images_with_text": 1,
            "source_language": "English",
            "subject_matter": "Marketing/Advertising",
        }
        fields.update(overrides)
        return DocumentAnalysis(**fields)  # type: ignore[arg-type]

    return _make
