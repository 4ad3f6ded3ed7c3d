import httpx

from intake.analysis.base import BaseDocumentAnalyzer
from intake.analysis.content_reader import ContentReader
from intake.analysis.local_analyzer import LocalDocumentAnalyzer
from intake.analysis.remote_analyzer import RemoteDocumentAnalyzer
from intake.config.settings import Settings
from intake.pdf.base import BasePdfExtractor
from intake.pdf.pdfplumber_adapter import PdfPlumberAdapter
from intake.pdf.pymupdf_adapter import PyMuPdfAdapter


class DocumentAnalyzerFactory:
    """Creates the analyzer named by settings.analysis_engine."""

    ENGINES = ("local", "remote")

    PDF_ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentAnalyzer:
        engine = settings.analysis_engine.lower()
        if engine == "local":
            return LocalDocumentAnalyzer(
                content_reader=ContentReader(cls.create_pdf_extractor(settings)),
                supported_formats=settings.supported_file_formats,
                sample_chars=settings.analysis_sample_chars,
            )
        if engine == "remote":
            client = httpx.AsyncClient(
                base_url=settings.api_base_url,
                timeout=settings.api_timeout_seconds,
            )
            return RemoteDocumentAnalyzer(client, settings.supported_file_formats)
        raise ValueError(
            f"Unknown analysis engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )

    @classmethod
    def create_pdf_extractor(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()
