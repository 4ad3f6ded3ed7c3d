from abc import ABC, abstractmethod

from intake.analysis.models import DocumentAnalysis, UploadedFile


class BaseDocumentAnalyzer(ABC):
    """Contract for all document analysis adapters."""

    @abstractmethod
    async def analyze(self, upload: UploadedFile) -> DocumentAnalysis:
        """Inspect an uploaded document.

        Args:
            upload: File name and raw bytes of the upload.

        Returns:
            DocumentAnalysis with format, counts, and detected language/subject.
            Unrecognized extensions produce FileFormat.UNKNOWN, not an error.

        Raises:
            EmptyDocumentError: if the upload has no content.
            AnalysisUnavailable: if the engine fails or returns malformed data.
        """

    async def aclose(self) -> None:
        """Release any held resources. Default: nothing to release."""
