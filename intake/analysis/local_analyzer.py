import asyncio

from intake.analysis.base import BaseDocumentAnalyzer
from intake.analysis.content_reader import ContentReader
from intake.analysis.detection import detect_language, detect_subject
from intake.analysis.exceptions import EmptyDocumentError
from intake.analysis.models import DocumentAnalysis, FileFormat, UploadedFile
from intake.logging.logger import Log


class LocalDocumentAnalyzer(BaseDocumentAnalyzer):
    """Analyzes uploads in-process; parsing runs in a worker thread."""

    def __init__(
        self,
        content_reader: ContentReader,
        supported_formats: list[str],
        sample_chars: int = 5000,
    ) -> None:
        self._content_reader = content_reader
        self._supported_formats = supported_formats
        self._sample_chars = sample_chars

    async def analyze(self, upload: UploadedFile) -> DocumentAnalysis:
        if not upload.content:
            raise EmptyDocumentError(f"Upload '{upload.file_name}' is empty")
        return await asyncio.to_thread(self._analyze_sync, upload)

    def _analyze_sync(self, upload: UploadedFile) -> DocumentAnalysis:
        file_format = FileFormat.from_file_name(upload.file_name, self._supported_formats)
        extracted = self._content_reader.read(file_format, upload.content)
        sample = extracted.text[: self._sample_chars]

        analysis = DocumentAnalysis(
            file_name=upload.file_name,
            file_format=file_format,
            file_size_bytes=upload.size_bytes,
            word_count=len(extracted.text.split()),
            char_count=len(extracted.text),
            images_with_text=extracted.image_count,
            source_language=detect_language(sample),
            subject_matter=detect_subject(sample),
        )
        Log.info(
            "Analyzed upload",
            file=upload.file_name,
            format=file_format.value,
            chars=analysis.char_count,
            language=analysis.source_language,
        )
        return analysis
