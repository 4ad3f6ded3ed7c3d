import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from intake.analysis.base import BaseDocumentAnalyzer
from intake.analysis.exceptions import AnalysisUnavailable, EmptyDocumentError
from intake.analysis.models import DocumentAnalysis, FileFormat, UploadedFile
from intake.logging.logger import Log


class _AnalysisPayload(BaseModel):
    """Wire shape returned by the upload analysis endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_name: str = Field(alias="fileName")
    file_format: str = Field(alias="fileFormat")
    file_size: int = Field(alias="fileSize", ge=0)
    word_count: int = Field(alias="wordCount", ge=0)
    char_count: int = Field(alias="characterCount", ge=0)
    images_with_text: int = Field(alias="imagesWithText", ge=0)
    subject_matter: str = Field(alias="subjectMatter")
    source_language: str = Field(alias="sourceLanguage")

    @classmethod
    def parse(cls, data: object) -> "_AnalysisPayload":
        # Older servers report the count as charCount.
        if isinstance(data, dict) and "characterCount" not in data and "charCount" in data:
            data = {**data, "characterCount": data["charCount"]}
        return cls.model_validate(data)


class RemoteDocumentAnalyzer(BaseDocumentAnalyzer):
    """Delegates analysis to the upload endpoint of the translation API."""

    UPLOAD_PATH = "/api/files/upload"

    def __init__(
        self,
        client: httpx.AsyncClient,
        supported_formats: list[str],
    ) -> None:
        self._client = client
        self._supported_formats = supported_formats

    async def analyze(self, upload: UploadedFile) -> DocumentAnalysis:
        if not upload.content:
            raise EmptyDocumentError(f"Upload '{upload.file_name}' is empty")

        try:
            response = await self._client.post(
                self.UPLOAD_PATH,
                files={"file": (upload.file_name, upload.content)},
            )
            response.raise_for_status()
            payload = _AnalysisPayload.parse(response.json())
        except httpx.HTTPStatusError as exc:
            raise AnalysisUnavailable(
                f"Analysis service returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise AnalysisUnavailable(f"Analysis service unreachable: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise AnalysisUnavailable(f"Malformed analysis response: {exc}") from exc

        Log.info("Remote analysis received", file=upload.file_name)
        return DocumentAnalysis(
            file_name=upload.file_name,
            file_format=self._resolve_format(upload.file_name, payload.file_format),
            file_size_bytes=payload.file_size,
            word_count=payload.word_count,
            char_count=payload.char_count,
            images_with_text=payload.images_with_text,
            source_language=payload.source_language,
            subject_matter=payload.subject_matter,
        )

    def _resolve_format(self, file_name: str, reported: str) -> FileFormat:
        candidate = reported.upper()
        allowed = {fmt.upper() for fmt in self._supported_formats}
        if candidate in allowed and candidate in FileFormat.__members__:
            return FileFormat[candidate]
        return FileFormat.from_file_name(file_name, self._supported_formats)

    async def aclose(self) -> None:
        await self._client.aclose()
