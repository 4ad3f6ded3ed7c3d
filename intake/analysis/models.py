from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath


class FileFormat(str, Enum):
    """Document formats accepted for translation."""

    PDF = "PDF"
    DOCX = "DOCX"
    XLSX = "XLSX"
    PPTX = "PPTX"
    TXT = "TXT"
    HTML = "HTML"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_file_name(cls, file_name: str, allowed: list[str]) -> "FileFormat":
        """Resolve a format from the extension; anything not allowed is UNKNOWN."""
        extension = PurePath(file_name).suffix.lstrip(".").upper()
        if extension == "HTM":
            extension = "HTML"
        if extension not in {fmt.upper() for fmt in allowed}:
            return cls.UNKNOWN
        try:
            return cls(extension)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class UploadedFile:
    """A user upload as received from the presentation layer."""

    file_name: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class DocumentAnalysis:
    """Immutable result of inspecting one uploaded document."""

    file_name: str
    file_format: FileFormat
    file_size_bytes: int
    word_count: int
    char_count: int
    images_with_text: int
    source_language: str
    subject_matter: str

    def __post_init__(self) -> None:
        for name in ("file_size_bytes", "word_count", "char_count", "images_with_text"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class ExtractedContent:
    """Raw text and image count pulled out of a document body."""

    text: str
    image_count: int = 0
