import html
import io
import re
import zipfile

from intake.analysis.exceptions import AnalysisUnavailable
from intake.analysis.models import ExtractedContent, FileFormat
from intake.pdf.base import BasePdfExtractor
from intake.pdf.exceptions import PdfExtractionError

_XML_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_HTML_NOISE = re.compile(r"<(script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_HTML_IMAGE = re.compile(r"<img\b", re.IGNORECASE)
_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n\t]")

# OOXML parts holding visible text, and the folder holding embedded media.
_OOXML_LAYOUT: dict[FileFormat, tuple[re.Pattern[str], str]] = {
    FileFormat.DOCX: (re.compile(r"^word/(document|header\d*|footer\d*)\.xml$"), "word/media/"),
    FileFormat.PPTX: (re.compile(r"^ppt/slides/slide\d+\.xml$"), "ppt/media/"),
    FileFormat.XLSX: (re.compile(r"^xl/sharedStrings\.xml$"), "xl/media/"),
}


def _xml_to_text(xml: str) -> str:
    # Paragraph and cell boundaries become spaces so words don't fuse together.
    spaced = re.sub(r"</(w:p|a:p|si)>|<w:(tab|br)\s*/>", " ", xml)
    return _WHITESPACE.sub(" ", html.unescape(_XML_TAG.sub("", spaced))).strip()


class ContentReader:
    """Pulls plain text and an embedded-image count out of a document body."""

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def read(self, file_format: FileFormat, content: bytes) -> ExtractedContent:
        """Dispatch on format.

        Raises:
            AnalysisUnavailable: if the body is corrupt for its declared format.
        """
        if file_format == FileFormat.PDF:
            return self._read_pdf(content)
        if file_format in _OOXML_LAYOUT:
            return self._read_ooxml(file_format, content)
        if file_format == FileFormat.HTML:
            return self._read_html(content)
        if file_format == FileFormat.TXT:
            return ExtractedContent(text=content.decode("utf-8", errors="replace").strip())
        return self._read_unknown(content)

    def _read_pdf(self, content: bytes) -> ExtractedContent:
        try:
            text = self._pdf_extractor.extract(content)
            images = self._pdf_extractor.count_images(content)
        except PdfExtractionError as exc:
            raise AnalysisUnavailable(f"Unreadable PDF: {exc}") from exc
        return ExtractedContent(text=text, image_count=images)

    def _read_ooxml(self, file_format: FileFormat, content: bytes) -> ExtractedContent:
        text_parts, media_prefix = _OOXML_LAYOUT[file_format]
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                names = sorted(archive.namelist())
                chunks = [
                    _xml_to_text(archive.read(name).decode("utf-8", errors="replace"))
                    for name in names
                    if text_parts.match(name)
                ]
                images = sum(1 for name in names if name.startswith(media_prefix))
        except zipfile.BadZipFile as exc:
            raise AnalysisUnavailable(
                f"Unreadable {file_format.value} archive: {exc}"
            ) from exc
        return ExtractedContent(
            text=" ".join(chunk for chunk in chunks if chunk), image_count=images
        )

    @staticmethod
    def _read_html(content: bytes) -> ExtractedContent:
        markup = content.decode("utf-8", errors="replace")
        images = len(_HTML_IMAGE.findall(markup))
        body = _HTML_NOISE.sub(" ", markup)
        text = _WHITESPACE.sub(" ", html.unescape(_XML_TAG.sub(" ", body))).strip()
        return ExtractedContent(text=text, image_count=images)

    @staticmethod
    def _read_unknown(content: bytes) -> ExtractedContent:
        """Best effort: keep printable ASCII from an unrecognized binary."""
        recovered = _NON_PRINTABLE.sub("", content.decode("latin-1"))
        return ExtractedContent(text=_WHITESPACE.sub(" ", recovered).strip())
