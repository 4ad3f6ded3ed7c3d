class AnalysisError(Exception):
    """Base exception for all document analysis errors."""


class EmptyDocumentError(AnalysisError):
    """Raised when an upload has no content to analyze."""


class AnalysisUnavailable(AnalysisError):
    """Raised when the analysis engine is unreachable or returns malformed data."""
