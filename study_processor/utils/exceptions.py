"""
Custom exceptions for the study processor module.
"""

from typing import Optional


class StudyProcessorError(Exception):
    """Base exception for study processor errors."""
    pass


class APIError(StudyProcessorError):
    """Base exception for API-related errors."""
    pass


class ClientInitializationError(APIError):
    """Raised when the Gemini client cannot be constructed (e.g. missing API key)."""
    pass


class ContentGenerationError(APIError):
    """Raised when content generation fails.

    ``status_code`` carries the provider's HTTP-style status when one is known,
    so retry logic can tell server faults from everything else.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SearchError(APIError):
    """Raised when a material search cannot be completed."""
    pass


class FileNotFoundError(StudyProcessorError):
    """Raised when a required file is not found."""
    pass


class PDFParsingError(StudyProcessorError):
    """Raised when PDF parsing fails."""
    pass
