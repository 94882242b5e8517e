"""Study Processor Module - document-to-structured-content pipeline for study sessions"""

from study_processor.core.processor import StudyProcessor
from study_processor.api.client import GeminiAPIClient
from study_processor.pdf.operations import PDFOperations

__version__ = "1.0.0"
__all__ = [
    "StudyProcessor",
    "GeminiAPIClient",
    "PDFOperations"
]
