"""PDF handling modules"""

from .operations import PDFOperations

__all__ = [
    "PDFOperations"
]
