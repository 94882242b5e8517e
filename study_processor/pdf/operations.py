"""
PDF reading operations module.
Turns a document into page-indexed text for the analysis pipeline.
"""

from pathlib import Path
from typing import List, Optional

import pymupdf as fitz

from ..content.models import PageText
from ..utils.logging import get_logger
from ..utils.exceptions import PDFParsingError, FileNotFoundError

logger = get_logger(__name__)


class PDFOperations:
    """Handles PDF text extraction."""

    @staticmethod
    def _check_exists(pdf_path: Path) -> None:
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    @staticmethod
    def get_page_count(pdf_path: str) -> int:
        """
        Get the total number of pages in a PDF file.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Total number of pages

        Raises:
            FileNotFoundError: If PDF file doesn't exist
            PDFParsingError: If PDF cannot be opened
        """
        pdf_path = Path(pdf_path)
        PDFOperations._check_exists(pdf_path)

        try:
            with fitz.open(str(pdf_path)) as pdf:
                return len(pdf)
        except Exception as e:
            logger.error(f"Failed to open PDF {pdf_path}: {str(e)}")
            raise PDFParsingError(f"Cannot open PDF file: {str(e)}")

    @staticmethod
    def extract_pages(pdf_path: str, start_page: int = 1, end_page: Optional[int] = None) -> List[PageText]:
        """
        Extract the text of every page in a range.

        Pages without text are kept (with empty text) so that page numbers
        stay aligned with the physical document.

        Args:
            pdf_path: Path to the PDF file
            start_page: First page (1-based, inclusive)
            end_page: Last page (1-based, inclusive); defaults to the last page

        Returns:
            Page texts in document order

        Raises:
            FileNotFoundError: If PDF file doesn't exist
            PDFParsingError: If PDF cannot be opened or the range is invalid
        """
        pdf_path = Path(pdf_path)
        PDFOperations._check_exists(pdf_path)

        try:
            with fitz.open(str(pdf_path)) as pdf:
                total_pages = len(pdf)
                last = total_pages if end_page is None else end_page
                if total_pages == 0:
                    return []
                if start_page < 1 or start_page > total_pages:
                    raise ValueError(f"Invalid start page {start_page} (total pages: {total_pages})")
                if last < start_page or last > total_pages:
                    raise ValueError(f"Invalid end page {last} (total pages: {total_pages})")

                pages = [
                    PageText(page_number=number, text=pdf[number - 1].get_text().strip())
                    for number in range(start_page, last + 1)
                ]
        except Exception as e:
            logger.error(f"Failed to extract text from {pdf_path}: {str(e)}")
            raise PDFParsingError(f"Page extraction failed: {str(e)}")

        logger.info(f"Extracted {len(pages)} page(s) from {pdf_path.name}")
        return pages

    @staticmethod
    def get_page_text(pdf_path: str, page_num: int) -> str:
        """
        Extract text from a specific page.

        Args:
            pdf_path: Path to PDF file
            page_num: Page number (1-based)

        Returns:
            Text content of the page
        """
        pages = PDFOperations.extract_pages(pdf_path, page_num, page_num)
        return pages[0].text
