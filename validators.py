"""
Validation utilities for page ranges produced by the model
"""
import logging
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)


class PageRangeValidator:
    """Deterministic enforcement of page-range invariants.

    Page numbers returned by the model are treated as advice; ordering and
    coverage are fixed here.
    """

    @staticmethod
    def validate_page_number(page_num: int, total_pages: int, label: str = "") -> bool:
        """Validate if a page number is within valid range

        Args:
            page_num: Page number to validate (1-based)
            total_pages: Total number of pages in the document
            label: Optional label for log messages

        Returns:
            True if valid, False otherwise
        """
        if page_num < 1 or page_num > total_pages:
            where = f" for '{label}'" if label else ""
            logger.warning(f"Invalid page number {page_num}{where} (total: {total_pages} pages)")
            return False
        return True

    @staticmethod
    def clamp_range(start_page: int, end_page: int, total_pages: int) -> Tuple[int, int]:
        """Validate and adjust range boundaries

        Args:
            start_page: Requested start page (1-based)
            end_page: Requested end page (1-based)
            total_pages: Total pages in the document

        Returns:
            Tuple of (adjusted_start, adjusted_end)
        """
        # Ensure start page is valid
        start_page = max(1, min(start_page, total_pages))

        # Ensure end page is valid and >= start page
        end_page = max(start_page, min(end_page, total_pages))

        return start_page, end_page

    @staticmethod
    def reconcile_chapter_ranges(entries: List[Dict[str, Any]], total_pages: int) -> List[Dict[str, Any]]:
        """Make a sibling chapter list ordered, non-overlapping and complete

        Entries carry integer ``startPage`` / ``endPage``. Entries starting
        outside the document are dropped, the rest are sorted by start page,
        each end is clamped to the page before the next start, the last end
        is forced to ``total_pages`` and empty ranges are dropped.

        Args:
            entries: Chapter-like dicts
            total_pages: Total pages in the document

        Returns:
            New list of reconciled dicts (inputs are not mutated)
        """
        in_document = []
        for entry in entries:
            if PageRangeValidator.validate_page_number(entry["startPage"], total_pages, entry.get("title", "")):
                in_document.append(dict(entry))

        ordered = sorted(in_document, key=lambda e: e["startPage"])
        for current, following in zip(ordered, ordered[1:]):
            if current["endPage"] >= following["startPage"]:
                current["endPage"] = following["startPage"] - 1
        if ordered:
            ordered[-1]["endPage"] = total_pages

        reconciled = []
        for entry in ordered:
            if entry["endPage"] < entry["startPage"]:
                logger.warning(
                    f"Dropping empty range '{entry.get('title', '')}' "
                    f"({entry['startPage']}-{entry['endPage']})"
                )
                continue
            reconciled.append(entry)
        return reconciled
