"""
JSON response parser for free-text model output.
Handles parsing of Gemini API responses with:
- Code-fence unwrapping
- Structural region detection ('{' / '[' through '}' / ']')
- Trailing-comma repair
Parsing never raises; an unusable response yields None.
"""

import json
import re
from typing import Any, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


class ResponseParser:
    """Extracts structured data from arbitrarily wrapped model responses."""

    @staticmethod
    def extract_structured(response_text: Any) -> Optional[Any]:
        """
        Extract and decode the JSON payload embedded in a model response.

        Args:
            response_text: Raw response text; pure JSON, fenced JSON or JSON
                surrounded by prose

        Returns:
            Decoded object or list, or None when no payload can be recovered
        """
        if not isinstance(response_text, str) or not response_text.strip():
            logger.warning("Empty or non-text response; nothing to parse")
            return None

        text = ResponseParser._unwrap_code_fence(response_text.strip().lstrip("\ufeff"))

        start = ResponseParser._structural_start(text)
        if start == -1:
            logger.warning("No JSON start ('{' or '[') found in response")
            logger.debug(f"Original response: {response_text[:500]}")
            return None

        end = ResponseParser._structural_end(text)
        if end == -1 or end < start:
            logger.warning("No JSON end ('}' or ']') found in response")
            logger.debug(f"Original response: {response_text[:500]}")
            return None

        candidate = text[start:end + 1]
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            logger.debug("Candidate is not valid JSON; repairing trailing commas")

        # Repair only invalid candidates; the regex cannot see string boundaries
        candidate = ResponseParser._repair_trailing_commas(candidate)
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"JSON parsing error (after repair): {e}")
            logger.debug(f"Candidate that failed: {candidate[:500]}")
            return None

    # --------------------
    # Preprocessing helpers
    # --------------------
    @staticmethod
    def _unwrap_code_fence(text: str) -> str:
        """Return the inner content when the whole text is one fenced block."""
        match = _FENCE_RE.match(text)
        if match and match.group(2):
            return match.group(2).strip()
        return text

    @staticmethod
    def _structural_start(text: str) -> int:
        positions = [p for p in (text.find("{"), text.find("[")) if p != -1]
        return min(positions) if positions else -1

    @staticmethod
    def _structural_end(text: str) -> int:
        return max(text.rfind("}"), text.rfind("]"))

    @staticmethod
    def _repair_trailing_commas(text: str) -> str:
        """Remove trailing commas before '}' or ']'."""
        return _TRAILING_COMMA_RE.sub(r"\1", text)
