"""
Base analyzer class for study content operations.
Provides the shared remote-call path: retried generation, optional debug
dumps of raw responses and structured parsing.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from settings import settings
from ..api.client import GeminiAPIClient
from ..parsers.response_parser import ResponseParser
from ..utils.logging import get_logger
from ..utils.retry_handler import RetryHandler

logger = get_logger(__name__)


class BaseAnalyzer(ABC):
    """Abstract base class for analyzers that talk to the model."""

    def __init__(self, api_client: GeminiAPIClient, retry_handler: Optional[RetryHandler] = None,
                 debug_dir: Optional[Path] = None):
        """
        Initialize the analyzer.

        Args:
            api_client: Gemini API client instance
            retry_handler: Retry policies (a default handler when omitted)
            debug_dir: Directory for debug outputs (defaults to settings.DEBUG_DIR)
        """
        self.api_client = api_client
        self.retry_handler = retry_handler or RetryHandler()
        self.debug_dir = Path(debug_dir or settings.DEBUG_DIR)
        self.debug_responses = settings.DEBUG_RESPONSES

    @abstractmethod
    def get_mode(self) -> str:
        """Get the analyzer mode name."""
        pass

    def save_debug_response(self, response_text: str, *identifiers: str) -> None:
        """
        Save an API response for debugging.

        Args:
            response_text: The API response text
            identifiers: Operation names or identifiers for the debug filename
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        mode = self.get_mode()
        identifiers_str = "_".join(
            str(i).replace("/", "_").replace("\\", "_").replace(" ", "_") for i in identifiers
        ) or "response"
        filepath = self.debug_dir / f"{timestamp}_{mode}_{identifiers_str}.json"

        debug_data = {
            "timestamp": timestamp,
            "mode": mode,
            "identifiers": list(identifiers),
            "response": response_text,
            "response_length": len(response_text),
        }

        try:
            self.debug_dir.mkdir(parents=True, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(debug_data, f, ensure_ascii=False, indent=2)
            logger.debug(f"Debug response saved to {filepath}")
        except OSError as e:
            logger.error(f"Failed to save debug response: {str(e)}")

    def generate(
        self,
        contents: Any,
        operation: str,
        *,
        json_mode: bool = False,
        response_schema: Optional[Dict[str, Any]] = None,
        tools: Optional[List[Any]] = None,
    ) -> str:
        """
        Run one generation request under the network retry policy.

        Args:
            contents: Prompt string or list of parts
            operation: Operation name used in logs and debug files
            json_mode: Ask for a JSON answer
            response_schema: Optional structured-output schema
            tools: Optional provider tools

        Returns:
            Response text

        Raises:
            ContentGenerationError: When the call fails for good
        """
        logger.debug(f"[{self.get_mode()}] {operation}: sending request")
        text = self.retry_handler.execute_with_retry(
            lambda: self.api_client.generate_text(
                contents,
                json_mode=json_mode,
                response_schema=response_schema,
                tools=tools,
            )
        )
        if self.debug_responses:
            self.save_debug_response(text, operation)
        return text

    def request_structured(self, prompt: str, operation: str,
                           response_schema: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        Request JSON output and decode it.

        Returns:
            Decoded value, or None when the response could not be parsed

        Raises:
            ContentGenerationError: When the call fails for good
        """
        text = self.generate(prompt, operation, json_mode=True, response_schema=response_schema)
        data = ResponseParser.extract_structured(text)
        if data is None:
            logger.warning(f"[{self.get_mode()}] {operation}: response could not be parsed")
        return data
