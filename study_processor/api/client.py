"""
Gemini API client for handling API interactions.

The client is constructed explicitly and injected into every analyzer; a
missing key or a failing SDK client surfaces at construction time instead of
on the first call. Each instance owns its own `genai.Client`, holds no
per-call state and can be shared between independent callers.
"""

from typing import Any, Dict, List, Optional

from google.genai import errors as genai_errors

from config import build_client, create_model, get_api_key
from ..utils.exceptions import ClientInitializationError, ContentGenerationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"


class GeminiAPIClient:
    """Client for interacting with Google Gemini API."""

    def __init__(self, model: Optional[Dict[str, Any]] = None, api_key: Optional[str] = None,
                 *, client: Any = None):
        """
        Initialize the Gemini API client.

        Args:
            model: Model configuration from config.create_model()
            api_key: Optional API key (defaults to GEMINI_API_KEY)
            client: Optional pre-built genai.Client

        Raises:
            ClientInitializationError: If no key is configured or the SDK client
                cannot be created
        """
        model = model or create_model()
        self.model_name = model.get("model_name") or DEFAULT_MODEL_NAME
        self.base_generation_config: Dict[str, Any] = dict(model.get("generation_config") or {})
        self.safety_settings = model.get("safety_settings")
        self.api_key = api_key or get_api_key()

        if client is not None:
            self._client = client
            return

        if not self.api_key:
            raise ClientInitializationError(
                "Failed to initialize AI service: set GEMINI_API_KEY in the environment or .env file"
            )
        try:
            self._client = build_client(self.api_key)
        except Exception as e:
            logger.error(f"Failed to initialize genai.Client for key {self._key_tag()}: {e}")
            raise ClientInitializationError(f"Failed to initialize AI service: {e}") from e

    def _key_tag(self) -> str:
        """Return a safe identifier for the bound API key for logs, e.g. ***abcd"""
        suffix = self.api_key[-4:] if self.api_key else "????"
        return f"***{suffix}"

    def _build_config(
        self,
        json_mode: bool,
        response_schema: Optional[Dict[str, Any]],
        tools: Optional[List[Any]],
        system_instruction: Optional[str] = None,
    ) -> Dict[str, Any]:
        config: Dict[str, Any] = dict(self.base_generation_config)
        if json_mode:
            config["response_mime_type"] = "application/json"
        if response_schema:
            config["response_schema"] = response_schema
        if tools:
            config["tools"] = tools
        if system_instruction:
            config["system_instruction"] = system_instruction
        if self.safety_settings:
            config["safety_settings"] = self.safety_settings
        return config

    def generate_text(
        self,
        contents: Any,
        *,
        json_mode: bool = False,
        response_schema: Optional[Dict[str, Any]] = None,
        tools: Optional[List[Any]] = None,
    ) -> str:
        """
        Send one generation request and return the response text.

        Args:
            contents: Prompt string, or a list of parts (e.g. an inline image
                followed by an instruction)
            json_mode: Ask the model to answer with JSON
            response_schema: Optional structured-output schema
            tools: Optional provider tools (e.g. Google Search)

        Returns:
            Response text, stripped; empty when the model produced none

        Raises:
            ContentGenerationError: If the provider call fails or is blocked
        """
        config = self._build_config(json_mode, response_schema, tools)
        try:
            response = self._client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            logger.error(f"Content generation failed [key={self._key_tag()}]: {e}")
            raise ContentGenerationError(str(e), status_code=getattr(e, "code", None)) from e

        # Blocked prompt handling (avoid touching response.text when blocked)
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback is not None else None
        if block_reason:
            msg = f"Prompt blocked: block_reason={block_reason} (SAFETY)"
            logger.warning(f"{msg} [key={self._key_tag()}]")
            raise ContentGenerationError(msg)

        candidates = getattr(response, "candidates", None) or []
        if candidates:
            finish_reason = str(getattr(candidates[0], "finish_reason", "") or "")
            if "MAX_TOKENS" in finish_reason:
                logger.warning(f"Response truncated due to token limit [key={self._key_tag()}]")
            elif "SAFETY" in finish_reason:
                logger.warning(f"Response blocked due to safety concerns [key={self._key_tag()}]")
                raise ContentGenerationError("Response blocked due to SAFETY")

        text = getattr(response, "text", None)
        if not text:
            logger.warning(f"Empty response text [key={self._key_tag()}]")
            return ""
        return text.strip()

    def create_chat(self, system_instruction: str) -> Any:
        """Open a multi-turn chat session bound to a system instruction."""
        return self._client.chats.create(
            model=self.model_name,
            config=self._build_config(False, None, None, system_instruction=system_instruction),
        )
