import os
from typing import Optional, List, Dict, Any

from google import genai  # google-genai unified SDK
from google.genai import types as genai_types
from dotenv import load_dotenv

from settings import settings

load_dotenv()

# Note: google-genai prefers per-instance clients over global configure.
# Callers build a client with build_client() and inject it where needed.

# Base configuration
GENERATION_CONFIG = {
    "temperature": 0.3,
    "top_p": 0.95,
    "top_k": 40,
}

SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]

# Model name mapping
MODEL_NAMES = {
    "flash": "gemini-2.5-flash",
    "pro": "gemini-2.5-pro",
}


def get_api_key() -> Optional[str]:
    """Return the configured Gemini API key, or None when unset."""
    return settings.GEMINI_API_KEY or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_safety_settings() -> Optional[List[genai_types.SafetySetting]]:
    """Return safety settings, honoring DISABLE_SAFETY_FILTERS.

    - If DISABLE_SAFETY_FILTERS is true (default), returns settings that
      disable blocking (BLOCK_NONE per category).
    - If false, returns None to rely on server defaults.
    """
    if not settings.DISABLE_SAFETY_FILTERS:
        return None
    return [
        genai_types.SafetySetting(
            category=genai_types.HarmCategory(name),
            threshold=genai_types.HarmBlockThreshold.BLOCK_NONE,
        )
        for name in SAFETY_CATEGORIES
    ]


def create_model(model_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Create a Gemini model configuration.

    Args:
        model_type: "flash" or "pro" (defaults to settings.GEMINI_MODEL)

    Returns:
        Model configuration dictionary consumed by GeminiAPIClient
    """
    model_type = model_type or settings.GEMINI_MODEL
    model_name = MODEL_NAMES.get(model_type, MODEL_NAMES["flash"])
    return {
        "model_name": model_name,
        "generation_config": GENERATION_CONFIG.copy(),
        "safety_settings": get_safety_settings(),
    }


def build_client(api_key: str) -> genai.Client:
    """Create a scoped google-genai Client with the configured request timeout."""
    timeout_ms = max(10, int(settings.GENAI_REQUEST_TIMEOUT_SECS)) * 1000
    return genai.Client(
        api_key=api_key,
        http_options=genai_types.HttpOptions(timeout=timeout_ms),
    )
