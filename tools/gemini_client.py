# tools/gemini_client.py
"""
HealthBite AI — Gemini Transport & Configuration
================================================
Thin async wrapper around the google-genai SDK.

Configuration comes from the environment (loaded via python-dotenv):

  GOOGLE_API_KEY   credential; without it the AI path is skipped entirely
  GEMINI_ENDPOINT  optional base URL override (proxies, test servers)

One call = one attempt. Retrying, parsing and fallback live elsewhere.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from google import genai
from google.genai import types as genai_types
from pydantic import BaseModel, Field


# =============================================================================
# CONFIGURATION
# =============================================================================
DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiConfig(BaseModel):
    """Connection and retry settings for the Gemini service."""
    endpoint: Optional[str] = None
    credential: Optional[str] = None
    max_retries: int = Field(3, ge=1)
    base_delay_ms: int = Field(1000, ge=0)
    model: str = DEFAULT_MODEL

    @property
    def available(self) -> bool:
        return bool(self.credential and self.credential.strip())


class GenerationPreset(BaseModel):
    """Sampling parameters sent with every request of one use case."""
    temperature: float = Field(..., ge=0, le=2)
    top_k: int = Field(40, ge=1)
    top_p: float = Field(0.95, gt=0, le=1)
    max_output_tokens: int = Field(1024, ge=1)


# Low temperature: nutrition numbers should be stable between calls
NUTRITION_PRESET = GenerationPreset(temperature=0.1, top_k=40, top_p=0.95, max_output_tokens=1024)
RECIPE_PRESET = GenerationPreset(temperature=0.6, top_k=40, top_p=0.95, max_output_tokens=2048)


def load_gemini_config(**overrides) -> GeminiConfig:
    """
    Build a GeminiConfig from the environment.

    Keyword overrides win over environment values, e.g.
    load_gemini_config(max_retries=1).
    """
    load_dotenv()
    values = {
        "credential": os.getenv("GOOGLE_API_KEY"),
        "endpoint": os.getenv("GEMINI_ENDPOINT") or None,
    }
    values.update(overrides)
    return GeminiConfig(**values)


# =============================================================================
# ERRORS
# =============================================================================
class GeminiResponseError(RuntimeError):
    """The service answered, but without any usable text."""


class GeminiUnavailableError(RuntimeError):
    """No credential is configured."""


# =============================================================================
# CLIENT
# =============================================================================
class GeminiTextClient:
    """
    Sends a prompt, returns the completion text.

    The SDK client is created lazily on first use, so constructing a
    GeminiTextClient without a credential is harmless.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or load_gemini_config()
        self._client = None

    @property
    def available(self) -> bool:
        return self.config.available

    def _sdk_client(self):
        if not self.available:
            raise GeminiUnavailableError("GOOGLE_API_KEY is not set")
        if self._client is None:
            http_options = None
            if self.config.endpoint:
                http_options = genai_types.HttpOptions(base_url=self.config.endpoint)
            self._client = genai.Client(api_key=self.config.credential, http_options=http_options)
        return self._client

    async def generate_text(self, prompt: str, preset: GenerationPreset) -> str:
        """
        Run one generation request.

        Raises:
            GeminiUnavailableError: no credential configured.
            GeminiResponseError: the response carried no text.
            Any SDK/transport error, unchanged.
        """
        client = self._sdk_client()
        response = await client.aio.models.generate_content(
            model=self.config.model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                temperature=preset.temperature,
                top_k=preset.top_k,
                top_p=preset.top_p,
                max_output_tokens=preset.max_output_tokens,
            ),
        )

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise GeminiResponseError("Invalid response format from Gemini API")
        return text


__all__ = [
    "DEFAULT_MODEL",
    "GeminiConfig",
    "GenerationPreset",
    "NUTRITION_PRESET",
    "RECIPE_PRESET",
    "load_gemini_config",
    "GeminiResponseError",
    "GeminiUnavailableError",
    "GeminiTextClient",
]
