"""
Gemini Client

Thin wrapper around Google Gemini with:
- Rate limiting (respects free tier limits)
- Structured JSON output validated against a Pydantic schema
- Usage tracking

Each call makes exactly one request. Retrying quota failures is the
caller's job (see ``src.ai.retry``), so errors from the SDK propagate
unchanged.
"""

import asyncio
import json
import logging
import os
import time
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel

from src.utils.errors import AISuggestionError
from src.utils.validation import validate_schema

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GeminiModel(str, Enum):
    FLASH = "gemini-2.0-flash"
    PRO = "gemini-1.5-pro"


class RateLimitConfig:
    """
    Rate limits for the Gemini free tier.

    - Gemini 2.0 Flash: 15 RPM, 1,500 daily
    - Gemini 1.5 Pro: 2 RPM, 50 daily
    """
    FLASH_RPM = 15
    FLASH_DAILY = 1_500

    PRO_RPM = 2
    PRO_DAILY = 50


class TokenBucket:
    """Token bucket rate limiter."""

    def __init__(self, rate: float, capacity: float) -> None:
        """
        Args:
            rate: Tokens per second to add
            capacity: Maximum tokens in bucket
        """
        self.rate = rate
        self.capacity = capacity
        self.tokens = capacity
        self.last_update = time.time()

    async def acquire(self, tokens: int = 1) -> None:
        """Wait until enough tokens are available."""
        while True:
            now = time.time()
            elapsed = now - self.last_update
            self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
            self.last_update = now

            if self.tokens >= tokens:
                self.tokens -= tokens
                return

            wait_time = (tokens - self.tokens) / self.rate
            await asyncio.sleep(wait_time)


def _read_api_key() -> str | None:
    api_key = None

    # 1. Streamlit secrets (Streamlit Cloud)
    try:
        import streamlit as st
        api_key = st.secrets.get("GOOGLE_API_KEY") or st.secrets.get("GEMINI_API_KEY")
    except Exception:
        pass  # Not running in Streamlit context, or no secrets file

    # 2. Environment
    if not api_key:
        api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    return api_key


class GeminiClient:
    """
    Gemini API client with rate limiting and structured output.

    Usage:
        client = GeminiClient()
        result = await client.generate_structured(
            prompt="Suggest competencies for this lesson...",
            response_schema=SuggestionResponse,
        )
    """

    def __init__(self, api_key: str | None = None) -> None:
        import google.generativeai as genai
        from google.generativeai.types import GenerationConfig
        self._genai = genai
        self._GenerationConfig = GenerationConfig

        api_key = api_key or _read_api_key()
        if not api_key:
            logger.warning("GOOGLE_API_KEY not set. AI suggestions are unavailable.")
            self._configured = False
        else:
            genai.configure(api_key=api_key)
            self._configured = True

        self._flash_limiter = TokenBucket(
            rate=RateLimitConfig.FLASH_RPM / 60,
            capacity=RateLimitConfig.FLASH_RPM,
        )
        self._pro_limiter = TokenBucket(
            rate=RateLimitConfig.PRO_RPM / 60,
            capacity=RateLimitConfig.PRO_RPM,
        )
        self._daily_calls: dict[str, int] = {
            GeminiModel.FLASH: 0,
            GeminiModel.PRO: 0,
        }

    @property
    def configured(self) -> bool:
        return self._configured

    def _get_limiter(self, model: GeminiModel) -> TokenBucket:
        if model == GeminiModel.FLASH:
            return self._flash_limiter
        return self._pro_limiter

    def _check_daily_limit(self, model: GeminiModel) -> bool:
        limit = RateLimitConfig.FLASH_DAILY if model == GeminiModel.FLASH else RateLimitConfig.PRO_DAILY
        return self._daily_calls[model] < limit

    def _require_configured(self) -> None:
        if not self._configured:
            raise AISuggestionError("Gemini is not configured: set GOOGLE_API_KEY")

    async def generate_structured(
        self,
        prompt: str,
        response_schema: type[T],
        model: GeminiModel = GeminiModel.FLASH,
        temperature: float = 0.2,
    ) -> T:
        """
        Generate output validated against a Pydantic schema.

        Uses ``response_mime_type="application/json"`` with the schema of
        ``response_schema``.

        Raises:
            AISuggestionError: client not configured, or empty response
            SchemaValidationError: response does not match the schema
        """
        self._require_configured()

        if not self._check_daily_limit(model):
            logger.warning(f"Daily limit reached for {model.value}, switching to alternate model")
            model = GeminiModel.PRO if model == GeminiModel.FLASH else GeminiModel.FLASH

        await self._get_limiter(model).acquire()

        generation_config = self._GenerationConfig(
            temperature=temperature,
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        gemini_model = self._genai.GenerativeModel(
            model_name=model.value,
            generation_config=generation_config,
        )

        response = await asyncio.to_thread(gemini_model.generate_content, prompt)
        self._daily_calls[model] += 1

        if not response.text:
            raise AISuggestionError(f"Empty response from {model.value}")
        return validate_schema(response_schema, json.loads(response.text))

    def get_usage_stats(self) -> dict[str, Any]:
        return {
            "daily_calls": {m.value: n for m, n in self._daily_calls.items()},
            "configured": self._configured,
        }


# Global client instance
_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Get or create the global Gemini client."""
    global _client
    if _client is None:
        logger.info("Initializing Gemini client")
        _client = GeminiClient()
    return _client
