"""
Gemini Client - Google Gemini over the generateContent REST endpoint.
"""

import logging
import time
from typing import Optional

import httpx

from horizon.ai.base import BaseAIClient
from horizon.config.settings import Settings
from horizon.exceptions import AIClientError, AIResponseError

logger = logging.getLogger(__name__)

# Retry on throttling and transient server errors only
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class GeminiClient(BaseAIClient):
    """Gemini client with schema-constrained output and search grounding."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        backoff: float = 1.0,
    ):
        super().__init__()
        self.settings = settings or Settings.from_env()
        self.api_key = api_key or self.settings.api_key
        self.backoff = backoff
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def connect(self) -> bool:
        """Create the HTTP client. Without an API key there is nothing to call."""
        if not self.api_key:
            logger.warning("Gemini API key not provided. Using demo mode.")
            return False

        if self._client is None:
            self._client = httpx.Client(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                headers={"x-goog-api-key": self.api_key},
                transport=self._transport,
            )
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _build_payload(self, prompt: str, schema: Optional[dict], search: bool) -> dict:
        payload: dict = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            }
        if search:
            payload["tools"] = [{"google_search": {}}]
        return payload

    def _post(self, model: str, payload: dict) -> dict:
        attempts = max(1, self.settings.max_retries)
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = self._client.post(f"/models/{model}:generateContent", json=payload)
                if response.status_code in RETRYABLE_STATUS:
                    last_error = AIClientError(f"Gemini returned HTTP {response.status_code}")
                else:
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as e:
                raise AIClientError(
                    f"Gemini returned HTTP {e.response.status_code}: {e.response.text[:200]}"
                ) from e
            except httpx.TransportError as e:
                last_error = AIClientError(f"Gemini request failed: {e}")
            except ValueError as e:
                raise AIResponseError(f"Gemini returned a non-JSON body: {e}") from e

            logger.warning("Gemini call failed on attempt %d: %s", attempt + 1, last_error)
            if attempt < attempts - 1:
                time.sleep(self.backoff * 2**attempt)

        logger.error("Max retries exceeded for Gemini generation")
        raise last_error

    def generate(
        self,
        prompt: str,
        schema: Optional[dict] = None,
        search: bool = False,
        model: Optional[str] = None,
    ) -> str:
        if not self.connect():
            raise AIClientError("Gemini API key not configured (set GEMINI_API_KEY)")

        model = model or (self.settings.search_model if search else self.settings.struct_model)
        data = self._post(model, self._build_payload(prompt, schema, search))

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback", {})
            raise AIResponseError(f"Gemini returned no candidates: {feedback}")

        candidate = candidates[0]
        if search:
            metadata = candidate.get("groundingMetadata") or {}
            self.last_grounding_sources = metadata.get("groundingChunks") or []

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        logger.debug("Gemini %s returned %d characters", model, len(text))
        return text
