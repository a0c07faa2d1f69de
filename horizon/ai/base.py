"""
Base class for AI clients.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from horizon.exceptions import AIResponseError


class BaseAIClient(ABC):
    """Narrow interface to a hosted language model."""

    provider_name: str = "base"

    # Grounding chunks returned by the most recent search-enabled call
    last_grounding_sources: list[dict]

    def __init__(self):
        self.last_grounding_sources = []

    @abstractmethod
    def connect(self) -> bool:
        """Prepare the client. Returns True if live calls are possible."""
        pass

    def close(self) -> None:
        """Release any connections opened by connect()."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abstractmethod
    def generate(
        self,
        prompt: str,
        schema: Optional[dict] = None,
        search: bool = False,
        model: Optional[str] = None,
    ) -> str:
        """
        Send a prompt and return the reply text.

        A schema asks for a JSON reply constrained to it. search=True lets
        the model ground its answer on web search results.
        """
        pass

    def generate_json(
        self,
        prompt: str,
        schema: Optional[dict] = None,
        model: Optional[str] = None,
    ) -> Any:
        """Generate and parse a JSON reply. An empty reply parses as []."""
        text = self.generate(prompt, schema=schema, model=model)
        if not text or not text.strip():
            return []
        try:
            return json.loads(_strip_fences(text))
        except json.JSONDecodeError as e:
            raise AIResponseError(f"{self.provider_name} returned invalid JSON: {e}") from e


def _strip_fences(text: str) -> str:
    """Remove a ```json fence some models wrap around JSON replies."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()
