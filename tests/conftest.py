"""
Shared fixtures.
"""

import json
from typing import Optional

import pytest

from horizon.ai.base import BaseAIClient
from horizon.exceptions import AIClientError


class FakeClient(BaseAIClient):
    """Replays canned replies in order and records every prompt."""

    provider_name = "fake"

    def __init__(self, replies=None, fail: bool = False, grounding=None):
        super().__init__()
        self.replies = list(replies or [])
        self.fail = fail
        self.grounding = grounding or []
        self.calls: list[dict] = []
        self.closed = False

    def connect(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True

    def generate(
        self,
        prompt: str,
        schema: Optional[dict] = None,
        search: bool = False,
        model: Optional[str] = None,
    ) -> str:
        self.calls.append({"prompt": prompt, "schema": schema, "search": search})
        if self.fail:
            raise AIClientError("service unavailable")
        if search:
            self.last_grounding_sources = list(self.grounding)
        reply = self.replies.pop(0) if self.replies else ""
        return reply if isinstance(reply, str) else json.dumps(reply)


@pytest.fixture
def fake_client():
    return FakeClient


def export_row(description: str, unit: str = "OCPU/Hour", quantity: str = "1", amount: str = "1") -> list[str]:
    """A nine-cell row in the consumption export layout."""
    return ["", "", description, unit, quantity, "", "", "", amount]
