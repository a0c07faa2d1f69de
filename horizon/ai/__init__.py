"""
AI Module - Language model clients

A narrow generate(prompt, schema) interface so the radar does not depend on
a specific model vendor.
"""

from horizon.ai.base import BaseAIClient
from horizon.ai.gemini import GeminiClient

__all__ = ["BaseAIClient", "GeminiClient"]
