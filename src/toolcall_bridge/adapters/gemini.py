"""Gemini adapter for pure request/response transformations.

Since Gemini is reached through its OpenAI-compatible endpoint, the wire shape
is OpenAI's. Gemini may leave tool call ids empty; the OpenAI adapter already
synthesizes ``call_<n>`` ids for those.
"""

from .openai import OpenAIRequestAdapter

# Gemini uses the OpenAI-compatible API, so it's the same adapter
GeminiRequestAdapter = OpenAIRequestAdapter
