"""Shared Gemini client pool and the single-call transport."""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors

from .errors import EmptyResponse, TransportError
from .request import GeminiRequest

logger = logging.getLogger(__name__)


def _reply_text(response) -> str | None:
    """Read ``candidates[0].content.parts[*].text``, skipping thinking parts."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = candidates[0].content
    parts = (content.parts if content else None) or []
    for part in parts:
        if part.text and not getattr(part, "thought", False):
            return part.text
    return None


class GeminiClient:
    """Process-wide Gemini client pool (one client per API key)."""

    _clients: dict[str, genai.Client] = {}

    @classmethod
    def get(cls, api_key: str) -> genai.Client:
        """Return (or create) the shared client for *api_key*."""
        if not api_key:
            raise ValueError("No Gemini API key — set GEMINI_API_KEY or pass api_key explicitly")
        if api_key not in cls._clients:
            cls._clients[api_key] = genai.Client(api_key=api_key)
            logger.info("Created Gemini client (key …%s)", api_key[-4:])
        return cls._clients[api_key]

    @classmethod
    async def generate(cls, request: GeminiRequest, *, api_key: str, model: str) -> str:
        """Send one request and return the reply text.

        No retry and no explicit timeout: one call, one outcome.

        Raises:
            TransportError: Non-2xx status (``status`` set) or network failure.
            EmptyResponse: The reply carried no text part.
        """
        client = cls.get(api_key)
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=request.contents(),
                config=request.generation_config(),
            )
        except genai_errors.APIError as exc:
            raise TransportError(f"HTTP error! status: {exc.code}", status=exc.code) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Gemini request failed: {exc}") from exc

        text = _reply_text(response)
        if not text:
            raise EmptyResponse("No content received from Gemini API")
        logger.debug("Raw Gemini reply (%d chars): %s", len(text), text[:500])
        return text

    @classmethod
    async def close_all(cls) -> int:
        """Shut down all shared clients. Returns count closed."""
        count = 0
        for client in list(cls._clients.values()):
            try:
                await client.aio.aclose()
            except Exception as exc:
                logger.debug("Async client close failed: %s", exc)
            try:
                client.close()
            except Exception as exc:
                logger.debug("Client close failed: %s", exc)
            count += 1
        cls._clients.clear()
        logger.info("Closed %d Gemini client(s)", count)
        return count
