"""Infrastructure tools — runtime configuration on a FastMCP sub-server."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import update_config
from ..errors import make_tool_error
from ..types import Difficulty, Language

infra_server = FastMCP("infra")


@infra_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
async def infra_configure(
    model: Annotated[str | None, Field(description="Gemini model ID to use")] = None,
    temperature: Annotated[float | None, Field(ge=0.0, le=2.0, description="Sampling temperature")] = None,
    language: Language | None = None,
    difficulty: Difficulty | None = None,
    page_delay_seconds: Annotated[float | None, Field(
        ge=0.0, description="Pause between page calls in a document batch"
    )] = None,
) -> dict:
    """Reconfigure the server at runtime — model, temperature, defaults, or pacing.

    Changes take effect immediately for all subsequent tool calls.

    Args:
        model: Gemini model ID (e.g. "gemini-1.5-flash-latest").
        temperature: Sampling temperature (0.0–2.0).
        language: Default response language — "english" or "tamil".
        difficulty: Default question difficulty — "easy", "medium", or "hard".
        page_delay_seconds: Seconds to wait after each page call.

    Returns:
        Dict with current_config reflecting the updated settings.
    """
    try:
        cfg = update_config(
            model=model,
            temperature=temperature,
            default_language=language,
            default_difficulty=difficulty,
            page_delay_seconds=page_delay_seconds,
        )
        return {"current_config": cfg.model_dump(exclude={"gemini_api_key"})}
    except Exception as exc:
        return make_tool_error(exc)
