"""Shared test fixtures for study-aid-mcp."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


def reply(payload: Any) -> str:
    """Render a Gemini reply the way the model usually sends it: fenced JSON."""
    return f"```json\n{json.dumps(payload)}\n```"


def ocr_page(number: int, body: str) -> str:
    return f"==Start of OCR for page {number}==\n{body}\n==End of OCR for page {number}=="


@pytest.fixture(autouse=True, scope="session")
def _unwrap_fastmcp_tools():
    """Patch tool modules so FunctionTool objects become directly callable."""
    import importlib
    import pkgutil

    import study_aid_mcp.tools as tools_pkg

    modules = [
        importlib.import_module(info.name)
        for info in pkgutil.walk_packages(tools_pkg.__path__, tools_pkg.__name__ + ".")
    ]
    for mod in modules:
        for name in list(vars(mod)):
            obj = getattr(mod, name, None)
            if obj is not None and hasattr(obj, "fn") and not callable(obj):
                setattr(mod, name, obj.fn)


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit real Gemini API."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/study-aid-mcp/.env."""
    monkeypatch.setattr(
        "study_aid_mcp.config.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture()
def mock_gemini_client():
    """Patch GeminiClient.get() and .generate() for unit tests."""
    with (
        patch("study_aid_mcp.client.GeminiClient.get") as mock_get,
        patch(
            "study_aid_mcp.client.GeminiClient.generate", new_callable=AsyncMock
        ) as mock_gen,
    ):
        client = MagicMock()
        mock_get.return_value = client
        yield {
            "get": mock_get,
            "generate": mock_gen,
            "client": client,
        }


@pytest.fixture()
def clean_config():
    """Reset the config singleton between tests."""
    import study_aid_mcp.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None
