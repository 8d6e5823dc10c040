"""Tests for infrastructure tools."""

from __future__ import annotations

import pytest

import study_aid_mcp.tools.infra as infra_mod


@pytest.fixture(autouse=True)
def _clean(clean_config):
    yield


class TestInfraTools:
    async def test_infra_configure_updates_runtime_config(self):
        out = await infra_mod.infra_configure(
            model="gemini-test", temperature=0.2, language="tamil", difficulty="hard",
        )
        cfg = out["current_config"]
        assert cfg["model"] == "gemini-test"
        assert cfg["temperature"] == 0.2
        assert cfg["default_language"] == "tamil"
        assert cfg["default_difficulty"] == "hard"
        assert "gemini_api_key" not in cfg

    async def test_no_arguments_reports_current_config(self):
        out = await infra_mod.infra_configure()
        assert out["current_config"]["page_delay_seconds"] == 0.5

    async def test_invalid_language_returns_error(self):
        out = await infra_mod.infra_configure(language="french")
        assert out["category"] == "API_INVALID_ARGUMENT"
        assert out["retryable"] is False
