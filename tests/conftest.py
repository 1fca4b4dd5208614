"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from uigen.shared.llm_client import LLMClient


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's shell from leaking config overrides into tests."""
    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.delenv("UIGEN_BACKEND", raising=False)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "uigen.yml"
    cfg.write_text(
        """\
backend: rule_based
max_repair_attempts: 2
llm:
  model: "gpt-4o-mini"
cors_origins:
  - "http://localhost:3000"
"""
    )
    return cfg


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Return an LLMClient with a mocked OpenAI SDK underneath."""
    client = LLMClient.__new__(LLMClient)
    client.model = "test-model"
    client._client = AsyncMock()
    return client
