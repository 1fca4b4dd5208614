"""Tests for the explainer step."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from uigen.agents.explainer.agent import CODE_EXCERPT_CHARS, ExplainerAgent
from uigen.schemas.generation import GenerationPlan
from uigen.shared.llm_client import LLMClient


def _response(text: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class TestExplainerAgent:
    def test_code_is_truncated(self, mock_llm_client: LLMClient) -> None:
        code = "x" * 800
        message = ExplainerAgent(mock_llm_client).build_message("intent", GenerationPlan(), code)
        assert message.endswith("x" * CODE_EXCERPT_CHARS + "...")
        assert "x" * (CODE_EXCERPT_CHARS + 1) not in message

    @pytest.mark.asyncio
    async def test_run_returns_stripped_text(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_response("\n  A Card keeps the form focused.  \n")
        )
        steps: list[tuple[str, str, str]] = []

        text = await ExplainerAgent(mock_llm_client, on_step=lambda *a: steps.append(a)).run(
            "login", GenerationPlan(intent="login"), "export default function GeneratedUI() {}",
        )

        assert text == "A Card keeps the form focused."
        assert mock_llm_client._client.chat.completions.create.call_args.kwargs["max_tokens"] == 512
        assert steps[0][:2] == ("explainer", "Generate explanation")
