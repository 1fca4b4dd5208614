"""Tests for the planner step."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from uigen.agents.planner.agent import PlannerAgent
from uigen.agents.planner.prompts import SYSTEM_PROMPT
from uigen.errors import PlanParseError
from uigen.shared.llm_client import LLMClient


def _response(text: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class TestPlannerPrompt:
    def test_prompt_lists_every_component(self) -> None:
        for name in ("Button", "Card", "Input", "Table", "Modal", "Sidebar", "Navbar", "Chart"):
            assert f"- {name}:" in SYSTEM_PROMPT

    def test_message_without_existing_code(self, mock_llm_client: LLMClient) -> None:
        message = PlannerAgent(mock_llm_client).build_message("a login page")
        assert message == "User Intent: a login page"

    def test_message_with_existing_code(self, mock_llm_client: LLMClient) -> None:
        message = PlannerAgent(mock_llm_client).build_message("add a chart", "export default function GeneratedUI() {}")
        assert "modify this, don't regenerate from scratch" in message
        assert "export default function GeneratedUI() {}" in message


class TestPlannerParsing:
    def test_camel_case_layout(self, mock_llm_client: LLMClient) -> None:
        plan = PlannerAgent(mock_llm_client).parse_output(
            '{"intent": "x", "layoutStructure": "grid", "components": ["Card"], "reasoning": ["r"]}'
        )
        assert plan.layout_structure == "grid"
        assert plan.model_dump(by_alias=True)["layoutStructure"] == "grid"

    def test_snake_case_layout(self, mock_llm_client: LLMClient) -> None:
        plan = PlannerAgent(mock_llm_client).parse_output('{"layout_structure": "stack"}')
        assert plan.layout_structure == "stack"
        assert plan.components == []

    def test_unknown_components_dropped(self, mock_llm_client: LLMClient) -> None:
        plan = PlannerAgent(mock_llm_client).parse_output(
            '{"components": ["Card", "Carousel", "Button"]}'
        )
        assert plan.components == ["Card", "Button"]

    def test_string_reasoning_becomes_list(self, mock_llm_client: LLMClient) -> None:
        plan = PlannerAgent(mock_llm_client).parse_output('{"reasoning": "Keep it simple"}')
        assert plan.reasoning == ["Keep it simple"]

    def test_fenced_json(self, mock_llm_client: LLMClient) -> None:
        plan = PlannerAgent(mock_llm_client).parse_output(
            '```json\n{"intent": "settings page", "components": ["Input"]}\n```'
        )
        assert plan.intent == "settings page"


class TestPlannerRun:
    @pytest.mark.asyncio
    async def test_run_returns_plan(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_response('{"intent": "dashboard", "layoutStructure": "grid", "components": ["Card", "Chart"]}')
        )
        steps: list[tuple[str, str, str]] = []

        plan = await PlannerAgent(mock_llm_client, on_step=lambda *a: steps.append(a)).run("a dashboard")

        assert plan.components == ["Card", "Chart"]
        kwargs = mock_llm_client._client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 1024
        assert steps[0][0] == "planner"
        assert steps[0][1] == "a dashboard"

    @pytest.mark.asyncio
    async def test_retry_then_success(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            side_effect=[_response("I think a grid works."), _response('{"intent": "ok"}')]
        )

        plan = await PlannerAgent(mock_llm_client).run("anything")

        assert plan.intent == "ok"
        assert mock_llm_client._client.chat.completions.create.call_count == 2

    @pytest.mark.asyncio
    async def test_persistent_failure_raises_plan_parse_error(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            side_effect=[_response("no json"), _response("still no json")]
        )

        with pytest.raises(PlanParseError, match="Failed to extract plan JSON"):
            await PlannerAgent(mock_llm_client).run("anything")

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            side_effect=[_response("```json\n[1, 2]\n```"), _response("```json\n[3]\n```")]
        )

        with pytest.raises(PlanParseError):
            await PlannerAgent(mock_llm_client).run("anything")
