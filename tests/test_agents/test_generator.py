"""Tests for the generator step and its repair pass."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from uigen.agents.generator.agent import GeneratorAgent, extract_component_code
from uigen.agents.generator.prompts import REPAIR_SYSTEM_PROMPT, SYSTEM_PROMPT
from uigen.errors import CodeExtractionError
from uigen.schemas.generation import GenerationPlan
from uigen.shared.llm_client import LLMClient

PLAN = GenerationPlan(intent="login", layout_structure="centered card", components=["Card", "Input", "Button"])

CODE = """\
export default function GeneratedUI() {
  return <Card title="Sign in"><Button variant="primary">Go</Button></Card>;
}"""


def _response(text: str) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class TestExtractComponentCode:
    def test_plain_code(self) -> None:
        assert extract_component_code(CODE) == CODE + "\n"

    def test_strips_markdown_fences(self) -> None:
        text = f"```jsx\n{CODE}\n```"
        assert extract_component_code(text) == CODE + "\n"

    def test_drops_leading_prose(self) -> None:
        text = f"Here is your component:\n\n{CODE}"
        assert extract_component_code(text).startswith("export default function GeneratedUI()")

    def test_missing_export_raises(self) -> None:
        with pytest.raises(CodeExtractionError, match="Failed to extract valid component code"):
            extract_component_code("function GeneratedUI() { return null; }")


class TestGeneratorAgent:
    def test_system_prompt_constraints(self) -> None:
        assert "NO inline styles" in SYSTEM_PROMPT
        assert "export default function GeneratedUI() {" in SYSTEM_PROMPT
        assert "Button, Card, Input, Table, Modal, Sidebar, Navbar, Chart" in SYSTEM_PROMPT

    def test_message_includes_plan_and_existing_code(self, mock_llm_client: LLMClient) -> None:
        message = GeneratorAgent(mock_llm_client).build_message("login", PLAN, "OLD CODE")
        assert "User Intent: login" in message
        assert '"layoutStructure": "centered card"' in message
        assert "EXISTING CODE (modify this incrementally):\nOLD CODE" in message

    @pytest.mark.asyncio
    async def test_run_extracts_code(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_response(f"```tsx\n{CODE}\n```")
        )
        steps: list[tuple[str, str, str]] = []

        code = await GeneratorAgent(mock_llm_client, on_step=lambda *a: steps.append(a)).run("login", PLAN)

        assert code == CODE + "\n"
        kwargs = mock_llm_client._client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 4096
        assert "response_format" not in kwargs
        assert steps[0][0] == "generator"
        assert '"intent": "login"' in steps[0][1]

    @pytest.mark.asyncio
    async def test_step_input_is_the_plan_sent_to_the_model(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(return_value=_response(CODE))
        steps: list[tuple[str, str, str]] = []
        agent = GeneratorAgent(mock_llm_client, on_step=lambda *a: steps.append(a))

        await agent.run("login", PLAN, "OLD CODE")

        messages = mock_llm_client._client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[1]["content"] == agent.build_message("login", PLAN, "OLD CODE")
        assert f"Plan:\n{steps[0][1]}\n\nEXISTING CODE" in messages[1]["content"]

    @pytest.mark.asyncio
    async def test_run_without_code_raises(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(
            return_value=_response("Sorry, I can't help with that.")
        )

        with pytest.raises(CodeExtractionError):
            await GeneratorAgent(mock_llm_client).run("login", PLAN)

    @pytest.mark.asyncio
    async def test_repair_sends_errors_with_repair_prompt(self, mock_llm_client: LLMClient) -> None:
        mock_llm_client._client.chat.completions.create = AsyncMock(return_value=_response(CODE))
        steps: list[tuple[str, str, str]] = []

        fixed = await GeneratorAgent(mock_llm_client, on_step=lambda *a: steps.append(a)).repair(
            "login", PLAN, "BROKEN", ["Inline styles are not allowed"],
        )

        assert fixed == CODE + "\n"
        messages = mock_llm_client._client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["content"] == REPAIR_SYSTEM_PROMPT
        assert "- Inline styles are not allowed" in messages[1]["content"]
        assert "Code to fix:\nBROKEN" in messages[1]["content"]
        assert steps == [("repair", "- Inline styles are not allowed", CODE)]
