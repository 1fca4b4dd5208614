"""Explainer step — a short plain-English rationale for the generated UI."""

from __future__ import annotations

import json

from uigen.agents.base import BaseAgent
from uigen.agents.explainer.prompts import SYSTEM_PROMPT
from uigen.schemas.generation import GenerationPlan

# Only the head of the code is sent; the plan carries the structure.
CODE_EXCERPT_CHARS = 500


class ExplainerAgent(BaseAgent):
    """Summarizes what was built and why, in two or three sentences."""

    max_tokens = 512

    @property
    def name(self) -> str:
        return "explainer"

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_message(self, intent: str, plan: GenerationPlan, code: str) -> str:
        return (
            f"User Intent: {intent}\n\n"
            f"Plan: {json.dumps(plan.model_dump(by_alias=True))}\n\n"
            f"Generated Code:\n{code[:CODE_EXCERPT_CHARS]}..."
        )

    async def run(self, intent: str, plan: GenerationPlan, code: str) -> str:
        raw = await self._complete(
            self.build_message(intent, plan, code),
            step_input="Generate explanation",
        )
        return raw.strip()
