"""Planner step — turns a user intent into a structured GenerationPlan."""

from __future__ import annotations

import json
import logging

from uigen.agents.base import BaseAgent, extract_json
from uigen.agents.planner.prompts import SYSTEM_PROMPT
from uigen.errors import PlanParseError
from uigen.library.components import COMPONENT_LIBRARY
from uigen.schemas.generation import GenerationPlan

logger = logging.getLogger(__name__)


class PlannerAgent(BaseAgent):
    """Asks the model which layout and library components to use."""

    max_tokens = 1024
    json_mode = True

    @property
    def name(self) -> str:
        return "planner"

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_message(self, intent: str, existing_code: str | None = None) -> str:
        message = f"User Intent: {intent}"
        if existing_code:
            message += (
                "\n\nExisting UI code (modify this, don't regenerate from scratch):\n"
                f"{existing_code}"
            )
        return message

    def parse_output(self, raw_text: str) -> GenerationPlan:
        data = extract_json(raw_text)
        if not isinstance(data, dict):
            raise ValueError(f"Plan must be a JSON object, got {type(data).__name__}")
        plan = GenerationPlan(**data)
        unknown = [c for c in plan.components if c not in COMPONENT_LIBRARY]
        if unknown:
            # Plans only ever name library components.
            logger.warning("Planner proposed unknown components, dropping: %s", unknown)
            plan.components = [c for c in plan.components if c in COMPONENT_LIBRARY]
        return plan

    async def run(self, intent: str, existing_code: str | None = None) -> GenerationPlan:
        """Plan the UI for ``intent``; one JSON re-format retry, then the error propagates."""
        try:
            return await self._complete_json(
                self.build_message(intent, existing_code),
                self.parse_output,
                step_input=intent,
            )
        except (ValueError, json.JSONDecodeError, KeyError) as exc:
            raise PlanParseError(f"Failed to extract plan JSON: {exc}") from exc
