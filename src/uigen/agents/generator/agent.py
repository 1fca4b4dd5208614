"""Generator step — turns a plan into React source restricted to the component library."""

from __future__ import annotations

import json
import re

from uigen.agents.base import BaseAgent
from uigen.agents.generator.prompts import REPAIR_SYSTEM_PROMPT, SYSTEM_PROMPT
from uigen.errors import CodeExtractionError
from uigen.schemas.generation import GenerationPlan

_EXPORT_RE = re.compile(r"export\s+default\s+function[\s\S]*")
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*$", re.MULTILINE)


def extract_component_code(text: str) -> str:
    """Return everything from ``export default function`` to the end of ``text``.

    Markdown fence lines are removed first; raises ``CodeExtractionError``
    when no default-exported function is present.
    """
    cleaned = _FENCE_RE.sub("", text)
    match = _EXPORT_RE.search(cleaned)
    if not match:
        raise CodeExtractionError("Failed to extract valid component code")
    return match.group(0).strip() + "\n"


def _plan_json(plan: GenerationPlan) -> str:
    return json.dumps(plan.model_dump(by_alias=True), indent=2)


class GeneratorAgent(BaseAgent):
    """Writes (or incrementally modifies) the ``GeneratedUI`` component."""

    max_tokens = 4096

    @property
    def name(self) -> str:
        return "generator"

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def build_message(
        self,
        intent: str,
        plan: GenerationPlan,
        existing_code: str | None = None,
    ) -> str:
        return self._message(intent, _plan_json(plan), existing_code)

    @staticmethod
    def _message(intent: str, plan_text: str, existing_code: str | None) -> str:
        message = f"User Intent: {intent}\n\nPlan:\n{plan_text}"
        if existing_code:
            message += (
                f"\n\nEXISTING CODE (modify this incrementally):\n{existing_code}\n\n"
                "Modify the existing code based on the new plan. Keep what works, "
                "change only what's needed."
            )
        return message

    async def run(
        self,
        intent: str,
        plan: GenerationPlan,
        existing_code: str | None = None,
    ) -> str:
        plan_text = _plan_json(plan)
        raw = await self._complete(
            self._message(intent, plan_text, existing_code),
            step_input=plan_text,
        )
        return extract_component_code(raw)

    async def repair(
        self,
        intent: str,
        plan: GenerationPlan,
        code: str,
        errors: list[str],
    ) -> str:
        """Ask the model to fix ``errors`` in ``code`` (self-correction pass)."""
        error_list = "\n".join(f"- {e}" for e in errors)
        message = (
            f"User Intent: {intent}\n\n"
            f"Plan:\n{_plan_json(plan)}\n\n"
            f"Validation errors:\n{error_list}\n\n"
            f"Code to fix:\n{code}"
        )
        raw = await self._complete(
            message,
            system=REPAIR_SYSTEM_PROMPT,
            step="repair",
            step_input=error_list,
        )
        return extract_component_code(raw)
