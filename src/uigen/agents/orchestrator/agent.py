"""UI generation agent — coordinates the planner → generator → explainer pipeline."""

from __future__ import annotations

import logging
from typing import Callable

from uigen.agents.explainer.agent import ExplainerAgent
from uigen.agents.generator.agent import GeneratorAgent
from uigen.agents.planner.agent import PlannerAgent
from uigen.errors import CodeValidationError
from uigen.library.validator import extract_component_usage, validate_component_usage
from uigen.schemas.config import AppConfig
from uigen.schemas.generation import AgentStep, GenerationResult, TokenUsage
from uigen.shared.llm_client import LLMClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def sanitize_intent(text: str, max_chars: int) -> str:
    """Strip and truncate a user prompt; raise ``ValueError`` if nothing is left."""
    text = (text or "").strip()
    if len(text) > max_chars:
        logger.info("Prompt truncated from %d to %d chars", len(text), max_chars)
        text = text[:max_chars].rstrip()
    if not text:
        raise ValueError("Prompt is required")
    return text


class UIGenerationAgent:
    """Runs the three-step pipeline and validates the generated code.

    Pipeline flow:
        plan → generate → validate (→ repair → validate)* → explain
    """

    def __init__(self, client: LLMClient, config: AppConfig | None = None) -> None:
        self.client = client
        self.config = config or AppConfig()
        self._steps: list[AgentStep] = []
        self._usage = TokenUsage()

        tokens = self.config.llm.max_tokens
        hooks = {"on_step": self._record_step, "on_tokens": self._record_tokens}
        self.planner = PlannerAgent(client, max_tokens=tokens.planner, **hooks)
        self.generator = GeneratorAgent(client, max_tokens=tokens.generator, **hooks)
        self.explainer = ExplainerAgent(client, max_tokens=tokens.explainer, **hooks)

    def _record_step(self, step: str, step_input: str, output: str) -> None:
        self._steps.append(AgentStep(step=step, input=step_input, output=output))

    def _record_tokens(self, input_tokens: int, output_tokens: int) -> None:
        self._usage.input_tokens += input_tokens or 0
        self._usage.output_tokens += output_tokens or 0

    def get_steps(self) -> list[AgentStep]:
        """Steps of the most recent run, in call order."""
        return list(self._steps)

    async def generate_ui(
        self,
        intent: str,
        existing_code: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Generate (or modify) a UI for ``intent``.

        Raises ``CodeValidationError`` when the code still breaks the
        component rules after ``max_repair_attempts`` repair passes.
        """
        self._steps = []
        self._usage = TokenUsage()
        intent = sanitize_intent(intent, self.config.max_prompt_chars)
        existing_code = existing_code or None

        def progress(message: str) -> None:
            logger.info(message)
            if on_progress:
                on_progress(message)

        progress("Planning layout…")
        plan = await self.planner.run(intent, existing_code)

        progress("Generating code…")
        code = await self.generator.run(intent, plan, existing_code)

        validation = validate_component_usage(code)
        attempt = 0
        while not validation.valid and attempt < self.config.max_repair_attempts:
            attempt += 1
            logger.warning(
                "Generated code failed validation (%d error(s)), repair attempt %d/%d: %s",
                len(validation.errors), attempt, self.config.max_repair_attempts,
                "; ".join(validation.errors),
            )
            progress(f"Repairing code (attempt {attempt})…")
            code = await self.generator.repair(intent, plan, code, validation.errors)
            validation = validate_component_usage(code)

        if not validation.valid:
            raise CodeValidationError(validation.errors)

        progress("Explaining design…")
        explanation = await self.explainer.run(intent, plan, code)
        logger.info(
            "Generation used %d input / %d output tokens",
            self._usage.input_tokens, self._usage.output_tokens,
        )

        return GenerationResult(
            plan=plan,
            code=code,
            explanation=explanation,
            component_usage=extract_component_usage(code),
            validation=validation,
            steps=self.get_steps(),
            usage=self._usage.model_copy(),
        )
