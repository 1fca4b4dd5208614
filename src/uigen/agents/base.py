"""Base agent ABC — defines the pattern every pipeline step follows."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable

from uigen.shared.llm_client import LLMClient, TokensCallback

logger = logging.getLogger(__name__)

StepCallback = Callable[[str, str, str], None]
"""Called with (step_name, input_text, output_text) after every LLM call."""

_JSON_RETRY_MSG = (
    "I need the output as a single JSON object (no markdown, no explanation, "
    "just raw JSON) matching the schema described in your instructions. "
    "Please re-format your response now."
)


class BaseAgent(ABC):
    """Abstract base class for the planner, generator and explainer.

    Subclasses implement:
    - ``name`` — step name recorded in the agent step log
    - ``get_system_prompt()`` — returns the system prompt string
    """

    #: completion budget for this step; overridden from config
    max_tokens: int = 1024
    #: whether the provider should be asked for a JSON object
    json_mode: bool = False

    def __init__(
        self,
        client: LLMClient,
        *,
        max_tokens: int | None = None,
        on_step: StepCallback | None = None,
        on_tokens: TokensCallback | None = None,
    ) -> None:
        self.client = client
        if max_tokens is not None:
            self.max_tokens = max_tokens
        self._on_step = on_step
        self._on_tokens = on_tokens

    @property
    @abstractmethod
    def name(self) -> str:
        """Step name (``planner``, ``generator``, ...)."""

    @abstractmethod
    def get_system_prompt(self) -> str:
        """Return the system prompt for this agent."""

    async def _complete(
        self,
        user_message: str,
        *,
        system: str | None = None,
        step: str | None = None,
        step_input: str | None = None,
    ) -> str:
        """Send one completion and record it in the step log."""
        raw = await self.client.simple_completion(
            system=system or self.get_system_prompt(),
            user_message=user_message,
            json_mode=self.json_mode,
            max_tokens=self.max_tokens,
            on_tokens=self._on_tokens,
        )
        logger.debug("Agent %s raw output:\n%s", self.name, raw[:500])
        if self._on_step:
            self._on_step(step or self.name, step_input if step_input is not None else user_message, raw)
        return raw

    async def _complete_json(self, user_message: str, parse_fn: Callable[[str], Any], **kwargs: Any) -> Any:
        """Complete, parse, and retry once if JSON parsing fails."""
        raw = await self._complete(user_message, **kwargs)
        try:
            return parse_fn(raw)
        except (ValueError, json.JSONDecodeError, KeyError) as err:
            logger.warning(
                "Agent %s output was not valid JSON, requesting re-format. Error: %s",
                self.name, err,
            )

        retry_msg = f"{user_message}\n\nYour previous response:\n{raw}\n\n{_JSON_RETRY_MSG}"
        raw_retry = await self._complete(retry_msg, **kwargs)
        return parse_fn(raw_retry)


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from text that may contain markdown fences."""
    text = text.strip()

    # 1. Try direct parse (clean JSON response)
    if text.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Might have trailing text, try raw_decode
            try:
                obj, _ = json.JSONDecoder().raw_decode(text)
                return obj
            except json.JSONDecodeError:
                pass

    # 2. Look for ```json ... ``` or ``` ... ``` fenced blocks
    match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if match:
        return json.loads(match.group(1).strip())

    # 3. Find the first { and try to parse a JSON object starting there
    try:
        start = text.index("{")
        obj, _ = json.JSONDecoder().raw_decode(text, idx=start)
        return obj
    except (ValueError, json.JSONDecodeError):
        pass

    raise ValueError(
        f"Could not extract JSON from model response (length={len(text)}). "
        f"First 300 chars: {text[:300]!r}"
    )
