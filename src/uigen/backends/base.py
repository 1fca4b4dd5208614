"""Generation backends behind the HTTP API and CLI.

Three interchangeable implementations of the ``Generator`` protocol:

- ``AgentBackend`` — the LLM planner → generator → explainer pipeline
- ``RuleBasedBackend`` — keyword templates, no network
- ``RemoteBackend`` — forwards to another uigen (or compatible) server
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from uigen.agents.orchestrator.agent import ProgressCallback, UIGenerationAgent, sanitize_intent
from uigen.backends.rule_based import RuleBasedGenerator
from uigen.schemas.config import AppConfig
from uigen.schemas.generation import GenerationResult
from uigen.shared.llm_client import DryRunClient, LLMClient

logger = logging.getLogger(__name__)


class Generator(Protocol):
    name: str

    async def generate(
        self,
        prompt: str,
        current_code: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult: ...

    async def health(self) -> dict[str, Any]: ...


class AgentBackend:
    """Runs the multi-step LLM agent; one agent instance per request."""

    name = "agent"

    def __init__(self, client: LLMClient | DryRunClient, config: AppConfig) -> None:
        self.client = client
        self.config = config

    async def generate(
        self,
        prompt: str,
        current_code: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        agent = UIGenerationAgent(self.client, self.config)
        return await agent.generate_ui(prompt, current_code, on_progress=on_progress)

    async def health(self) -> dict[str, Any]:
        return {"status": "ok", "backend": self.name, "model": self.client.model}


class RuleBasedBackend:
    """Offline keyword-template generator."""

    name = "rule_based"

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._generator = RuleBasedGenerator()

    async def generate(
        self,
        prompt: str,
        current_code: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        prompt = sanitize_intent(prompt, self.config.max_prompt_chars)
        if on_progress:
            on_progress("Matching keywords…")
        return self._generator.generate(prompt, current_code or None)

    async def health(self) -> dict[str, Any]:
        return {"status": "ok", "backend": self.name, "model": ""}


def build_generator(config: AppConfig, *, dry_run: bool = False) -> Generator:
    """Create the backend selected by ``config.backend``."""
    if config.backend == "rule_based":
        return RuleBasedBackend(config)
    if config.backend == "remote":
        from uigen.backends.remote import RemoteBackend

        return RemoteBackend(config.backend_url)

    if dry_run:
        client: LLMClient | DryRunClient = DryRunClient()
    else:
        client = LLMClient(model=config.llm.model, base_url=config.llm.base_url or None)
    logger.info("Using agent backend (model=%s)", client.model)
    return AgentBackend(client, config)
