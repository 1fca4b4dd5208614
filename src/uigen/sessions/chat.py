"""Chat loop — one user prompt in, one assistant reply and a new version out."""

from __future__ import annotations

import logging

from uigen.agents.orchestrator.agent import ProgressCallback, sanitize_intent
from uigen.backends.base import Generator
from uigen.schemas.generation import GenerationResult
from uigen.schemas.session import Version
from uigen.sessions.store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "UI generated successfully!"


class ChatService:
    def __init__(
        self, store: SessionStore, generator: Generator, *, max_prompt_chars: int = 2000,
    ) -> None:
        self.store = store
        self.generator = generator
        self.max_prompt_chars = max_prompt_chars

    async def send(
        self,
        session_id: str,
        prompt: str,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> tuple[GenerationResult, Version]:
        """Generate from ``prompt`` against the session's current code.

        Failures are recorded as an ``Error: ...`` assistant message and
        re-raised.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Please enter a prompt")
        prompt = sanitize_intent(prompt, self.max_prompt_chars)

        session = await self.store.get(session_id)
        await self.store.add_message(session_id, "user", prompt)
        try:
            result = await self.generator.generate(
                prompt, session.current_code or None, on_progress=on_progress,
            )
        except Exception as exc:
            logger.warning("Generation failed for session %s: %s", session_id, exc)
            await self.store.add_message(session_id, "assistant", f"Error: {exc}")
            raise

        await self.store.add_message(session_id, "assistant", result.explanation or DEFAULT_REPLY)
        version = await self.store.record_generation(session_id, prompt, result)
        return result, version
