"""Async OpenAI API wrapper used by every pipeline step.

Works with any OpenAI-compatible endpoint (set ``base_url`` for a custom or
self-hosted model server).
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import Any, Callable

from openai import AsyncOpenAI, APIConnectionError, APITimeoutError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 4096

# Retry settings for rate-limit (429) and connection errors
_MAX_RETRIES = 5
_BASE_DELAY = 2  # seconds, minimum floor for exponential backoff


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from a rate limit error.

    Checks the ``Retry-After`` header first, then falls back to parsing
    the "Please try again in Xs / Xms" substring from the error message.
    Returns seconds as a float, or None if not found.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    return None


TokensCallback = Callable[[int, int], None]
"""Called with (input_tokens, output_tokens) when a completion finishes."""


class LLMClient:
    """Thin async wrapper around the OpenAI SDK.

    Only ``simple_completion`` is needed: every step of the UI pipeline is a
    single request/response with no tools.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
    ) -> None:
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff on 429 errors.

        Waits at least as long as the provider's suggested retry-after time,
        uses exponential backoff as a floor, and adds ±25% jitter.

        Fails immediately if the error indicates the request itself exceeds
        the token limit.
        """
        for attempt in range(_MAX_RETRIES):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                if "request too large" in msg or "context_length_exceeded" in msg:
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise
                if attempt == _MAX_RETRIES - 1:
                    raise

                backoff = _BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)

                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d, "
                    "suggested=%.1fs, backoff=%ds): %s",
                    delay, attempt + 1, _MAX_RETRIES,
                    suggested or 0.0, backoff, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _MAX_RETRIES - 1:
                    raise
                # Transient network errors: short exponential backoff, capped.
                backoff = _BASE_DELAY * (2 ** min(attempt, 3))
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(1.0, backoff + jitter)
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        json_mode: bool = False,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        """Single request/response with no tools.

        When ``json_mode`` is True the API guarantees the response is valid
        JSON (only used by the planner; code and prose steps leave it off).
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._call_with_retry(**kwargs)
        usage = getattr(response, "usage", None)
        if on_tokens and usage:
            on_tokens(getattr(usage, "prompt_tokens", 0), getattr(usage, "completion_tokens", 0))
        return response.choices[0].message.content or ""


# ======================================================================
# Dry-run mock client (zero API calls)
# ======================================================================

_DRY_RUN_PLAN = json.dumps({
    "intent": "A simple dashboard with a navigation bar, summary cards and a chart",
    "layoutStructure": "Navbar on top, a three-column grid of cards, then a full-width chart",
    "components": ["Navbar", "Card", "Chart", "Button"],
    "reasoning": [
        "Navbar gives the page a consistent header",
        "Cards group key metrics at a glance",
        "A line chart shows the trend over time",
    ],
})

_DRY_RUN_CODE = """\
export default function GeneratedUI() {
  return (
    <div className="min-h-screen bg-gray-50">
      <Navbar logo="Dashboard" items={[{ id: 'home', label: 'Home' }, { id: 'reports', label: 'Reports' }]} variant="light" />
      <main className="p-6 space-y-6">
        <div className="grid grid-cols-1 md:grid-cols-3 gap-4">
          <Card title="Users" variant="elevated">
            <p className="text-2xl font-bold">1,204</p>
          </Card>
          <Card title="Revenue" variant="elevated">
            <p className="text-2xl font-bold">$12,400</p>
          </Card>
          <Card title="Orders" variant="elevated">
            <p className="text-2xl font-bold">342</p>
          </Card>
        </div>
        <Card title="Trend">
          <Chart type="line" data={[{ name: 'Jan', value: 400 }, { name: 'Feb', value: 300 }, { name: 'Mar', value: 500 }]} xAxis="name" yAxis="value" />
        </Card>
        <Button variant="primary" size="md">Refresh</Button>
      </main>
    </div>
  );
}
"""

_DRY_RUN_EXPLANATION = (
    "The layout puts a Navbar at the top so navigation stays visible, followed by "
    "a responsive grid of Cards that surface the key numbers first. A line Chart "
    "below the cards shows the trend, and a single primary Button keeps the action clear."
)


class DryRunClient:
    """Drop-in replacement for LLMClient that makes zero API calls.

    The pipeline step is detected from the system prompt; the canned code
    passes the component validator.
    """

    model = "dry-run"

    async def simple_completion(
        self,
        *,
        system: str,
        user_message: str,
        json_mode: bool = False,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        step = self._detect_step(system)
        logger.info("[dry-run] %s completion (%d chars in)", step, len(user_message))
        if step == "planner":
            return _DRY_RUN_PLAN
        if step == "generator":
            return _DRY_RUN_CODE
        return _DRY_RUN_EXPLANATION

    @staticmethod
    def _detect_step(system: str) -> str:
        """Guess the pipeline step from the system prompt."""
        if "UI planning agent" in system:
            return "planner"
        if "UI code generator" in system or "UI code repair" in system:
            return "generator"
        return "explainer"
