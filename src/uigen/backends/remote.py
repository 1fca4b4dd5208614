"""Remote backend — forwards generation requests to another server over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from uigen.agents.orchestrator.agent import ProgressCallback
from uigen.errors import BackendError
from uigen.library.validator import extract_component_usage, has_default_export, validate_component_usage
from uigen.schemas.generation import GenerationPlan, GenerationResult

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/v1/generate"
HEALTH_PATH = "/health"


class RemoteBackend:
    """Calls ``POST {base_url}/api/v1/generate`` and reshapes the JSON response.

    Returned code is validated locally as well; the remote side may run an
    older component library.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout, transport=self._transport)

    async def generate(
        self,
        prompt: str,
        current_code: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        if on_progress:
            on_progress(f"Calling {self.base_url}…")
        payload = {"prompt": prompt, "current_code": current_code or None}
        try:
            async with self._client() as http:
                resp = await http.post(GENERATE_PATH, json=payload)
        except httpx.HTTPError as exc:
            raise BackendError(f"Backend not reachable: {exc}") from exc

        if resp.status_code >= 400:
            detail = "Generation failed"
            try:
                body = resp.json()
                if isinstance(body, dict):
                    detail = body.get("detail") or body.get("error") or detail
            except ValueError:
                pass
            logger.warning("Remote backend returned HTTP %d: %s", resp.status_code, detail)
            raise BackendError(str(detail))

        try:
            data = resp.json()
        except ValueError as exc:
            raise BackendError("Backend returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise BackendError("Backend returned an invalid response")

        code = data.get("code") or ""
        if not isinstance(code, str) or not has_default_export(code):
            logger.warning("Remote backend returned no component code")
            raise BackendError("Backend returned no component code")
        try:
            plan = GenerationPlan(**(data.get("plan") or {}))
        except (ValidationError, TypeError) as exc:
            raise BackendError("Backend returned an invalid response") from exc
        return GenerationResult(
            plan=plan,
            code=code,
            explanation=str(data.get("explanation") or ""),
            component_usage=extract_component_usage(code),
            validation=validate_component_usage(code),
        )

    async def health(self) -> dict[str, Any]:
        try:
            async with self._client() as http:
                resp = await http.get(HEALTH_PATH)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BackendError("Backend not reachable") from exc
