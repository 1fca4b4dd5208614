"""Request/response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from uigen.schemas.generation import ValidationResult
from uigen.schemas.session import Version


class GenerateRequest(BaseModel):
    """Body of ``POST /api/v1/generate``."""

    prompt: str
    current_code: str | None = None


class GenerateResponse(BaseModel):
    code: str
    explanation: str
    plan: dict[str, Any]
    component_usage: list[str] = []
    validation: ValidationResult


class FrontendGenerateRequest(BaseModel):
    """Body of ``POST /api/generate``, as sent by the browser client."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = None
    current_code: str | None = Field(default=None, alias="currentCode")


class FrontendGenerateResponse(BaseModel):
    code: str
    explanation: str
    plan: dict[str, Any]


class ValidateRequest(BaseModel):
    code: str


class PromptRequest(BaseModel):
    prompt: str


class CodeUpdateRequest(BaseModel):
    code: str


class CodeUpdateResponse(BaseModel):
    current_code: str
    validation: ValidationResult


class HealthResponse(BaseModel):
    status: str
    backend: str
    model: str = ""


class ChatReply(BaseModel):
    """Result of one chat turn: the assistant reply and the new version."""

    reply: str
    version: Version
    code: str
    plan: dict[str, Any]
    component_usage: list[str] = []
    validation: ValidationResult
