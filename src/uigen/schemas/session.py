"""Chat session, message and version-history models."""

from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel, Field

from uigen.schemas.generation import GenerationPlan, now_ms


def new_id() -> str:
    return uuid.uuid4().hex[:12]


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: int = Field(default_factory=now_ms)


class Version(BaseModel):
    """A snapshot of generated code that the user can roll back to."""

    id: str = Field(default_factory=new_id)
    code: str
    timestamp: int = Field(default_factory=now_ms)
    user_prompt: str
    plan: GenerationPlan
    explanation: str = ""


class Session(BaseModel):
    """One user's chat, its version history and the code currently in the editor."""

    id: str = Field(default_factory=new_id)
    created_at: int = Field(default_factory=now_ms)
    messages: list[ChatMessage] = []
    versions: list[Version] = []
    current_code: str = ""
