"""In-memory chat sessions with version history and rollback.

Nothing is persisted: sessions live for the lifetime of the process, the
same way the browser client keeps its history only in memory.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict

from uigen.errors import SessionNotFoundError, VersionNotFoundError
from uigen.schemas.generation import GenerationResult
from uigen.schemas.session import ChatMessage, Session, Version

logger = logging.getLogger(__name__)


class SessionStore:
    """Process-local session registry guarded by an ``asyncio.Lock``."""

    def __init__(self, *, max_sessions: int = 100, max_versions: int = 50) -> None:
        self.max_sessions = max_sessions
        self.max_versions = max_versions
        self._sessions: OrderedDict[str, Session] = OrderedDict()
        self._lock = asyncio.Lock()

    def _get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    async def create(self) -> Session:
        async with self._lock:
            session = Session()
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted session %s (limit %d)", evicted, self.max_sessions)
            return session

    async def get(self, session_id: str) -> Session:
        async with self._lock:
            return self._get(session_id)

    async def list_sessions(self) -> list[Session]:
        async with self._lock:
            return list(self._sessions.values())

    async def delete(self, session_id: str) -> None:
        async with self._lock:
            self._get(session_id)
            del self._sessions[session_id]

    async def add_message(self, session_id: str, role: str, content: str) -> ChatMessage:
        async with self._lock:
            session = self._get(session_id)
            message = ChatMessage(role=role, content=content)
            session.messages.append(message)
            return message

    async def record_generation(self, session_id: str, prompt: str, result: GenerationResult) -> Version:
        """Append a version for ``result`` and make its code current."""
        async with self._lock:
            session = self._get(session_id)
            version = Version(
                code=result.code,
                user_prompt=prompt,
                plan=result.plan,
                explanation=result.explanation,
            )
            session.versions.append(version)
            if len(session.versions) > self.max_versions:
                del session.versions[: len(session.versions) - self.max_versions]
            session.current_code = result.code
            return version

    async def update_code(self, session_id: str, code: str) -> Session:
        """Replace the editor code without creating a version."""
        async with self._lock:
            session = self._get(session_id)
            session.current_code = code
            return session

    async def rollback(self, session_id: str, version_id: str) -> Version:
        """Restore a previous version's code; the history itself is unchanged."""
        async with self._lock:
            session = self._get(session_id)
            for version in session.versions:
                if version.id == version_id:
                    session.current_code = version.code
                    logger.info("Session %s rolled back to version %s", session_id, version_id)
                    return version
            raise VersionNotFoundError(version_id)

    async def versions(self, session_id: str) -> list[Version]:
        """Versions newest first."""
        async with self._lock:
            return list(reversed(self._get(session_id).versions))
