"""Pydantic models for WebDriver hub responses."""

from typing import Any

from pydantic import BaseModel


class CommandResponse(BaseModel):
    """Response to a session command.

    JSON Wire responses carry a numeric status, W3C responses only a value.
    """

    status: int = 0
    value: Any = None

    @property
    def error_message(self) -> str:
        """Best-effort error message from the value."""
        if isinstance(self.value, dict):
            return str(self.value.get("message") or self.value.get("error") or "")
        return ""


class NewSessionResponse(CommandResponse):
    """Response to a new session request."""

    sessionId: str | None = None

    @property
    def session_id(self) -> str | None:
        """Session ID from the JSON Wire or the W3C location."""
        if self.sessionId:
            return self.sessionId
        if isinstance(self.value, dict):
            session_id = self.value.get("sessionId")
            if isinstance(session_id, str):
                return session_id
        return None
