"""Pydantic request/response schemas for the chat API."""

from pydantic import BaseModel


# ── Requests ───────────────────────────────────────────────────────────────

class MessageRequest(BaseModel):
    message: str | None = None
    session_id: str | None = None


class ClearSessionRequest(BaseModel):
    session_id: str | None = None


# ── Responses ──────────────────────────────────────────────────────────────

class TurnModel(BaseModel):
    role: str
    content: str


class InitResponse(BaseModel):
    success: bool = True
    session_id: str
    model: str
    message: str = "Chat session initialized"


class MessageResponse(BaseModel):
    success: bool = True
    response: str
    session_id: str
    model: str
    tokens_used: int


class ClearResponse(BaseModel):
    success: bool = True
    message: str = "Chat session cleared"


class HistoryResponse(BaseModel):
    success: bool = True
    messages: list[TurnModel]


class HealthResponse(BaseModel):
    success: bool = True
    message: str = "Server is running"
    api_key_configured: bool
    model: str
    timestamp: str


class ProbeResponse(BaseModel):
    success: bool = True
    message: str = "API key is valid"
    response: str
