"""API routes wrapping the turn processor."""

import logging
import threading
import time
from collections import defaultdict
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from .models import (
    ClearResponse,
    ClearSessionRequest,
    HealthResponse,
    HistoryResponse,
    InitResponse,
    MessageRequest,
    MessageResponse,
    ProbeResponse,
    TurnModel,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_RATE_WINDOW = 60.0


class RateLimiter:
    """Simple per-IP limiter: at most ``limit`` requests per minute. 0 disables it."""

    def __init__(self, limit: int, window: float = _RATE_WINDOW):
        self.limit = limit
        self.window = window
        self._request_log: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._request_log)

    def check(self, client_ip: str) -> None:
        if self.limit <= 0:
            return
        now = time.time()
        with self._lock:
            # Prune old entries, dropping clients with nothing left in the window
            for ip in list(self._request_log):
                recent = [t for t in self._request_log[ip] if now - t < self.window]
                if recent:
                    self._request_log[ip] = recent
                else:
                    del self._request_log[ip]
            if len(self._request_log[client_ip]) >= self.limit:
                raise HTTPException(status_code=429, detail="Rate limit exceeded. Try again shortly.")
            self._request_log[client_ip].append(now)


@router.post("/chat/init", response_model=InitResponse)
def init_session(request: Request):
    processor = request.app.state.processor
    session_id = processor.init_session()
    return InitResponse(session_id=session_id, model=processor.config.model)


@router.post("/chat/message", response_model=MessageResponse)
def send_message(req: MessageRequest, request: Request):
    client_ip = request.client.host if request.client else "unknown"
    request.app.state.rate_limiter.check(client_ip)

    processor = request.app.state.processor
    t0 = time.perf_counter()
    result = processor.handle_message(req.session_id, req.message)

    logger.info(
        "session=%s chars=%d tokens=%d total=%.0fms",
        result.session_id, len(req.message or ""), result.total_tokens,
        (time.perf_counter() - t0) * 1000,
    )
    return MessageResponse(
        response=result.reply,
        session_id=result.session_id,
        model=result.model_used,
        tokens_used=result.total_tokens,
    )


@router.post("/chat/clear", response_model=ClearResponse)
def clear_session(req: ClearSessionRequest, request: Request):
    request.app.state.processor.clear_session(req.session_id)
    return ClearResponse()


@router.get("/chat/history/{session_id}", response_model=HistoryResponse)
def get_history(session_id: str, request: Request):
    turns = request.app.state.processor.get_history(session_id)
    return HistoryResponse(messages=[TurnModel(**t.to_dict()) for t in turns])


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    settings = request.app.state.settings
    return HealthResponse(
        api_key_configured=settings.api_key_configured,
        model=request.app.state.processor.config.model,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/test", response_model=ProbeResponse)
def test_api_key(request: Request):
    reply = request.app.state.processor.probe()
    return ProbeResponse(response=reply)


@router.get("/usage")
def usage(request: Request):
    return {"success": True, **request.app.state.tracker.summary()}
