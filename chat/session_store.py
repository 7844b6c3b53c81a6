"""In-memory session store for multi-turn conversation transcripts."""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful, friendly, and knowledgeable AI assistant. "
    "Provide clear, concise, and accurate responses."
)

SESSION_MAX_AGE_SECONDS = 60 * 60  # 1 hour
SWEEP_INTERVAL_SECONDS = 60 * 60


@dataclass(frozen=True)
class Turn:
    role: str  # system | user | assistant
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


def new_transcript() -> list[Turn]:
    return [Turn(role="system", content=SYSTEM_PROMPT)]


@dataclass
class Session:
    id: str
    created_at: float
    transcript: list[Turn] = field(default_factory=new_transcript)


class SessionStore:
    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._last_id = 0
        # Request handlers run in the threadpool while the sweep runs on the event loop
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def mint_id(self) -> str:
        """Return a fresh id derived from the clock, strictly increasing."""
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return str(candidate)

    def create(self) -> Session:
        with self._lock:
            session = Session(id=self.mint_id(), created_at=self._clock())
            self._sessions[session.id] = session
        return Session(session.id, session.created_at, list(session.transcript))

    def get(self, session_id: str) -> list[Turn] | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return list(session.transcript)

    def put(self, session_id: str, transcript: list[Turn]) -> None:
        with self._lock:
            existing = self._sessions.get(session_id)
            created_at = existing.created_at if existing else self._clock()
            self._sessions[session_id] = Session(
                id=session_id, created_at=created_at, transcript=list(transcript)
            )

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def sweep(self, max_age: float = SESSION_MAX_AGE_SECONDS) -> list[str]:
        with self._lock:
            now = self._clock()
            expired = [
                sid for sid, s in self._sessions.items()
                if now - s.created_at >= max_age
            ]
            for sid in expired:
                del self._sessions[sid]
        for sid in expired:
            logger.info("Cleaned up session: %s", sid)
        return expired


class SessionSweeper:
    """Periodically evicts expired sessions from a store.

    ``run()`` is meant to be scheduled as an asyncio task; tests call
    ``run_once()`` directly or pass a fake ``sleep``.
    """

    def __init__(
        self,
        store: SessionStore,
        max_age: float = SESSION_MAX_AGE_SECONDS,
        interval: float = SWEEP_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.max_age = max_age
        self.interval = interval
        self._sleep = sleep

    def run_once(self) -> list[str]:
        expired = self.store.sweep(self.max_age)
        if expired:
            logger.info("Sweep removed %d session(s), %d remaining", len(expired), len(self.store))
        return expired

    async def run(self) -> None:
        while True:
            await self._sleep(self.interval)
            try:
                self.run_once()
            except Exception:
                logger.exception("Session sweep failed")
