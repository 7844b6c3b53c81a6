"""
Turn processor: runs one message exchange against a session.

Reads the transcript, appends the user turn to a working copy, asks the
completion client for a reply and writes the transcript back only when the
call succeeded, so a failed turn leaves no orphaned user message behind.
"""

import logging
from dataclasses import dataclass, replace

from .completions import CompletionClient, GenerationConfig
from .errors import InvalidRequest, NotFound, ProviderAuthError, ProviderError, translate_provider_error
from .session_store import SessionStore, Turn, new_transcript

logger = logging.getLogger(__name__)

PROBE_PROMPT = "Hi"
PROBE_MAX_TOKENS = 10


@dataclass
class TurnResult:
    reply: str
    session_id: str
    model_used: str
    total_tokens: int


class TurnProcessor:
    def __init__(
        self,
        store: SessionStore,
        completion_client: CompletionClient,
        config: GenerationConfig | None = None,
    ):
        self.store = store
        self.client = completion_client
        self.config = config or GenerationConfig()

    def init_session(self) -> str:
        session = self.store.create()
        logger.info("session=%s initialized", session.id)
        return session.id

    def clear_session(self, session_id: str | None) -> None:
        if session_id and self.store.delete(session_id):
            logger.info("session=%s cleared", session_id)

    def get_history(self, session_id: str) -> list[Turn]:
        transcript = self.store.get(session_id)
        if transcript is None:
            raise NotFound()
        # Leading system turn stays internal
        return transcript[1:]

    def handle_message(self, session_id: str | None, user_text: str | None) -> TurnResult:
        if not user_text or not user_text.strip():
            raise InvalidRequest(error="Message is required")

        if not session_id:
            session_id = self.store.mint_id()

        transcript = self.store.get(session_id)
        if transcript is None:
            logger.info("session=%s not found, starting a new transcript", session_id)
            transcript = new_transcript()

        transcript.append(Turn(role="user", content=user_text))
        completion = self._complete(transcript, self.config, purpose="chat")
        transcript.append(Turn(role="assistant", content=completion.text))
        self.store.put(session_id, transcript)

        logger.info(
            "session=%s turns=%d model=%s tokens=%d",
            session_id, len(transcript) - 1, completion.model_used, completion.total_tokens,
        )
        return TurnResult(
            reply=completion.text,
            session_id=session_id,
            model_used=completion.model_used,
            total_tokens=completion.total_tokens,
        )

    def probe(self) -> str:
        """Send a tiny one-off prompt to check the provider credential."""
        config = replace(self.config, max_tokens=PROBE_MAX_TOKENS)
        completion = self._complete(
            [Turn(role="user", content=PROBE_PROMPT)], config, purpose="probe"
        )
        return completion.text

    def _complete(self, transcript: list[Turn], config: GenerationConfig, purpose: str):
        try:
            return self.client.complete(transcript, config, purpose=purpose)
        except ProviderError as e:
            error = translate_provider_error(e)
            if isinstance(error, ProviderAuthError):
                logger.error("Provider rejected credentials: %s", e.message)
            else:
                logger.warning(
                    "Provider call failed (%s, status=%s): %s",
                    type(error).__name__, e.status, e.message,
                )
            raise error from e
