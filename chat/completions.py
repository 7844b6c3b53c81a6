"""
OpenAI chat completion client.

The only place that talks to the provider. Takes a transcript plus a
generation config and returns the reply text with the usage the provider
reported. SDK exceptions are converted to ``ProviderError``.
"""

import logging
from dataclasses import dataclass

import openai
from openai import OpenAI

from .config import DEFAULT_MODEL, Settings
from .errors import ProviderError
from .session_store import Turn
from .token_tracker import TokenTracker, tracker as default_tracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationConfig:
    model: str = DEFAULT_MODEL
    temperature: float = 0.9
    max_tokens: int = 2048
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


@dataclass
class Completion:
    text: str
    model_used: str
    total_tokens: int


class CompletionClient:
    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 0,
        client: OpenAI | None = None,
        token_tracker: TokenTracker | None = None,
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._max_retries = max_retries
        self._client = client
        self._tracker = token_tracker or default_tracker

    @classmethod
    def from_settings(
        cls, settings: Settings, token_tracker: TokenTracker | None = None
    ) -> "CompletionClient":
        return cls(
            api_key=settings.openai_api_key if settings.api_key_configured else None,
            timeout=settings.openai_timeout_seconds,
            max_retries=settings.openai_max_retries,
            token_tracker=token_tracker,
        )

    def _get_client(self) -> OpenAI:
        # Built lazily so the server can start (and report health) without a key
        if self._client is None:
            if not self._api_key:
                raise ProviderError(401, "OPENAI_API_KEY is not configured")
            self._client = OpenAI(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=self._max_retries,
            )
        return self._client

    def complete(
        self,
        transcript: list[Turn],
        config: GenerationConfig,
        purpose: str = "chat",
    ) -> Completion:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=config.model,
                messages=[turn.to_dict() for turn in transcript],
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                top_p=config.top_p,
                frequency_penalty=config.frequency_penalty,
                presence_penalty=config.presence_penalty,
            )
        except openai.APIStatusError as e:
            raise ProviderError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            raise ProviderError(None, str(e), transient=True) from e
        except openai.OpenAIError as e:
            raise ProviderError(None, str(e)) from e

        if not response.choices:
            raise ProviderError(None, "empty completion")
        text = response.choices[0].message.content or ""
        model_used = response.model or config.model

        usage = response.usage
        total_tokens = 0
        if usage is not None:
            total_tokens = usage.total_tokens
            self._tracker.log(
                model=model_used,
                purpose=purpose,
                input_tokens=usage.prompt_tokens,
                output_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )

        logger.debug("completion model=%s turns=%d tokens=%d", model_used, len(transcript), total_tokens)
        return Completion(text=text, model_used=model_used, total_tokens=total_tokens)
