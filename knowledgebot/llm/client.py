"""Grounded generation client.

Turns a user utterance, the conversation so far and the knowledge base
into one request to the generation backend, and turns whatever comes back
(text, nothing, or an error) into a single reply string. Failures are
reported as the reply and never raised; nothing is retried.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from knowledgebot.config.settings import API_KEY_ENV_VARS, Settings
from knowledgebot.core.conversation import ChatMessage, Outcome, Role
from knowledgebot.knowledge.models import KnowledgeItem
from knowledgebot.llm.provider import (
    BackendFactory,
    CredentialRejectedError,
    GenerationBackend,
    Turn,
    get_backend_factory,
)
from knowledgebot.rag.prompt import compose

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7

_KEY_VARS = " or ".join(API_KEY_ENV_VARS)

UNCONFIGURED_MESSAGE = (
    "Error: AI service not initialized. "
    f"Please ensure an API key is configured in {_KEY_VARS}."
)
CREDENTIAL_REJECTED_MESSAGE = (
    "Error: the AI service rejected the configured API key. "
    f"Please check that {_KEY_VARS} holds a valid, active key."
)
EMPTY_RESPONSE_MESSAGE = "I'm sorry, I couldn't generate a response."
FAILURE_MESSAGE = "An error occurred while connecting to the AI service"
FAILURE_FALLBACK = "Please check your connection."

_CREDENTIAL_STATUS_CODES = {401, 403}


@dataclass(frozen=True)
class GenerationResult:
    text: str
    outcome: Outcome


def _error_text(exc: Exception) -> str:
    return (getattr(exc, "message", None) or str(exc)).strip()


def _is_credential_rejection(exc: Exception) -> bool:
    if isinstance(exc, CredentialRejectedError):
        return True
    return getattr(exc, "status_code", None) in _CREDENTIAL_STATUS_CODES


class GenerationClient:
    """Stateless between calls; the API key is checked once, here."""

    def __init__(self, api_key: str | None, backend_factory: BackendFactory):
        self._backend: GenerationBackend | None = None
        if api_key and api_key.strip():
            self._backend = backend_factory(api_key)
        else:
            logger.warning(
                "API key not found in %s. Generation is disabled.", _KEY_VARS
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationClient":
        factory = get_backend_factory(settings.llm_provider, settings.llm_model)
        return cls(api_key=settings.api_key, backend_factory=factory)

    @property
    def configured(self) -> bool:
        return self._backend is not None

    def generate(
        self,
        utterance: str,
        history: Sequence[ChatMessage],
        knowledge: Sequence[KnowledgeItem],
    ) -> str:
        return self.generate_result(utterance, history, knowledge).text

    def generate_result(
        self,
        utterance: str,
        history: Sequence[ChatMessage],
        knowledge: Sequence[KnowledgeItem],
    ) -> GenerationResult:
        if self._backend is None:
            return GenerationResult(UNCONFIGURED_MESSAGE, Outcome.UNCONFIGURED)

        turns = [Turn(role=m.role, text=m.content) for m in history]
        turns.append(Turn(role=Role.USER, text=utterance))

        try:
            instruction = compose(knowledge)
            text = self._backend.submit(turns, instruction, TEMPERATURE)
        except Exception as e:
            return self._failure(e)

        if not text:
            logger.warning("Backend returned no text for a %d-turn request", len(turns))
            return GenerationResult(EMPTY_RESPONSE_MESSAGE, Outcome.EMPTY)
        return GenerationResult(text, Outcome.OK)

    def _failure(self, exc: Exception) -> GenerationResult:
        detail = _error_text(exc)

        if _is_credential_rejection(exc):
            logger.error("API key rejected by the generation service: %s", detail)
            text = CREDENTIAL_REJECTED_MESSAGE
            if detail:
                text = f"{text} (Service said: {detail})"
            return GenerationResult(text, Outcome.CREDENTIAL_REJECTED)

        logger.error("Generation request failed", exc_info=exc)
        if detail:
            text = f"{FAILURE_MESSAGE}: {detail}"
        else:
            text = f"{FAILURE_MESSAGE}. {FAILURE_FALLBACK}"
        return GenerationResult(text, Outcome.FAILED)
