"""Remote generation backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Sequence

from knowledgebot.core.conversation import Role


@dataclass(frozen=True)
class Turn:
    role: Role
    text: str


class GenerationError(Exception):
    """A transport or service failure reported by a backend."""

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CredentialRejectedError(GenerationError):
    """The service rejected the API key."""


class GenerationBackend(ABC):
    @abstractmethod
    def submit(self, turns: Sequence[Turn], instruction: str, temperature: float) -> str | None:
        """Send *turns* with *instruction* as the system directive.

        Returns the generated text, which may be empty. Raises
        ``GenerationError`` (or a subclass) when the call fails.
        """


BackendFactory = Callable[[str], GenerationBackend]


def get_backend_factory(provider: str, model: str) -> BackendFactory:
    """Return a callable that builds the backend for *provider* from an API key."""
    provider = provider.lower()

    if provider == "openai":
        from knowledgebot.llm.openai_provider import OpenAIBackend
        return lambda api_key: OpenAIBackend(api_key=api_key, model=model)
    elif provider == "anthropic":
        from knowledgebot.llm.anthropic_provider import AnthropicBackend
        return lambda api_key: AnthropicBackend(api_key=api_key, model=model)
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
