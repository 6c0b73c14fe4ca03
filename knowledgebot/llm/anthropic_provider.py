"""Anthropic Claude generation backend."""

from typing import Sequence

import anthropic

from knowledgebot.core.conversation import Role
from knowledgebot.llm.provider import (
    CredentialRejectedError,
    GenerationBackend,
    GenerationError,
    Turn,
)

_ROLES = {Role.USER: "user", Role.MODEL: "assistant"}


class AnthropicBackend(GenerationBackend):
    def __init__(self, api_key: str, model: str = "claude-sonnet-4-5-20250929"):
        self._client = anthropic.Anthropic(api_key=api_key, max_retries=0)
        self._model = model

    def submit(self, turns: Sequence[Turn], instruction: str, temperature: float) -> str | None:
        # Anthropic takes the system directive as a separate param
        messages = [{"role": _ROLES[t.role], "content": t.text} for t in turns]

        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=4096,
                system=instruction,
                messages=messages,
                temperature=temperature,
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise CredentialRejectedError(e.message, status_code=e.status_code) from e
        except anthropic.APIError as e:
            raise GenerationError(e.message, status_code=getattr(e, "status_code", None)) from e

        return "".join(block.text for block in response.content if block.type == "text")
