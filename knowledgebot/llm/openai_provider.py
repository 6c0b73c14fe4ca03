"""OpenAI generation backend."""

from typing import Sequence

import openai

from knowledgebot.core.conversation import Role
from knowledgebot.llm.provider import (
    CredentialRejectedError,
    GenerationBackend,
    GenerationError,
    Turn,
)

_ROLES = {Role.USER: "user", Role.MODEL: "assistant"}


class OpenAIBackend(GenerationBackend):
    def __init__(self, api_key: str, model: str = "gpt-4o"):
        self._client = openai.OpenAI(api_key=api_key, max_retries=0)
        self._model = model

    def submit(self, turns: Sequence[Turn], instruction: str, temperature: float) -> str | None:
        messages = [{"role": "system", "content": instruction}]
        messages.extend({"role": _ROLES[t.role], "content": t.text} for t in turns)

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise CredentialRejectedError(e.message, status_code=e.status_code) from e
        except openai.APIError as e:
            raise GenerationError(e.message, status_code=getattr(e, "status_code", None)) from e

        if not response.choices:
            return None
        return response.choices[0].message.content
