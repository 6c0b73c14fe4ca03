"""Chat session management."""

import logging
import threading

from knowledgebot.core.conversation import ChatMessage, Conversation, Role
from knowledgebot.knowledge.store import KnowledgeStore
from knowledgebot.llm.client import GenerationClient

logger = logging.getLogger(__name__)


class ChatSession:
    """Drives turn-taking between the user and the assistant.

    Each accepted submission appends exactly one user turn and, once the
    generation call returns, exactly one model turn. Only one generation
    may be outstanding at a time; submissions made while busy are dropped,
    not queued.
    """

    def __init__(
        self,
        client: GenerationClient,
        store: KnowledgeStore,
        conversation: Conversation | None = None,
    ):
        self.client = client
        self.store = store
        self.conversation = conversation if conversation is not None else Conversation()
        self._lock = threading.Lock()
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def submit(self, utterance: str) -> ChatMessage | None:
        """Send *utterance* and return the model turn it produced.

        Returns None when the utterance is blank or a generation is
        already in progress; nothing is appended in either case.
        """
        if not utterance.strip():
            return None

        with self._lock:
            if self._busy:
                logger.debug("Ignoring submission while a reply is pending")
                return None
            self._busy = True

        try:
            history = self.conversation.messages
            self.conversation.append(Role.USER, utterance)
            result = self.client.generate_result(utterance, history, self.store.all())
            return self.conversation.append(Role.MODEL, result.text, outcome=result.outcome)
        finally:
            self._busy = False

    def restart(self) -> int:
        """Start a fresh conversation. Returns the count of discarded messages."""
        return self.conversation.reset()
