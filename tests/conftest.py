"""Shared test fixtures."""

from datetime import datetime, timezone
from typing import Callable, Sequence

import pytest

from knowledgebot.knowledge.models import KnowledgeItem, SourceKind
from knowledgebot.knowledge.store import KnowledgeStore
from knowledgebot.llm.client import GenerationClient
from knowledgebot.llm.provider import GenerationBackend, Turn


class FakeBackend(GenerationBackend):
    """Backend double that records calls and plays back scripted replies."""

    def __init__(self) -> None:
        self.replies: list[str | None] = []
        self.error: Exception | None = None
        self.on_submit: Callable[[], None] | None = None
        self.calls: list[dict] = []

    def submit(self, turns: Sequence[Turn], instruction: str, temperature: float) -> str | None:
        self.calls.append({
            "turns": list(turns),
            "instruction": instruction,
            "temperature": temperature,
        })
        if self.on_submit:
            self.on_submit()
        if self.error:
            raise self.error
        return self.replies.pop(0) if self.replies else "ok"


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real credentials out of tests."""
    monkeypatch.delenv("KNOWLEDGEBOT_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend: FakeBackend) -> GenerationClient:
    return GenerationClient(api_key="test-key", backend_factory=lambda key: backend)


@pytest.fixture
def store(tmp_path) -> KnowledgeStore:
    return KnowledgeStore(tmp_path / "knowledge.json")


@pytest.fixture
def make_item() -> Callable[..., KnowledgeItem]:
    counter = iter(range(1, 1000))

    def _make(title: str, content: str, kind: SourceKind = SourceKind.TEXT) -> KnowledgeItem:
        return KnowledgeItem(
            id=f"item-{next(counter)}",
            title=title,
            content=content,
            kind=kind,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    return _make
