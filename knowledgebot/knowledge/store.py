"""Knowledge collection persisted as a JSON file."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from knowledgebot.knowledge.models import KnowledgeItem, SourceKind

logger = logging.getLogger(__name__)

_ITEMS = TypeAdapter(list[KnowledgeItem])


class KnowledgeStore:
    """Ordered, durable collection of knowledge items.

    Items are kept newest first: new items are prepended and the list is
    written back to disk after every add or delete. Items are never edited.
    """

    def __init__(self, path: Path):
        self._path = path
        self._items: list[KnowledgeItem] = self._load()

    def _load(self) -> list[KnowledgeItem]:
        if not self._path.exists():
            return []
        try:
            return _ITEMS.validate_json(self._path.read_bytes())
        except (OSError, ValidationError):
            logger.exception("Failed to load knowledge base from %s", self._path)
            return []

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the store and swap in, so a crash never truncates it
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_bytes(_ITEMS.dump_json(self._items, indent=2))
        tmp_path.replace(self._path)

    def add(self, title: str, content: str, kind: SourceKind = SourceKind.TEXT) -> KnowledgeItem:
        if not title:
            raise ValueError("Knowledge item title must not be empty")
        if not content:
            raise ValueError("Knowledge item content must not be empty")

        item = KnowledgeItem(
            id=uuid.uuid4().hex,
            title=title,
            content=content,
            kind=kind,
            created_at=datetime.now(timezone.utc),
        )
        self._items.insert(0, item)
        self._save()
        logger.info("Added knowledge item %s (%s)", item.id, item.title)
        return item

    def delete(self, item_id: str) -> bool:
        remaining = [item for item in self._items if item.id != item_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._save()
        logger.info("Deleted knowledge item %s", item_id)
        return True

    def get(self, item_id: str) -> KnowledgeItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def all(self) -> list[KnowledgeItem]:
        return list(self._items)

    def search(self, query: str) -> list[KnowledgeItem]:
        needle = query.lower()
        return [
            item for item in self._items
            if needle in item.title.lower() or needle in item.content.lower()
        ]

    def count(self) -> int:
        return len(self._items)

    def stats(self) -> dict:
        return {
            "total_items": len(self._items),
            "path": str(self._path),
        }
