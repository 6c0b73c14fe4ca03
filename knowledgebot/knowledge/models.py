"""Knowledge item model."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class SourceKind(str, Enum):
    TEXT = "text"  # hand-entered snippet
    FILE = "file"  # imported file


class KnowledgeItem(BaseModel):
    id: str
    title: str
    content: str
    kind: SourceKind = SourceKind.TEXT
    created_at: datetime

    model_config = {"extra": "ignore", "frozen": True}
