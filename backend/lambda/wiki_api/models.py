"""models.py — Wiki entity shapes and their conversions.

``WikiRecord`` is the canonical store-side record, ``PublicWiki`` the shape
returned to API callers. Both carry the same five fields; the split keeps
the DynamoDB item layout and the wire contract free to evolve separately.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

__all__ = [
    "DeleteWikiResult",
    "PublicWiki",
    "WikiDraft",
    "WikiRecord",
]


@dataclass(frozen=True)
class WikiDraft:
    """A wiki record before the store has assigned its id."""
    owner: str
    title: str
    text: str
    category: str


@dataclass(frozen=True)
class WikiRecord:
    id: str
    owner: str
    title: str
    text: str
    category: str

    @classmethod
    def from_draft(cls, wiki_id: str, draft: WikiDraft) -> "WikiRecord":
        return cls(
            id=wiki_id,
            owner=draft.owner,
            title=draft.title,
            text=draft.text,
            category=draft.category,
        )

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "WikiRecord":
        """Build a record from a deserialized DynamoDB item.

        Items written before ``title`` existed have no such attribute; any
        missing attribute is read as the empty string.
        """
        return cls(
            id=str(item.get("id", "")),
            owner=str(item.get("owner", "")),
            title=str(item.get("title", "")),
            text=str(item.get("text", "")),
            category=str(item.get("category", "")),
        )

    def to_item(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class PublicWiki:
    id: str
    owner: str
    title: str
    text: str
    category: str

    @classmethod
    def from_record(cls, record: WikiRecord) -> "PublicWiki":
        return cls(
            id=record.id,
            owner=record.owner,
            title=record.title,
            text=record.text,
            category=record.category,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class DeleteWikiResult:
    success: bool

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)
