"""
Language data model.

A top-level subject of study (e.g. a programming language).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A language record. Titles are unique across the collection."""
    id: str
    title: str

    @classmethod
    def from_dict(cls, data: dict) -> "Language":
        return cls(id=data["id"], title=data["title"])

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title}


@dataclass
class LanguageStats:
    """Number of topics recorded for a language."""
    title: str
    count: int

    def to_dict(self) -> dict:
        return {"title": self.title, "count": self.count}
