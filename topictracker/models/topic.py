"""
Topic data model.

Represents a unit of learning content scoped to one language,
plus the payload a caller sends to create or update it.
"""

from dataclasses import dataclass


@dataclass
class TopicPayload:
    """
    Topic fields supplied by the user.
    The store adds id and language_id on creation.
    """
    title: str
    closed: bool = False  # closed = studied, active = not yet


@dataclass(frozen=True)
class Topic:
    """
    A learning topic stored in the topic collection.
    """
    id: str
    title: str
    closed: bool
    language_id: str  # id of the owning Language, never its title

    @classmethod
    def from_dict(cls, data: dict) -> "Topic":
        """Create Topic from JSON dict."""
        closed = data.get("closed", False)
        if not isinstance(closed, bool):
            raise TypeError(f"Invalid closed value for topic {data.get('id')}: {closed!r}")

        return cls(
            id=data["id"],
            title=data["title"],
            closed=closed,
            language_id=data["language_id"]
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "title": self.title,
            "closed": self.closed,
            "language_id": self.language_id
        }
