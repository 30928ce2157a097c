"""
Topic Store - owner of the topic collection.

Topics reference their language by id only. Every operation that takes a
language title resolves it through the LanguageStore first.
"""

import logging
import uuid
from typing import Callable, List, Optional

from topictracker.models.errors import StoreError
from topictracker.models.topic import Topic, TopicPayload
from topictracker.registry.language_store import LanguageStore
from topictracker.utils.result import Failure, Result, Success
from topictracker.utils.storage import PersistentMap

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class TopicStore:
    """
    Single owner of Topic records.

    Enforces per-language title uniqueness on creation and removes the
    topics of a language when that language is deleted.
    """

    def __init__(
        self,
        storage: PersistentMap,
        languages: LanguageStore,
        id_factory: Callable[[], str] = _new_id,
        strict_update: bool = False
    ):
        """
        Args:
            storage: Persistent map holding Topic records keyed by id
            languages: Store used to resolve language titles
            id_factory: Generator of opaque unique ids
            strict_update: Re-check per-language title uniqueness on update_topic
        """
        self.storage = storage
        self.languages = languages
        self.id_factory = id_factory
        self.strict_update = strict_update

        languages.add_delete_listener(self.cascade_delete_by_language)

    def add_topic(self, payload: TopicPayload, language_title: str) -> Result:
        """
        Create a new topic on the language with the given title.

        The caller's closed value is kept as is.

        Returns:
            Success(Topic), or Failure if the language is unknown, the title
            is blank, or the language already has a topic with this title
        """
        resolved = self.languages.find_by_title(language_title)
        if resolved.is_failure:
            return resolved
        language_id = resolved.unwrap().id

        if not payload.title or not payload.title.strip():
            return Failure(StoreError.invalid("a topic title must not be empty"))

        if self._title_taken(language_id, payload.title):
            return Failure(StoreError.already_exists(
                f"a topic {payload.title} already exists for language {language_title}"
            ))

        topic = Topic(
            id=self.id_factory(),
            title=payload.title,
            closed=payload.closed,
            language_id=language_id
        )
        self.storage.insert(topic.id, topic)
        logger.info(f"Created topic {topic.id} - '{topic.title}' on language {language_id}")

        return Success(topic)

    def update_topic(self, topic_id: str, payload: TopicPayload) -> Result:
        """
        Overwrite title and status of a topic. language_id is kept.

        Unless strict_update is set, the new title is not checked against
        the other topics of the same language.
        """
        topic = self.storage.get(topic_id)
        if topic is None:
            return Failure(StoreError.not_found(
                f"couldn't update a topic with id={topic_id}. not found"
            ))

        if not payload.title or not payload.title.strip():
            return Failure(StoreError.invalid("a topic title must not be empty"))

        if self.strict_update and self._title_taken(topic.language_id, payload.title, exclude_id=topic_id):
            return Failure(StoreError.already_exists(
                f"couldn't update a topic with id={topic_id}. "
                f"a topic {payload.title} already exists for its language"
            ))

        updated = Topic(
            id=topic.id,
            title=payload.title,
            closed=payload.closed,
            language_id=topic.language_id
        )
        self.storage.insert(updated.id, updated)
        logger.info(f"Updated topic {topic_id}")

        return Success(updated)

    def update_topic_status(self, topic_id: str, closed: bool) -> Result:
        """Overwrite only the closed flag of a topic."""
        topic = self.storage.get(topic_id)
        if topic is None:
            return Failure(StoreError.not_found(f"Topic with ID '{topic_id}' not found."))

        updated = Topic(
            id=topic.id,
            title=topic.title,
            closed=closed,
            language_id=topic.language_id
        )
        self.storage.insert(updated.id, updated)
        logger.info(f"Topic {topic_id} marked {'closed' if closed else 'active'}")

        return Success(updated)

    def delete_topic(self, topic_id: str) -> Result:
        """Remove a topic and return it."""
        deleted = self.storage.remove(topic_id)
        if deleted is None:
            return Failure(StoreError.not_found(
                f"couldn't delete a topic with id={topic_id}. not found."
            ))

        logger.info(f"Deleted topic {topic_id} - '{deleted.title}'")
        return Success(deleted)

    def cascade_delete_by_language(self, language_id: str) -> None:
        """Remove every topic of a language. No-op when there are none."""
        topic_ids = [t.id for t in self.storage.values() if t.language_id == language_id]
        removed = self.storage.remove_many(topic_ids)

        if removed:
            logger.info(f"Cascade removed {len(removed)} topics of language {language_id}")

    def list_by_language(self, language_title: str) -> Result:
        """All topics of the language with the given title, in arbitrary order."""
        resolved = self.languages.find_by_title(language_title)
        if resolved.is_failure:
            return resolved
        language_id = resolved.unwrap().id

        return Success([t for t in self.storage.values() if t.language_id == language_id])

    def list_all(self) -> List[Topic]:
        """Return all topics. Order is not guaranteed."""
        return self.storage.values()

    def list_by_status(self, closed: bool) -> List[Topic]:
        """
        All topics with the given status, across languages.

        Topics are collected language by language, so a topic whose
        language no longer exists is never returned.
        """
        topics = self.storage.values()

        result = []
        for language in self.languages.list_all():
            result.extend(
                t for t in topics
                if t.language_id == language.id and t.closed == closed
            )
        return result

    def search(self, query: str) -> List[Topic]:
        """Case-insensitive substring match on titles. Empty query matches all."""
        query_lower = query.lower()
        return [t for t in self.storage.values() if query_lower in t.title.lower()]

    def _title_taken(self, language_id: str, title: str, exclude_id: Optional[str] = None) -> bool:
        for topic in self.storage.values():
            if topic.language_id == language_id and topic.title == title and topic.id != exclude_id:
                return True
        return False
