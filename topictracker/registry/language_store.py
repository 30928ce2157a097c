"""
Language Store - owner of the language collection.

Manages language creation, renaming, title lookup and deletion.
"""

import logging
import uuid
from typing import Callable, List, Optional

from topictracker.models.errors import StoreError
from topictracker.models.language import Language
from topictracker.utils.result import Failure, Result, Success
from topictracker.utils.storage import PersistentMap

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class LanguageStore:
    """
    Single owner of Language records.

    Titles are the user-facing lookup key and are unique (exact,
    case-sensitive match). Deleting a language notifies every registered
    delete listener with the removed id so dependent records can be cleaned up.
    """

    def __init__(
        self,
        storage: PersistentMap,
        id_factory: Callable[[], str] = _new_id,
        strict_rename: bool = False
    ):
        """
        Args:
            storage: Persistent map holding Language records keyed by id
            id_factory: Generator of opaque unique ids
            strict_rename: Reject a rename onto a title owned by another language
        """
        self.storage = storage
        self.id_factory = id_factory
        self.strict_rename = strict_rename
        self._delete_listeners: List[Callable[[str], None]] = []

    def add_delete_listener(self, listener: Callable[[str], None]) -> None:
        """Register a callback invoked with the id of every deleted language."""
        self._delete_listeners.append(listener)

    def add_language(self, title: str) -> Result:
        """
        Create a new language.

        Returns:
            Success(Language), or Failure if the title is blank or already taken
        """
        if not title or not title.strip():
            return Failure(StoreError.invalid("a language title must not be empty"))

        if self._find(title) is not None:
            return Failure(StoreError.already_exists(f"a language {title} already exists"))

        language = Language(id=self.id_factory(), title=title)
        self.storage.insert(language.id, language)
        logger.info(f"Created language {language.id} - '{title}'")

        return Success(language)

    def rename_language(self, old_title: str, new_title: str) -> Result:
        """
        Change the title of an existing language. The id is kept.

        Unless strict_rename is set, new_title is not checked against the
        titles of other languages.
        """
        language = self._find(old_title)
        if language is None:
            return Failure(StoreError.not_found(f"a language {old_title} does not exist"))

        if not new_title or not new_title.strip():
            return Failure(StoreError.invalid("a language title must not be empty"))

        if self.strict_rename:
            other = self._find(new_title)
            if other is not None and other.id != language.id:
                return Failure(StoreError.already_exists(
                    f"couldn't rename {old_title}: a language {new_title} already exists"
                ))

        updated = Language(id=language.id, title=new_title)
        self.storage.insert(updated.id, updated)
        logger.info(f"Renamed language {language.id}: '{old_title}' -> '{new_title}'")

        return Success(updated)

    def find_by_title(self, title: str) -> Result:
        """Resolve a title to its language."""
        language = self._find(title)
        if language is None:
            return Failure(StoreError.not_found(f"a language {title} not found"))
        return Success(language)

    def get(self, language_id: str) -> Optional[Language]:
        """Retrieve language by ID. Returns None if not found."""
        return self.storage.get(language_id)

    def list_all(self) -> List[Language]:
        """Return all languages. Order is not guaranteed."""
        return self.storage.values()

    def delete_language(self, language_id: str) -> Result:
        """
        Remove a language, then every topic created on it.

        Returns:
            Success with the deleted Language, or Failure if the id is unknown

        Raises:
            OSError: If the topics could not be written. The language is
                restored and no topic is removed.
        """
        deleted = self.storage.remove(language_id)
        if deleted is None:
            return Failure(StoreError.not_found(
                f"couldn't delete a language with id={language_id}. not found."
            ))

        try:
            for listener in self._delete_listeners:
                listener(language_id)
        except OSError:
            # Dependent records are still stored, so the language goes back too
            logger.error(f"Cleanup after deleting language {language_id} failed, restoring it")
            self.storage.insert(deleted.id, deleted)
            raise

        logger.info(f"Deleted language {language_id} - '{deleted.title}'")
        return Success(deleted)

    def _find(self, title: str) -> Optional[Language]:
        for language in self.storage.values():
            if language.title == title:
                return language
        return None
