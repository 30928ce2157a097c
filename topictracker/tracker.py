"""
Topic Tracker.

Owns the language and topic stores and exposes every operation as a
single call returning a Result.
"""

import logging
import os
import threading
from functools import wraps
from typing import Callable, Optional

from topictracker.aggregation import StatisticsReporter, language_statistics
from topictracker.models.language import Language
from topictracker.models.topic import Topic, TopicPayload
from topictracker.registry.language_store import LanguageStore
from topictracker.registry.topic_store import TopicStore
from topictracker.utils.result import Result, Success
from topictracker.utils.storage import PersistentMap
import config.settings as settings

logger = logging.getLogger(__name__)


def _operation(method: Callable) -> Callable:
    """Run a tracker method under the store lock and log its outcome."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            result = method(self, *args, **kwargs)
        if result.is_failure:
            logger.warning(f"{method.__name__} failed: {result.unwrap_error()}")
        else:
            logger.info(f"{method.__name__} succeeded")
        return result

    return wrapper


class TopicTracker:
    """
    Entry point for the language/topic data service.

    Both stores sit behind one lock, so resolving a language and inserting
    a topic can never interleave with deleting that language.
    """

    def __init__(
        self,
        data_root: Optional[str] = None,
        strict_rename: bool = settings.STRICT_RENAME,
        strict_topic_update: bool = settings.STRICT_TOPIC_UPDATE,
        id_factory: Optional[Callable[[], str]] = None
    ):
        """
        Args:
            data_root: Directory holding the data files, or None to keep
                everything in memory
            strict_rename: Reject renaming a language onto a taken title
            strict_topic_update: Reject updating a topic onto a taken title
            id_factory: Generator of opaque unique ids (uuid4 by default)
        """
        self.data_root = data_root
        self._lock = threading.RLock()

        languages_path = os.path.join(data_root, settings.LANGUAGES_FILENAME) if data_root else None
        topics_path = os.path.join(data_root, settings.TOPICS_FILENAME) if data_root else None

        language_map = PersistentMap(languages_path, Language.from_dict, Language.to_dict, lambda lang: lang.id)
        topic_map = PersistentMap(topics_path, Topic.from_dict, Topic.to_dict, lambda t: t.id)

        store_kwargs = {"id_factory": id_factory} if id_factory else {}
        self.languages = LanguageStore(language_map, strict_rename=strict_rename, **store_kwargs)
        self.topics = TopicStore(topic_map, self.languages, strict_update=strict_topic_update, **store_kwargs)
        self.reporter = StatisticsReporter(self.languages, self.topics)

        logger.info(
            f"TopicTracker ready ({len(language_map)} languages, {len(topic_map)} topics, "
            f"storage={'memory' if data_root is None else data_root})"
        )

    # Languages

    @_operation
    def add_language(self, title: str) -> Result:
        return self.languages.add_language(title)

    @_operation
    def change_language_title(self, old_title: str, new_title: str) -> Result:
        return self.languages.rename_language(old_title, new_title)

    @_operation
    def get_languages(self) -> Result:
        return Success(self.languages.list_all())

    @_operation
    def find_language_by_name(self, title: str) -> Result:
        return self.languages.find_by_title(title)

    @_operation
    def delete_language(self, language_id: str) -> Result:
        """Delete a language together with all of its topics."""
        return self.languages.delete_language(language_id)

    # Topics

    @_operation
    def add_topic(self, payload: TopicPayload, language_title: str) -> Result:
        return self.topics.add_topic(payload, language_title)

    @_operation
    def get_topics_by_language(self, language_title: str) -> Result:
        return self.topics.list_by_language(language_title)

    @_operation
    def update_topic(self, topic_id: str, payload: TopicPayload) -> Result:
        return self.topics.update_topic(topic_id, payload)

    @_operation
    def update_topic_status(self, topic_id: str, closed: bool) -> Result:
        return self.topics.update_topic_status(topic_id, closed)

    @_operation
    def get_topics_by_status(self, closed: bool) -> Result:
        return Success(self.topics.list_by_status(closed))

    @_operation
    def delete_topic(self, topic_id: str) -> Result:
        return self.topics.delete_topic(topic_id)

    @_operation
    def search_topics(self, query: str) -> Result:
        return Success(self.topics.search(query))

    # Statistics

    @_operation
    def get_language_statistics(self) -> Result:
        return Success(language_statistics(self.languages.list_all(), self.topics.list_all()))

    @_operation
    def export_statistics(self, output_dir: str = str(settings.OUTPUT_ROOT)) -> Result:
        """Write the statistics CSV. Returns Success(path)."""
        return Success(self.reporter.generate_statistics_table(output_dir))
