"""
TopicTracker - learning topics per programming language.
"""

from topictracker.models.errors import ErrorKind, StoreError
from topictracker.models.language import Language, LanguageStats
from topictracker.models.topic import Topic, TopicPayload
from topictracker.tracker import TopicTracker
from topictracker.utils.result import Failure, Result, Success

__version__ = "1.0.0"
