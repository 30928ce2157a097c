"""
Language statistics.

Counts topics per language and exports the statistics table.
"""

import logging
import os
from collections import Counter
from typing import List

import pandas as pd

from topictracker.models.language import Language, LanguageStats
from topictracker.models.topic import Topic
from topictracker.registry.language_store import LanguageStore
from topictracker.registry.topic_store import TopicStore

logger = logging.getLogger(__name__)

STATISTICS_FILENAME = "language_statistics.csv"


def language_statistics(languages: List[Language], topics: List[Topic]) -> List[LanguageStats]:
    """
    Count topics for every language.

    One entry per language, including languages without topics.
    """
    counts = Counter(topic.language_id for topic in topics)
    return [LanguageStats(title=language.title, count=counts.get(language.id, 0)) for language in languages]


class StatisticsReporter:
    """
    Builds the per-language statistics table.
    """

    def __init__(self, languages: LanguageStore, topics: TopicStore):
        self.languages = languages
        self.topics = topics

    def build_table(self) -> pd.DataFrame:
        """
        One row per language with total, closed and active topic counts,
        sorted by total (descending) then language title.
        """
        all_topics = self.topics.list_all()
        closed_counts = Counter(t.language_id for t in all_topics if t.closed)
        total_counts = Counter(t.language_id for t in all_topics)

        rows = []
        for language in self.languages.list_all():
            total = total_counts.get(language.id, 0)
            closed = closed_counts.get(language.id, 0)
            rows.append({
                'Language': language.title,
                'Topics': total,
                'Closed': closed,
                'Active': total - closed
            })

        if not rows:
            logger.warning("No languages found, creating empty statistics table")
            return pd.DataFrame(columns=['Language', 'Topics', 'Closed', 'Active'])

        df = pd.DataFrame(rows)
        df = df.sort_values(['Topics', 'Language'], ascending=[False, True]).reset_index(drop=True)
        return df

    def generate_statistics_table(self, output_dir: str = "output") -> str:
        """
        Write the statistics table as CSV.

        Returns:
            Path to generated CSV file
        """
        df = self.build_table()

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, STATISTICS_FILENAME)
        df.to_csv(output_path, index=False)

        logger.info(f"Statistics table saved to {output_path} ({len(df)} languages)")
        return output_path
