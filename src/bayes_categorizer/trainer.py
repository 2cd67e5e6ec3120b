"""Build per-category probability models from training statistics.

For a category with ``n`` documents out of ``D`` in the corpus, a summed
word map of ``V`` distinct words and ``N`` total words, and smoothing
constant ``k``::

    category_log_prior         = ln(n / D)
    adjusted_word_count        = N + V * k
    word_log_likelihood[w]     = ln((count(w) + k) / adjusted_word_count)
    unseen_word_log_likelihood = ln(k / adjusted_word_count)

Working in log space turns the Naive Bayes product of many small
probabilities into a sum and avoids floating-point underflow. ``k = 1``
(Laplace smoothing) works well for medium-sized documents and larger.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from loguru import logger

from .errors import ConfigurationError, InsufficientTrainingDataError
from .models import CategoryStatistics, ProbabilityModel

DEFAULT_SMOOTHING = 1.0

MIN_CATEGORIES = 2


def validate_smoothing(smoothing: float) -> float:
    """Return ``smoothing`` as a float, rejecting non-positive or non-finite values."""
    value = float(smoothing)
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"Smoothing constant must be positive, got {smoothing}")
    return value


def merge_category_statistics(
    parts: Iterable[Mapping[str, CategoryStatistics]],
) -> dict[str, CategoryStatistics]:
    """Combine statistics gathered from several training roots.

    Categories with the same label are merged. The inputs are left
    untouched and the result does not depend on the order of ``parts``.

    Returns:
        Category label to merged statistics, sorted by label.
    """
    merged: dict[str, CategoryStatistics] = {}
    for part in parts:
        for category, statistics in part.items():
            target = merged.setdefault(category, CategoryStatistics(category=category))
            target.merge_with(statistics)
    return {category: merged[category] for category in sorted(merged)}


def build_probability_model(
    statistics: CategoryStatistics,
    total_documents: int,
    category_count: int,
    smoothing: float = DEFAULT_SMOOTHING,
) -> ProbabilityModel:
    """Derive the log-probability model for one category.

    Args:
        statistics: The category's aggregated statistics.
        total_documents: Documents across all categories.
        category_count: Number of categories being trained.
        smoothing: Additive smoothing constant ``k``.

    Returns:
        A fully-built, immutable ProbabilityModel.

    Raises:
        InsufficientTrainingDataError: Fewer than two categories, or the
            category has no documents or no words.
        ConfigurationError: If ``smoothing`` is not positive.
        ValueError: If ``total_documents`` is smaller than the category's
            own document count.
    """
    k = validate_smoothing(smoothing)
    if category_count < MIN_CATEGORIES:
        raise InsufficientTrainingDataError(
            f"Classification needs at least {MIN_CATEGORIES} categories, got {category_count}"
        )
    if statistics.is_empty:
        raise InsufficientTrainingDataError(
            f"Category {statistics.category!r} has no training documents"
        )
    if statistics.total_word_count == 0:
        raise InsufficientTrainingDataError(
            f"Category {statistics.category!r} has no words left after stopword filtering"
        )
    if total_documents < statistics.document_count:
        raise ValueError(
            f"total_documents ({total_documents}) is smaller than the "
            f"{statistics.document_count} documents of {statistics.category!r}"
        )

    adjusted_word_count = statistics.total_word_count + statistics.unique_word_count * k
    word_log_likelihoods = {
        word: math.log((count + k) / adjusted_word_count)
        for word, count in statistics.word_map.items()
    }

    return ProbabilityModel(
        category=statistics.category,
        category_log_prior=math.log(statistics.document_count / total_documents),
        word_log_likelihoods=word_log_likelihoods,
        unseen_word_log_likelihood=math.log(k / adjusted_word_count),
    )


class Trainer:
    """Turn per-category statistics into one ProbabilityModel per category.

    Categories without documents are ignored. At least two must remain.

    Example::

        trainer = Trainer(smoothing=1.0)
        models = trainer.train({"sports": sports_stats, "politics": politics_stats})

    Args:
        smoothing: Additive smoothing constant ``k``.
    """

    def __init__(self, smoothing: float = DEFAULT_SMOOTHING) -> None:
        self.smoothing = validate_smoothing(smoothing)

    def train(
        self,
        statistics: Mapping[str, CategoryStatistics],
    ) -> dict[str, ProbabilityModel]:
        """Build models for every non-empty category.

        Args:
            statistics: Category label to aggregated statistics.

        Returns:
            Category label to model, sorted by label.

        Raises:
            InsufficientTrainingDataError: If fewer than two non-empty
                categories are supplied.
        """
        usable: dict[str, CategoryStatistics] = {}
        for category in sorted(statistics):
            stats = statistics[category]
            if stats.is_empty:
                logger.warning("Category {} has no training documents, skipped", category)
                continue
            usable[category] = stats

        if not usable:
            raise InsufficientTrainingDataError("No training data found")
        if len(usable) < MIN_CATEGORIES:
            only = next(iter(usable))
            raise InsufficientTrainingDataError(
                f"Training data found only for category {only!r}; "
                f"at least {MIN_CATEGORIES} categories are needed"
            )

        total_documents = sum(stats.document_count for stats in usable.values())
        models = {
            category: build_probability_model(
                stats,
                total_documents=total_documents,
                category_count=len(usable),
                smoothing=self.smoothing,
            )
            for category, stats in usable.items()
        }

        # Only freeze once every model has been built
        for stats in usable.values():
            stats.freeze()

        for category, model in models.items():
            logger.debug("Model {}: {}", category, model.to_dict())
        logger.info(
            "Trained {} categories from {} documents", len(models), total_documents
        )
        return models
