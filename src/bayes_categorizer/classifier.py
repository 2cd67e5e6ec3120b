"""Naive Bayes document classification.

Scores a document's bag of words against the probability model of every
trained category and picks the highest-scoring one:

    score(c) = ln P(c) + sum over words w of count(w) * ln P(w | c)

The evidence term ln P(words) is left out. It is identical for every
category, so it cannot change which one scores highest.

Two layers are provided:

- ``score_document`` / ``classify``: pure functions over already-built
  ``ProbabilityModel`` objects and ``WordMap`` documents.
- ``DocumentClassifier``: a train-then-classify pipeline over files on
  disk that reports failures as ``Outcome`` values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from .corpus import find_documents, read_training_roots
from .errors import CategorizerError, InvalidStateError, Outcome
from .models import CategoryStatistics, ProbabilityModel, WordMap
from .preprocessing import TextPreprocessor
from .trainer import DEFAULT_SMOOTHING, Trainer


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_document(model: ProbabilityModel, document: WordMap) -> float:
    """Unnormalized log posterior of ``document`` under ``model``."""
    score = model.category_log_prior
    for word, count in document.items():
        score += count * model.log_likelihood(word)
    return score


def score_all(
    document: WordMap,
    models: Mapping[str, ProbabilityModel],
) -> dict[str, float]:
    """Score a document against every model, in ascending label order."""
    return {
        category: score_document(models[category], document)
        for category in sorted(models)
    }


def _best_category(scores: Mapping[str, float]) -> str:
    if not scores:
        raise InvalidStateError("No category scores to choose from")
    # Labels are visited in ascending order and only a strictly higher
    # score replaces the leader, so ties go to the smallest label.
    labels = sorted(scores)
    best_category = labels[0]
    for category in labels[1:]:
        if scores[category] > scores[best_category]:
            best_category = category
    return best_category


def classify(document: WordMap, models: Mapping[str, ProbabilityModel]) -> str:
    """Return the label of the highest-scoring category.

    Ties are broken in favour of the alphabetically first label.

    Raises:
        InvalidStateError: If no models are supplied.
    """
    if not models:
        raise InvalidStateError("Attempt to classify a document without trained models")
    return _best_category(score_all(document, models))


# ---------------------------------------------------------------------------
# Classification Pipeline (High-Level API)
# ---------------------------------------------------------------------------

@dataclass
class ClassificationResult:
    """Result of classifying a single document."""

    category: str
    scores: dict[str, float] = field(default_factory=dict)
    path: Optional[str] = None

    @property
    def margin(self) -> float:
        """Log-score lead of the winner over the runner-up (0 if alone)."""
        others = [s for c, s in self.scores.items() if c != self.category]
        if not others:
            return 0.0
        return self.scores[self.category] - max(others)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "category": self.category,
            "margin": round(self.margin, 4),
            "scores": {k: round(v, 4) for k, v in self.scores.items()},
        }


class DocumentClassifier:
    """Train on category directory trees, then classify documents.

    Example::

        classifier = DocumentClassifier(stopwords=load_stopwords("stopwords.txt"))
        outcome = classifier.train(["training/"])
        if outcome.ok:
            results = classifier.classify_paths(["inbox/"]).unwrap()
            for path, result in results.items():
                print(f"{path}: {result.category}")

    A failed ``train`` leaves the classifier untrained, never partially
    trained, and every classification call on an untrained classifier is
    rejected with ``InvalidStateError``.

    Args:
        stopwords: Words excluded before stemming (defaults to the
            built-in list).
        smoothing: Additive smoothing constant ``k``.
        preprocessor: Custom TextPreprocessor (overrides ``stopwords``).
    """

    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        smoothing: float = DEFAULT_SMOOTHING,
        preprocessor: Optional[TextPreprocessor] = None,
    ) -> None:
        self._preprocessor = preprocessor or TextPreprocessor(stopwords=stopwords)
        self._trainer = Trainer(smoothing=smoothing)
        self._models: dict[str, ProbabilityModel] = {}

    @property
    def is_trained(self) -> bool:
        """Whether the classifier has been trained."""
        return bool(self._models)

    @property
    def categories(self) -> list[str]:
        """Known category labels, sorted."""
        return list(self._models)

    @property
    def models(self) -> dict[str, ProbabilityModel]:
        return dict(self._models)

    @property
    def preprocessor(self) -> TextPreprocessor:
        return self._preprocessor

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, training_roots: Iterable[str | Path]) -> Outcome[dict[str, ProbabilityModel]]:
        """Train from one or more category directory trees.

        Args:
            training_roots: Roots laid out as ``root/<category>/<document>``.

        Returns:
            Outcome holding the trained models, or the error that stopped
            training (the classifier is then left untrained).
        """
        self._models = {}
        try:
            roots = list(training_roots)
            logger.info("Training from {}", ", ".join(str(r) for r in roots))
            statistics = read_training_roots(roots, self._preprocessor)
        except CategorizerError as exc:
            logger.error("Training failed: {}", exc)
            return Outcome.failure(exc)
        return self.train_from_statistics(statistics)

    def train_from_statistics(
        self,
        statistics: Mapping[str, CategoryStatistics],
    ) -> Outcome[dict[str, ProbabilityModel]]:
        """Train from statistics that were already gathered."""
        self._models = {}
        try:
            models = self._trainer.train(statistics)
        except CategorizerError as exc:
            logger.error("Training failed: {}", exc)
            return Outcome.failure(exc)
        self._models = models
        return Outcome.success(dict(models))

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _require_trained(self) -> None:
        if not self._models:
            raise InvalidStateError(
                "Attempt to classify documents with a classifier that is not trained"
            )

    def classify_word_map(self, document: WordMap, path: Optional[str] = None) -> ClassificationResult:
        """Classify an already-built word map.

        Raises:
            InvalidStateError: If the classifier has not been trained.
        """
        self._require_trained()
        scores = score_all(document, self._models)
        category = _best_category(scores)
        if path is not None:
            logger.debug("File to classify: {}", path)
        for label, score in scores.items():
            logger.debug("Category: {} log probability: {:.6f}", label, score)
        return ClassificationResult(category=category, scores=scores, path=path)

    def classify_text(self, text: str) -> ClassificationResult:
        """Classify a single document's raw text.

        Raises:
            InvalidStateError: If the classifier has not been trained.
        """
        self._require_trained()
        return self.classify_word_map(self._preprocessor.word_map(text))

    def classify_file(self, path: str | Path) -> ClassificationResult:
        """Classify one document file.

        Raises:
            InvalidStateError: If the classifier has not been trained.
        """
        self._require_trained()
        return self.classify_word_map(self._preprocessor.read_document(path), path=str(path))

    def classify_paths(
        self,
        targets: Iterable[str | Path],
    ) -> Outcome[dict[str, ClassificationResult]]:
        """Classify every file in a set of files or directory trees.

        Args:
            targets: Files or directories (searched recursively).

        Returns:
            Outcome holding file path to result, sorted by path, or the
            first error met (untrained classifier, a target without
            documents, a missing target).
        """
        results: dict[str, ClassificationResult] = {}
        try:
            self._require_trained()
            for target in targets:
                for document in find_documents(target):
                    result = self.classify_file(document)
                    results[str(document)] = result
        except CategorizerError as exc:
            logger.error("Classification failed: {}", exc)
            return Outcome.failure(exc)
        return Outcome.success({path: results[path] for path in sorted(results)})
