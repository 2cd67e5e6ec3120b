"""Tests for Naive Bayes scoring and the DocumentClassifier pipeline.

Covers the pure scoring functions over hand-built models and the
train-then-classify pipeline over a small sports/politics corpus
written to a temporary directory.
"""

from __future__ import annotations

import json
import math
from pathlib import Path

import pytest

from bayes_categorizer.classifier import (
    ClassificationResult,
    DocumentClassifier,
    classify,
    score_all,
    score_document,
    _best_category,
)
from bayes_categorizer.errors import (
    InputDataError,
    InsufficientTrainingDataError,
    InvalidStateError,
)
from bayes_categorizer.models import CategoryStatistics, ProbabilityModel, WordMap


# ---------------------------------------------------------------------------
# Fixtures: Hand-built models
# ---------------------------------------------------------------------------

def _model(category: str, prior: float, likelihoods: dict[str, float], unseen: float) -> ProbabilityModel:
    return ProbabilityModel(
        category=category,
        category_log_prior=math.log(prior),
        word_log_likelihoods={w: math.log(p) for w, p in likelihoods.items()},
        unseen_word_log_likelihood=math.log(unseen),
    )


@pytest.fixture
def models() -> dict[str, ProbabilityModel]:
    return {
        "sports": _model("sports", 0.5, {"goal": 0.4, "team": 0.3}, 0.1),
        "politics": _model("politics", 0.5, {"vote": 0.4, "tax": 0.3}, 0.1),
    }


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class TestScoring:
    """Log-space scoring over ProbabilityModels."""

    def test_score_document(self, models):
        doc = WordMap({"goal": 2, "vote": 1})
        expected = math.log(0.5) + 2 * math.log(0.4) + math.log(0.1)
        assert score_document(models["sports"], doc) == pytest.approx(expected)

    def test_empty_document_scores_prior(self, models):
        assert score_document(models["sports"], WordMap()) == pytest.approx(math.log(0.5))

    def test_score_all_sorted(self, models):
        scores = score_all(WordMap({"goal": 1}), models)
        assert list(scores) == ["politics", "sports"]

    def test_classify(self, models):
        assert classify(WordMap({"goal": 3, "team": 1}), models) == "sports"
        assert classify(WordMap({"vote": 1, "tax": 2}), models) == "politics"

    def test_unseen_words_only(self, models):
        # identical unseen likelihoods and priors tie, so the first label wins
        assert classify(WordMap({"weather": 4}), models) == "politics"

    def test_tie_goes_to_first_label(self):
        tied = {
            "zebra": _model("zebra", 0.5, {"x": 0.5}, 0.1),
            "alpha": _model("alpha", 0.5, {"x": 0.5}, 0.1),
        }
        assert classify(WordMap({"x": 2}), tied) == "alpha"

    def test_prior_breaks_evidence_free_tie(self):
        skewed = {
            "rare": _model("rare", 0.2, {}, 0.1),
            "common": _model("common", 0.8, {}, 0.1),
        }
        assert classify(WordMap(), skewed) == "common"

    def test_no_models(self):
        with pytest.raises(InvalidStateError):
            classify(WordMap({"goal": 1}), {})

    def test_best_of_no_scores_rejected(self):
        with pytest.raises(InvalidStateError):
            _best_category({})

    def test_deterministic(self, models):
        doc = WordMap({"goal": 1, "vote": 1, "team": 2})
        assert classify(doc, models) == classify(doc, models)


class TestClassificationResult:
    def test_margin(self):
        result = ClassificationResult(category="a", scores={"a": -1.0, "b": -3.0, "c": -2.0})
        assert result.margin == pytest.approx(1.0)

    def test_margin_single_category(self):
        assert ClassificationResult(category="a", scores={"a": -1.0}).margin == 0.0

    def test_to_dict_serializable(self):
        result = ClassificationResult(category="a", scores={"a": -1.0, "b": -2.5}, path="x.txt")
        data = json.loads(json.dumps(result.to_dict()))
        assert data["category"] == "a"
        assert data["path"] == "x.txt"
        assert data["margin"] == 1.5


# ---------------------------------------------------------------------------
# DocumentClassifier
# ---------------------------------------------------------------------------

class TestDocumentClassifier:
    """End-to-end train and classify over files."""

    @pytest.fixture
    def trained(self, training_dir: Path) -> DocumentClassifier:
        classifier = DocumentClassifier()
        outcome = classifier.train([training_dir])
        assert outcome.ok, outcome.error
        return classifier

    def test_train_outcome(self, training_dir: Path):
        classifier = DocumentClassifier()
        outcome = classifier.train([training_dir])
        assert outcome.ok
        assert sorted(outcome.unwrap()) == ["politics", "sports"]
        assert classifier.is_trained
        assert classifier.categories == ["politics", "sports"]

    def test_classify_text(self, trained: DocumentClassifier):
        assert trained.classify_text("The team scored goals and the players won").category == "sports"
        assert trained.classify_text("Parliament voted on the government budget").category == "politics"

    def test_classify_file(self, trained: DocumentClassifier, inbox_dir: Path):
        result = trained.classify_file(inbox_dir / "match.txt")
        assert result.category == "sports"
        assert result.path == str(inbox_dir / "match.txt")
        assert set(result.scores) == {"politics", "sports"}
        assert result.margin > 0

    def test_classify_paths(self, trained: DocumentClassifier, inbox_dir: Path):
        outcome = trained.classify_paths([inbox_dir])
        assert outcome.ok
        results = outcome.unwrap()
        assert list(results) == sorted(results)
        by_name = {Path(p).name: r.category for p, r in results.items()}
        assert by_name == {"match.txt": "sports", "vote.txt": "politics"}

    def test_classify_paths_single_file(self, trained: DocumentClassifier, inbox_dir: Path):
        results = trained.classify_paths([inbox_dir / "vote.txt"]).unwrap()
        assert [r.category for r in results.values()] == ["politics"]

    def test_empty_document_ties_to_first_label(self, trained: DocumentClassifier):
        # three documents per category gives equal priors
        assert trained.classify_text("").category == "politics"

    def test_classification_is_deterministic(self, trained: DocumentClassifier, inbox_dir: Path):
        first = trained.classify_paths([inbox_dir]).unwrap()
        second = trained.classify_paths([inbox_dir]).unwrap()
        assert {p: r.scores for p, r in first.items()} == {p: r.scores for p, r in second.items()}

    def test_empty_target(self, trained: DocumentClassifier, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        outcome = trained.classify_paths([empty])
        assert not outcome.ok
        assert isinstance(outcome.error, InputDataError)
        with pytest.raises(InputDataError):
            outcome.unwrap()

    def test_untrained_classify_text(self):
        with pytest.raises(InvalidStateError):
            DocumentClassifier().classify_text("goal")

    def test_untrained_classify_paths(self, inbox_dir: Path):
        outcome = DocumentClassifier().classify_paths([inbox_dir])
        assert not outcome.ok
        assert isinstance(outcome.error, InvalidStateError)

    def test_single_category_training_fails(self, tmp_path: Path, category_tree):
        root = category_tree(tmp_path / "one", {"sports": {"a.txt": "goal team"}})
        classifier = DocumentClassifier()
        outcome = classifier.train([root])
        assert not outcome.ok
        assert isinstance(outcome.error, InsufficientTrainingDataError)
        assert not classifier.is_trained

    def test_failed_retrain_leaves_classifier_untrained(
        self, trained: DocumentClassifier, tmp_path: Path
    ):
        outcome = trained.train([tmp_path / "missing"])
        assert not outcome.ok
        assert isinstance(outcome.error, InputDataError)
        assert not trained.is_trained

    def test_train_from_statistics(self):
        sports = CategoryStatistics("sports")
        sports.add_document(WordMap.from_words(["goal", "team"]))
        politics = CategoryStatistics("politics")
        politics.add_document(WordMap.from_words(["vote", "tax"]))
        classifier = DocumentClassifier(stopwords=set())
        assert classifier.train_from_statistics({"sports": sports, "politics": politics}).ok
        assert classifier.classify_text("goals").category == "sports"

    def test_smoothing_changes_scores(self, training_dir: Path, inbox_dir: Path):
        laplace = DocumentClassifier()
        light = DocumentClassifier(smoothing=0.1)
        laplace.train([training_dir])
        light.train([training_dir])
        a = laplace.classify_file(inbox_dir / "match.txt")
        b = light.classify_file(inbox_dir / "match.txt")
        assert a.category == b.category == "sports"
        assert a.scores != b.scores


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

class TestReferenceScenarios:
    """Small corpora with a known answer."""

    def test_game_and_score_document_is_sports(self, tmp_path: Path, category_tree):
        root = category_tree(tmp_path / "training", {
            "sports": {
                "one.txt": "game score game score game",
                "two.txt": "score game score",
                "three.txt": "game game score score",
            },
            "politics": {
                "one.txt": "election vote election vote",
                "two.txt": "vote election vote",
                "three.txt": "election election vote",
            },
        })
        classifier = DocumentClassifier(stopwords={"the"})
        assert classifier.train([root]).ok

        result = classifier.classify_text("score game score game game election")
        assert result.category == "sports"

    def test_identical_categories_tie_to_first_label(self):
        statistics = {}
        for category in ("zeta", "alpha"):
            stats = CategoryStatistics(category)
            stats.add_document(WordMap.from_words(["rain", "sun"]))
            statistics[category] = stats
        classifier = DocumentClassifier(stopwords=set())
        assert classifier.train_from_statistics(statistics).ok

        assert classifier.classify_word_map(WordMap()).category == "alpha"
        assert classifier.classify_text("snow hail").category == "alpha"
