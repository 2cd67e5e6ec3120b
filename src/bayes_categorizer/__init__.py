"""Bayes Categorizer -- Naive Bayes text categorization with Porter stemming."""

__version__ = "0.1.0"

from .classifier import (
    ClassificationResult,
    DocumentClassifier,
    classify,
    score_all,
    score_document,
)
from .config import Settings, load_settings
from .corpus import find_documents, find_files, read_training_root, read_training_roots
from .errors import (
    CategorizerError,
    ConfigurationError,
    InputDataError,
    InsufficientTrainingDataError,
    InvalidStateError,
    Outcome,
)
from .models import CategoryStatistics, ProbabilityModel, WordMap
from .preprocessing import STOP_WORDS, TextPreprocessor, load_stopwords, parse_stopwords
from .stemmer import stem
from .trainer import Trainer, build_probability_model, merge_category_statistics
from .validator import (
    CategoryTally,
    ExpectedResults,
    ValidationReport,
    tally_results,
    validate_results,
)

__all__ = [
    # Data model
    "WordMap",
    "CategoryStatistics",
    "ProbabilityModel",
    # Preprocessing
    "stem",
    "TextPreprocessor",
    "STOP_WORDS",
    "load_stopwords",
    "parse_stopwords",
    # Training
    "Trainer",
    "build_probability_model",
    "merge_category_statistics",
    "find_files",
    "find_documents",
    "read_training_root",
    "read_training_roots",
    # Classification
    "DocumentClassifier",
    "ClassificationResult",
    "classify",
    "score_all",
    "score_document",
    # Validation
    "ExpectedResults",
    "CategoryTally",
    "ValidationReport",
    "tally_results",
    "validate_results",
    # Configuration and errors
    "Settings",
    "load_settings",
    "CategorizerError",
    "ConfigurationError",
    "InputDataError",
    "InsufficientTrainingDataError",
    "InvalidStateError",
    "Outcome",
]
