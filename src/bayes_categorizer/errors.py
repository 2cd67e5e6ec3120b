"""Error kinds and tagged outcomes for the categorizer.

Every failure the categorizer can report is a ``CategorizerError``
subclass. None of them are transient: they describe bad configuration,
bad data, or misuse of an untrained classifier, so nothing retries.

The lower layers raise. The high-level entry points
(``DocumentClassifier.train``, ``DocumentClassifier.classify_paths`` and
``validate_results``) catch these and hand back an ``Outcome`` so callers
can branch on success without a ``try`` block::

    outcome = classifier.train(["corpus/"])
    if not outcome.ok:
        print(outcome.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CategorizerError(Exception):
    """Base class for all categorizer failures."""


class ConfigurationError(CategorizerError):
    """Stopword file missing or empty, or an invalid setting."""


class InsufficientTrainingDataError(CategorizerError):
    """Fewer than two categories were found in the training data."""


class InvalidStateError(CategorizerError):
    """Classification was requested from a classifier that is not trained."""


class InputDataError(CategorizerError):
    """A path to read has no documents, or does not exist."""


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged result: either a value or the error that prevented it."""

    value: Optional[T] = None
    error: Optional[CategorizerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CategorizerError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
