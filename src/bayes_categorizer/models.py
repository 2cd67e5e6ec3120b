"""Data models for bag-of-words category statistics."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from .errors import InvalidStateError


class WordMap:
    """Word to occurrence count for one document (or one category).

    Wraps a plain dict rather than subclassing it so the only ways to
    change the counts are ``add_word`` and ``merge``. Iteration is in
    sorted word order.

    Example::

        doc = WordMap.from_words(["game", "score", "game"])
        doc["game"]              # 2
        doc.total_word_count()   # 3
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Optional[Mapping[str, int]] = None) -> None:
        self._counts: dict[str, int] = {}
        if counts:
            for word, count in counts.items():
                self._add_count(word, count)

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "WordMap":
        word_map = cls()
        for word in words:
            word_map.add_word(word)
        return word_map

    def _add_count(self, word: str, count: int) -> None:
        if count < 1:
            raise ValueError(f"Word count must be at least 1, got {count} for {word!r}")
        self._counts[word] = self._counts.get(word, 0) + count

    def add_word(self, word: str) -> None:
        """Count one more occurrence of ``word``."""
        self._add_count(word, 1)

    def merge(self, other: "WordMap") -> "WordMap":
        """Add every count from ``other`` into this map and return self."""
        for word, count in other.items():
            self._add_count(word, count)
        return self

    def total_word_count(self) -> int:
        return sum(self._counts.values())

    def copy(self) -> "WordMap":
        return WordMap(self._counts)

    def items(self) -> list[tuple[str, int]]:
        return sorted(self._counts.items())

    def get(self, word: str, default: int = 0) -> int:
        return self._counts.get(word, default)

    def to_dict(self) -> dict[str, int]:
        return dict(self.items())

    def __getitem__(self, word: str) -> int:
        return self._counts[word]

    def __contains__(self, word: object) -> bool:
        return word in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._counts))

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordMap):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"WordMap({self.to_dict()!r})"


@dataclass
class CategoryStatistics:
    """Word statistics summed over every training document of a category.

    ``unique_word_count`` and ``total_word_count`` are derived from the
    summed word map, so they always agree with it.

    Attributes:
        category: Category label (the training subdirectory name).
        word_map: Counts summed across all documents.
        document_count: Number of documents added.
    """

    category: str
    word_map: WordMap = field(default_factory=WordMap)
    document_count: int = 0
    _frozen: bool = field(default=False, repr=False, compare=False)

    @property
    def unique_word_count(self) -> int:
        return len(self.word_map)

    @property
    def total_word_count(self) -> int:
        return self.word_map.total_word_count()

    @property
    def is_empty(self) -> bool:
        return self.document_count == 0

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InvalidStateError(
                f"Statistics for category {self.category!r} are frozen; "
                "a model has already been built from them"
            )

    def add_document(self, word_map: WordMap) -> None:
        """Fold one document's word counts into the category."""
        self._check_mutable()
        self.word_map.merge(word_map)
        self.document_count += 1

    def merge_with(self, other: "CategoryStatistics") -> None:
        """Combine partial statistics for the same category.

        Raises:
            ValueError: If ``other`` belongs to a different category.
        """
        self._check_mutable()
        if other.category != self.category:
            raise ValueError(
                f"Cannot merge statistics for {other.category!r} into {self.category!r}"
            )
        self.word_map.merge(other.word_map)
        self.document_count += other.document_count

    def freeze(self) -> None:
        """Reject further mutation."""
        self._frozen = True

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "document_count": self.document_count,
            "unique_word_count": self.unique_word_count,
            "total_word_count": self.total_word_count,
        }


@dataclass(frozen=True)
class ProbabilityModel:
    """Log-probabilities for one category, derived from its statistics.

    Attributes:
        category: Category label.
        category_log_prior: ln P(category).
        word_log_likelihoods: ln P(word | category) for every training word.
        unseen_word_log_likelihood: ln P(word | category) for any other word.
    """

    category: str
    category_log_prior: float
    word_log_likelihoods: Mapping[str, float]
    unseen_word_log_likelihood: float

    def __post_init__(self) -> None:
        # Read-only view so the model cannot be altered after construction
        object.__setattr__(
            self,
            "word_log_likelihoods",
            MappingProxyType(dict(self.word_log_likelihoods)),
        )

    def log_likelihood(self, word: str) -> float:
        return self.word_log_likelihoods.get(word, self.unseen_word_log_likelihood)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "category_log_prior": self.category_log_prior,
            "unseen_word_log_likelihood": self.unseen_word_log_likelihood,
            "word_log_likelihoods": dict(sorted(self.word_log_likelihoods.items())),
        }
