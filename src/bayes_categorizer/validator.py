"""Measure classifier accuracy against known-correct categories.

The classifier's results listing has one ``<file-path>: <category>`` line
per document. The expected categories come from directory trees in the
training layout (``root/<category>/<document>``), so a hand-sorted copy of
the classified documents serves as the answer key.

Per category the validator counts:

- ``correct``: documents of the category assigned to it
- ``misclassified_to_this``: documents of another category assigned here
- ``misclassified_to_other``: documents of the category assigned elsewhere

and reports precision, recall, and the balanced F-measure ``2PR / (P+R)``.
A document assigned to a category the answer key does not know is
misclassified, and counts against its true category only.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from .corpus import category_of, find_files
from .errors import CategorizerError, InputDataError, Outcome

_RESULT_SEPARATOR = ": "


def _normalize_path(path: str | Path) -> str:
    return os.path.normpath(str(path))


# ---------------------------------------------------------------------------
# Expected results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExpectedResults:
    """Known-correct category for each document.

    Attributes:
        categories_by_path: Normalized file path to expected category.
        valid_categories: Every category that appears in the answer key.
    """

    categories_by_path: Mapping[str, str] = field(default_factory=dict)
    valid_categories: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        categories = MappingProxyType(dict(self.categories_by_path))
        object.__setattr__(self, "categories_by_path", categories)
        object.__setattr__(self, "valid_categories", frozenset(categories.values()))

    @classmethod
    def from_directories(cls, roots: Iterable[str | Path]) -> "ExpectedResults":
        """Build the answer key from category directory trees.

        Raises:
            InputDataError: If no roots are given, a root is missing, or
                the trees contain no category documents.
        """
        roots = list(roots)
        if not roots:
            raise InputDataError("Expected results directory list is empty")

        categories_by_path: dict[str, str] = {}
        for root in roots:
            for document in find_files(root, 2, 2):
                categories_by_path[_normalize_path(document)] = category_of(document)

        if not categories_by_path:
            raise InputDataError("Expected results directories contained no files")
        return cls(categories_by_path)

    def category_for(self, path: str | Path) -> str | None:
        return self.categories_by_path.get(_normalize_path(path))

    def is_valid_category(self, category: str) -> bool:
        return category in self.valid_categories


# ---------------------------------------------------------------------------
# Per-category tallies
# ---------------------------------------------------------------------------

@dataclass
class CategoryTally:
    """Classification counts and derived scores for one category."""

    correct: int = 0
    misclassified_to_this: int = 0
    misclassified_to_other: int = 0

    @property
    def precision(self) -> float:
        """Share of documents assigned here that belong here."""
        assigned = self.correct + self.misclassified_to_this
        return self.correct / assigned if assigned > 0 else 0.0

    @property
    def recall(self) -> float:
        """Share of this category's documents that were assigned here."""
        actual = self.correct + self.misclassified_to_other
        return self.correct / actual if actual > 0 else 0.0

    @property
    def f_measure(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "misclassified_to_this": self.misclassified_to_this,
            "misclassified_to_other": self.misclassified_to_other,
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f_measure": round(self.f_measure, 4),
        }


@dataclass
class ValidationReport:
    """Validator output for a whole results listing.

    Attributes:
        per_category: Category label to tally, sorted by label.
        skipped_lines: Result lines that were malformed or referred to a
            document missing from the expected results.
    """

    per_category: dict[str, CategoryTally] = field(default_factory=dict)
    skipped_lines: int = 0

    @property
    def document_count(self) -> int:
        return sum(t.correct + t.misclassified_to_other for t in self.per_category.values())

    @property
    def accuracy(self) -> float:
        total = self.document_count
        correct = sum(t.correct for t in self.per_category.values())
        return correct / total if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "document_count": self.document_count,
            "skipped_lines": self.skipped_lines,
            "per_category": {c: t.to_dict() for c, t in self.per_category.items()},
        }

    def summary(self) -> str:
        """Human-readable summary of the tallies."""
        lines = [
            f"Accuracy: {self.accuracy:.2%} ({self.document_count} documents)",
            "",
            f"{'Category':<20} {'Correct':>8} {'To this':>8} {'To other':>9} "
            f"{'Precision':>10} {'Recall':>10} {'F':>10}",
            "-" * 79,
        ]
        for category, t in self.per_category.items():
            lines.append(
                f"{category:<20} {t.correct:>8} {t.misclassified_to_this:>8} "
                f"{t.misclassified_to_other:>9} {t.precision:>10.4f} "
                f"{t.recall:>10.4f} {t.f_measure:>10.4f}"
            )
        return "\n".join(lines)


def parse_result_line(line: str) -> tuple[str, str] | None:
    """Split a ``<file-path>: <category>`` line at its last separator.

    Paths may themselves contain ``": "``; categories cannot. Returns
    ``None`` when either side is empty or the separator is missing.
    """
    split_at = line.rfind(_RESULT_SEPARATOR)
    if split_at <= 0:
        return None
    path = line[:split_at]
    category = line[split_at + len(_RESULT_SEPARATOR):].strip()
    if not category:
        return None
    return path, category


def tally_results(lines: Iterable[str], expected: ExpectedResults) -> ValidationReport:
    """Compare result lines with the expected categories.

    Raises:
        InputDataError: If no line refers to a document in the expected
            results.
    """
    tallies: dict[str, CategoryTally] = {}
    skipped = 0
    for number, raw_line in enumerate(lines, 1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue
        parsed = parse_result_line(line)
        if parsed is None:
            logger.warning("Results line {} ignored, missing file or category", number)
            skipped += 1
            continue

        path, assigned = parsed
        actual = expected.category_for(path)
        if actual is None:
            logger.warning("Expected results not found for file {}", path)
            skipped += 1
            continue

        actual_tally = tallies.setdefault(actual, CategoryTally())
        if assigned == actual:
            actual_tally.correct += 1
        else:
            actual_tally.misclassified_to_other += 1
            if expected.is_valid_category(assigned):
                tallies.setdefault(assigned, CategoryTally()).misclassified_to_this += 1

    if not tallies:
        raise InputDataError("Results contained no files in the expected category directories")

    return ValidationReport(
        per_category={c: tallies[c] for c in sorted(tallies)},
        skipped_lines=skipped,
    )


def validate_results(
    results_file: str | Path,
    expected_dirs: Iterable[str | Path],
) -> Outcome[ValidationReport]:
    """Validate a results listing file against expected category trees.

    Returns:
        Outcome holding the ValidationReport, or the error met.
    """
    try:
        expected = ExpectedResults.from_directories(expected_dirs)
        path = Path(results_file)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputDataError(f"Results file {path} could not be opened: {exc}") from exc
        report = tally_results(text.splitlines(), expected)
    except CategorizerError as exc:
        logger.error("Validation failed: {}", exc)
        return Outcome.failure(exc)
    return Outcome.success(report)
