"""Locate documents on disk and gather training statistics.

Training data is laid out as one directory tree per root::

    root/
        sports/
            match-report.txt
            league-table.txt
        politics/
            election.txt

Every file directly inside a category directory is a training document
for that category, and the directory's name is the category label.
Files at any other depth are ignored. Hidden files and directories
(names starting with ``.``) are skipped everywhere.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from loguru import logger

from .errors import InputDataError
from .models import CategoryStatistics
from .preprocessing import TextPreprocessor
from .trainer import merge_category_statistics

# Category documents sit exactly two levels below a training root
_CATEGORY_DOCUMENT_DEPTH = 2


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def find_files(
    root: str | Path,
    min_depth: int = 0,
    max_depth: Optional[int] = None,
) -> list[Path]:
    """List the files under ``root``, sorted by path.

    Depth counts from the root: a file named directly as ``root`` is at
    depth 0, files inside the root directory are at depth 1, and so on.

    Args:
        root: A file or directory.
        min_depth: Ignore files shallower than this.
        max_depth: Ignore files deeper than this (``None`` for no limit).

    Returns:
        Matching file paths in sorted order.

    Raises:
        InputDataError: If ``root`` does not exist.
    """
    root = Path(root)
    if not root.exists():
        raise InputDataError(f"Directory or file {root} does not exist")
    if max_depth is not None and (max_depth < 0 or min_depth > max_depth):
        logger.warning("No files searched in {}: depth range {}-{} is empty", root, min_depth, max_depth)
        return []

    if root.is_file():
        return [root] if min_depth <= 0 else []

    files: list[Path] = []
    _walk(root, 1, min_depth, max_depth, files)
    return sorted(files)


def _walk(
    directory: Path,
    depth: int,
    min_depth: int,
    max_depth: Optional[int],
    files: list[Path],
) -> None:
    entries = sorted(entry for entry in directory.iterdir() if not _is_hidden(entry))
    if not entries:
        logger.warning("Directory {} skipped, empty", directory)
        return

    for entry in entries:
        if entry.is_dir():
            if max_depth is None or depth < max_depth:
                _walk(entry, depth + 1, min_depth, max_depth, files)
        elif depth >= min_depth:
            files.append(entry)


def category_of(document: Path) -> str:
    """Category label of a training document: its parent directory name."""
    category = document.parent.name
    if not category:
        raise InputDataError(f"Could not extract a category from file path {document}")
    return category


def read_training_root(
    root: str | Path,
    preprocessor: TextPreprocessor,
) -> dict[str, CategoryStatistics]:
    """Gather per-category statistics from one training root.

    Args:
        root: Training root directory.
        preprocessor: Converts each document into a word map.

    Returns:
        Category label to statistics, sorted by label. Empty if the root
        holds no category documents.
    """
    statistics: dict[str, CategoryStatistics] = {}
    for document in find_files(root, _CATEGORY_DOCUMENT_DEPTH, _CATEGORY_DOCUMENT_DEPTH):
        category = category_of(document)
        stats = statistics.get(category)
        if stats is None:
            stats = statistics[category] = CategoryStatistics(category=category)
            logger.debug("Reading category {} from {}", category, root)
        stats.add_document(preprocessor.read_document(document))

    for stats in statistics.values():
        logger.debug("Statistics {}: {}", stats.to_dict(), stats.word_map.to_dict())
    return {category: statistics[category] for category in sorted(statistics)}


def read_training_roots(
    roots: Iterable[str | Path],
    preprocessor: TextPreprocessor,
) -> dict[str, CategoryStatistics]:
    """Gather and merge statistics from several training roots."""
    return merge_category_statistics(
        read_training_root(root, preprocessor) for root in roots
    )


def find_documents(target: str | Path) -> list[Path]:
    """Every file to classify under ``target`` (a file or directory tree).

    Raises:
        InputDataError: If ``target`` is missing or contains no files.
    """
    documents = find_files(target)
    if not documents:
        raise InputDataError(f"Directory or file to classify {target} contains no files")
    return documents
