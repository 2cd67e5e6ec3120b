"""Text preprocessing: tokenization, stopword filtering and stemming.

Turns raw document text into a ``WordMap``:

1. Extract ASCII letter runs (inner dashes allowed) and lowercase them
2. Drop stopwords
3. Stem every remaining token

Stopword lists are read from plain-text files where words are separated
by commas and/or whitespace across any number of lines.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from loguru import logger

from .errors import ConfigurationError, InputDataError
from .models import WordMap
from .stemmer import stem

# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------

# Used when no stopword file is supplied
STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "shall", "can", "must",
    "not", "no", "nor", "so", "if", "then", "than", "that", "this",
    "these", "those", "it", "its", "he", "she", "they", "them", "their",
    "his", "her", "our", "your", "we", "you", "who", "whom", "which",
    "what", "where", "when", "how", "all", "each", "every", "both",
    "i", "me", "my", "us", "him", "there", "here", "into", "about",
})

_STOPWORD_SEPARATOR_RE = re.compile(r"[,\s]+")


def parse_stopwords(text: str) -> frozenset[str]:
    """Split stopword file content on commas and whitespace."""
    return frozenset(
        word.lower() for word in _STOPWORD_SEPARATOR_RE.split(text) if word
    )


def load_stopwords(path: str | Path) -> frozenset[str]:
    """Load a stopword list from a file.

    Args:
        path: Stopword file.

    Returns:
        The set of lowercase stopwords.

    Raises:
        ConfigurationError: If the file cannot be read or holds no words.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ConfigurationError(f"Stopword file {path} could not be opened: {exc}") from exc

    words = parse_stopwords(text)
    if not words:
        raise ConfigurationError(f"Stopword file {path} has no data")

    logger.debug("Loaded {} stopwords from {}", len(words), path)
    return words


# ---------------------------------------------------------------------------
# Text Preprocessor
# ---------------------------------------------------------------------------


class TextPreprocessor:
    """Convert document text into a stemmed bag of words.

    Example::

        preprocessor = TextPreprocessor(stopwords={"the", "were"})
        doc = preprocessor.word_map("The players were scoring goals.")
        doc.to_dict()   # {'goal': 1, 'player': 1, 'score': 1}

    Args:
        stopwords: Words to drop before stemming. Defaults to
            ``STOP_WORDS``.
    """

    _WORD_RE = re.compile(r"[A-Za-z]+(?:-[A-Za-z]+)*")

    def __init__(self, stopwords: Optional[Iterable[str]] = None) -> None:
        self.stopwords: frozenset[str] = (
            frozenset(w.lower() for w in stopwords) if stopwords is not None else STOP_WORDS
        )

    def tokenize(self, text: str) -> list[str]:
        """Extract lowercase word tokens from text."""
        return [m.group().lower() for m in self._WORD_RE.finditer(text)]

    def terms(self, text: str) -> list[str]:
        """Tokenize, drop stopwords, and stem."""
        return [stem(token) for token in self.tokenize(text) if token not in self.stopwords]

    def word_map(self, text: str) -> WordMap:
        """Build the bag of stemmed words for one document's text."""
        return WordMap.from_words(self.terms(text))

    def read_document(self, path: str | Path) -> WordMap:
        """Read a document file and build its word map.

        Undecodable bytes are replaced rather than rejected; they never
        form part of an ASCII word anyway.

        Raises:
            InputDataError: If the file cannot be opened.
        """
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise InputDataError(f"File {path} could not be opened: {exc}") from exc
        word_map = self.word_map(text)
        logger.debug("{}: {}", path, word_map.to_dict())
        return word_map
