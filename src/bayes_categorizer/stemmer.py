"""Porter-style stemmer used to normalize document words.

Collapses inflected and derived forms of a word (plurals, verb tenses,
common adjective and adverb suffixes) onto one root so the classifier
counts them together. The root need not be an English word; it only has
to be produced consistently.

The pipeline follows the classic Porter rules
(http://tartarus.org/martin/PorterStemmer/def.txt):

1. Syllable boundaries of the original word are located once.
2. Plurals and past/progressive verb forms are normalized.
3. A terminal ``y`` after a vowel-bearing stem becomes ``i``.
4. Three ordered suffix tables strip derivational suffixes, each gated
   by how many syllables would remain.
5. A trailing ``e`` and a doubled ``ll`` are cleaned up.

Input is expected to be lowercase with no punctuation other than dashes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

# ---------------------------------------------------------------------------
# Letter classes
# ---------------------------------------------------------------------------

_VOWELS = "aeiou"
_VOWELS_AND_Y = "aeiouy"

# Only the first four syllables ever gate a rule
_MAX_BOUNDARIES = 4


def _is_consonant(letter: str) -> bool:
    return letter not in _VOWELS_AND_Y


def _has_suffix(word: str, suffix: str) -> bool:
    """True if ``word`` ends with ``suffix`` and is strictly longer than it."""
    return len(word) > len(suffix) and word.endswith(suffix)


def _stem_has_vowel(word: str, end: int) -> bool:
    """True if ``word[:end]`` contains a vowel.

    A ``y`` counts as a vowel when the letter before it is a consonant.
    """
    head = word[:end]
    if any(letter in _VOWELS for letter in head):
        return True
    index = head.rfind("y")
    while index > 0 and not _is_consonant(head[index - 1]):
        index = head.rfind("y", 0, index)
    return index > 0


# ---------------------------------------------------------------------------
# Syllable boundaries
# ---------------------------------------------------------------------------


def _next_boundary(word: str, start: int) -> Optional[int]:
    """Index of the first consonant that closes the next vowel group."""
    length = len(word)
    index = start
    while index < length:
        letter = word[index]
        if letter in _VOWELS:
            break
        if letter == "y" and index > 0 and _is_consonant(word[index - 1]):
            break
        index += 1
    else:
        return None

    index += 1
    while index < length:
        letter = word[index]
        # A y after a y belongs to the vowel group it follows
        if letter not in _VOWELS and (letter != "y" or word[index - 1] != "y"):
            return index
        index += 1
    return None


def syllable_boundaries(word: str) -> list[int]:
    """Locate the boundaries after the first four syllables of a word.

    A syllable here is one or more consecutive vowels optionally preceded
    by consonants. Each boundary is the index of the consonant that
    starts the next syllable, so a word with ``n`` boundaries has at
    least ``n + 1`` syllables when it is cut just after the last one.

    Args:
        word: Lowercase word.

    Returns:
        Up to four ascending boundary indices.
    """
    boundaries: list[int] = []
    index = 0
    while len(boundaries) < _MAX_BOUNDARIES:
        found = _next_boundary(word, index)
        if found is None:
            break
        boundaries.append(found)
        index = found + 1
    return boundaries


def _has_syllables(stem: str, boundaries: list[int], wanted: int, suffix_length: int) -> bool:
    """True if ``wanted`` syllables survive removing ``suffix_length`` letters."""
    if wanted == 1:
        return True
    return (
        len(boundaries) >= wanted - 1
        and boundaries[wanted - 2] < len(stem) - suffix_length
    )


def _replace_suffix(
    word: str,
    suffix: str,
    replacement: str,
    min_stem: int = 1,
) -> Optional[str]:
    """Swap ``suffix`` for ``replacement`` if at least ``min_stem`` letters stay."""
    if len(suffix) + min_stem > len(word) or not _has_suffix(word, suffix):
        return None
    return word[: len(word) - len(suffix)] + replacement


# ---------------------------------------------------------------------------
# Suffix tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuffixTable:
    """An ordered suffix rule table with its dispatch key and gate.

    Attributes:
        name: Label used in tests and debugging.
        key_position: Letter of the stem used to pick a rule list
            (``-1`` for the last letter, ``-2`` for the second to last).
        min_length: The stem must be longer than this to be considered.
        syllables: Syllables that must remain after the suffix is cut.
        gate_suffix_length: Suffix length assumed by the up-front gate.
        rules: Dispatch letter to ordered ``(suffix, replacement)`` pairs.
    """

    name: str
    key_position: int
    min_length: int
    syllables: int
    gate_suffix_length: int
    rules: dict[str, tuple[tuple[str, str], ...]] = field(default_factory=dict)

    def candidates(self, stem: str) -> tuple[tuple[str, str], ...]:
        """Rules that could apply to ``stem``, in priority order."""
        return self.rules.get(stem[self.key_position], ())

    def apply(self, stem: str, boundaries: list[int]) -> str:
        """Apply the first matching rule whose retained stem is long enough."""
        if len(stem) <= self.min_length:
            return stem
        if not _has_syllables(stem, boundaries, self.syllables, self.gate_suffix_length):
            return stem

        min_stem = boundaries[self.syllables - 2] + 1
        for suffix, replacement in self.candidates(stem):
            replaced = _replace_suffix(stem, suffix, replacement, min_stem)
            if replaced is not None:
                return replaced
        return stem


DERIVATIONAL_SUFFIXES = SuffixTable(
    name="derivational",
    key_position=-2,
    min_length=3,
    syllables=2,
    gate_suffix_length=3,
    rules={
        "a": (("ational", "ate"), ("tional", "tion")),
        "c": (("enci", "ence"), ("anci", "ance")),
        "e": (("izer", "ize"),),
        "l": (("abli", "able"), ("alli", "al"), ("entli", "ent"), ("eli", "e"), ("ousli", "ous")),
        "o": (("ization", "ize"), ("ation", "ate"), ("ator", "ate")),
        "s": (("alism", "al"), ("iveness", "ive"), ("fulness", "ful"), ("ousness", "ous")),
        "t": (("aliti", "al"), ("iviti", "ive"), ("biliti", "ble")),
    },
)

ADJECTIVAL_SUFFIXES = SuffixTable(
    name="adjectival",
    key_position=-1,
    min_length=2,
    syllables=2,
    gate_suffix_length=3,
    rules={
        "e": (("icate", "ic"), ("ative", ""), ("alize", "al")),
        "i": (("iciti", "ic"),),
        "l": (("ical", "ic"), ("ful", "")),
        "s": (("ness", ""),),
    },
)

RESIDUAL_SUFFIXES = SuffixTable(
    name="residual",
    key_position=-2,
    min_length=3,
    syllables=3,
    gate_suffix_length=2,
    rules={
        "a": (("al", ""),),
        "c": (("ance", ""), ("ence", "")),
        "e": (("er", ""),),
        "i": (("ic", ""),),
        "l": (("able", ""), ("ible", "")),
        "n": (("ant", ""), ("ement", ""), ("ment", ""), ("ent", "")),
        "o": (("sion", "s"), ("tion", "t"), ("ou", "")),
        "s": (("ism", ""),),
        "t": (("ate", ""), ("iti", "")),
        "u": (("ous", ""),),
        "v": (("ive", ""),),
        "z": (("ize", ""),),
    },
)

SUFFIX_TABLES: tuple[SuffixTable, ...] = (
    DERIVATIONAL_SUFFIXES,
    ADJECTIVAL_SUFFIXES,
    RESIDUAL_SUFFIXES,
)


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------


def _restore_after_tense(stem: str, boundaries: list[int]) -> str:
    """Undo spelling changes made when ``-ed`` or ``-ing`` was attached."""
    if any(_has_suffix(stem, ending) for ending in ("at", "bl", "iz")):
        return stem + "e"

    last = stem[-1]
    if last not in "lsz" and len(stem) > 1 and last == stem[-2]:
        return stem[:-1]

    # consonant-vowel-consonant ending on a stem of exactly two syllables
    if (
        len(stem) >= 3
        and _has_syllables(stem, boundaries, 2, 0)
        and not _has_syllables(stem, boundaries, 3, 0)
        and _is_consonant(stem[-1])
        and not _is_consonant(stem[-2])
        and _is_consonant(stem[-3])
    ):
        return stem + "e"
    return stem


def _normalize_plural_and_tense(stem: str, boundaries: list[int]) -> str:
    if stem.endswith("s"):
        for suffix, replacement in (("sses", "ss"), ("ies", "i")):
            replaced = _replace_suffix(stem, suffix, replacement)
            if replaced is not None:
                return replaced
        if len(stem) > 1 and stem[-2] != "s":
            return stem[:-1]
        return stem

    if _has_suffix(stem, "eed"):
        if _has_syllables(stem, boundaries, 2, 3):
            return stem[:-1]
        return stem

    if _has_suffix(stem, "ed") and _stem_has_vowel(stem, len(stem) - 2):
        stem = stem[:-2]
    elif _has_suffix(stem, "ing") and _stem_has_vowel(stem, len(stem) - 3):
        stem = stem[:-3]
    else:
        return stem
    return _restore_after_tense(stem, boundaries)


def _normalize_terminal_y(stem: str) -> str:
    if len(stem) < 2 or stem[-1] != "y":
        return stem
    last = len(stem) - 2
    while last >= 0 and stem[last] == "y":
        last -= 1
    if last >= 0 and _stem_has_vowel(stem, last + 1):
        return stem[:-1] + "i"
    return stem


def _clean_up(stem: str, boundaries: list[int]) -> str:
    if stem.endswith("e"):
        if _has_syllables(stem, boundaries, 3, 1):
            stem = stem[:-1]
        elif _has_syllables(stem, boundaries, 2, 1):
            # Keep the e after consonant-vowel-consonant unless that consonant is w or x
            keeps_e = (
                len(stem) >= 4
                and _is_consonant(stem[-4])
                and not _is_consonant(stem[-3])
                and _is_consonant(stem[-2])
                and stem[-2] not in "wx"
            )
            if not keeps_e:
                stem = stem[:-1]

    if _has_syllables(stem, boundaries, 3, 1) and _has_suffix(stem, "ll"):
        stem = stem[:-1]
    return stem


def stem(word: str) -> str:
    """Reduce a word to its root form.

    Args:
        word: Lowercase word, no punctuation except dashes.

    Returns:
        The stem. Words no rule applies to come back unchanged.

    Example::

        >>> stem("relational")
        'relat'
        >>> stem("hopping")
        'hop'
    """
    if not word:
        return word

    boundaries = syllable_boundaries(word)
    result = _normalize_plural_and_tense(word, boundaries)
    result = _normalize_terminal_y(result)
    for table in SUFFIX_TABLES:
        result = table.apply(result, boundaries)
    return _clean_up(result, boundaries)
