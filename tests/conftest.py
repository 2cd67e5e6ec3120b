"""Shared test fixtures for bayes-categorizer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

# Each category has distinctive vocabulary to make classification feasible
SPORTS_DOCS = {
    "cup-final.txt": (
        "The team scored two goals in the second half. The players celebrated "
        "the win with their coach after the match."
    ),
    "league.txt": (
        "The league table shows the team three points clear. Every player "
        "trained hard before the match and the goalkeeper saved a penalty."
    ),
    "transfer.txt": (
        "The striker signed for a new team. The coach said the players and "
        "the fans welcomed the goals he scores."
    ),
}

POLITICS_DOCS = {
    "election.txt": (
        "The election campaign ended as voters chose a new government. The "
        "minister promised lower taxes in parliament."
    ),
    "budget.txt": (
        "Parliament debated the budget. The minister defended the government "
        "policy on taxes and spending before the vote."
    ),
    "senate.txt": (
        "The senate passed the bill after a long vote. Voters and the "
        "opposition criticized the government policy."
    ),
}

STOPWORDS_TEXT = "the, a, an, and, of, to, in, on, for\nwith, he, his, their, after, before, as, is, was\n"


def write_category_tree(root: Path, categories: dict[str, dict[str, str]]) -> Path:
    """Lay documents out as ``root/<category>/<file>``."""
    for category, documents in categories.items():
        directory = root / category
        directory.mkdir(parents=True, exist_ok=True)
        for name, text in documents.items():
            (directory / name).write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def training_dir(tmp_path: Path) -> Path:
    """Training root with sports and politics categories, three documents each."""
    return write_category_tree(
        tmp_path / "training",
        {"sports": SPORTS_DOCS, "politics": POLITICS_DOCS},
    )


@pytest.fixture
def stopwords_file(tmp_path: Path) -> Path:
    """A small comma and whitespace separated stopword file."""
    file = tmp_path / "stopwords.txt"
    file.write_text(STOPWORDS_TEXT, encoding="utf-8")
    return file


@pytest.fixture
def inbox_dir(tmp_path: Path) -> Path:
    """Unsorted documents to classify."""
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "match.txt").write_text(
        "The players scored late goals and the team won the match.", encoding="utf-8"
    )
    (inbox / "vote.txt").write_text(
        "The government lost the vote in parliament on taxes.", encoding="utf-8"
    )
    return inbox


@pytest.fixture
def category_tree():
    """Factory that writes a ``root/<category>/<file>`` tree."""
    return write_category_tree
