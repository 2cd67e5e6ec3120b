"""Command-line interface for the Bayes categorizer.

Provides ``classify``, ``validate``, and ``stem`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    bayes-categorizer classify -t training/ -s stopwords.txt inbox/
    bayes-categorizer classify -t training/ inbox/ > results.txt
    bayes-categorizer validate results.txt sorted/
    bayes-categorizer stem running relational
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classifier import ClassificationResult, DocumentClassifier
from .config import Settings, load_settings
from .errors import CategorizerError
from .log_setup import setup_logging
from .preprocessing import load_stopwords
from .stemmer import stem as stem_word
from .validator import ValidationReport, validate_results

console = Console()
err_console = Console(stderr=True)


def _fail(error: BaseException) -> NoReturn:
    """Report an error to the user and exit with status 1."""
    err_console.print(f"[bold red]Error:[/] {escape(str(error))}")
    sys.exit(1)


def _settings() -> Settings:
    try:
        return load_settings()
    except CategorizerError as e:
        _fail(e)


@click.group()
@click.version_option(package_name="bayes-categorizer")
def main() -> None:
    """Bayes categorizer: Naive Bayes text classification.

    Train on directories of documents sorted by category, classify new
    documents, and measure how well the assignments match known answers.
    """
    pass


@main.command()
@click.argument("targets", nargs=-1, required=True,
                type=click.Path(exists=True, path_type=Path))
@click.option("--training-dir", "-t", "training_dirs", multiple=True, required=True,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help="Training root laid out as <root>/<category>/<document>. Repeatable.")
@click.option("--stopwords-file", "-s", type=click.Path(path_type=Path), default=None,
              help="Stopword file (default: CATEGORIZER_STOPWORDS_FILE or stopwords.txt).")
@click.option("--smoothing", "-k", type=float, default=None,
              help="Smoothing constant for unseen words (default 1.0).")
@click.option("--trace", is_flag=True, default=False,
              help="Log probability data for every category and document.")
@click.option("--output", "-o", type=click.Choice(["text", "json", "rich"]), default="text",
              help="Output format.")
def classify(
    targets: tuple[Path, ...],
    training_dirs: tuple[Path, ...],
    stopwords_file: Optional[Path],
    smoothing: Optional[float],
    trace: bool,
    output: str,
) -> None:
    """Train on TRAINING_DIRs, then classify every file under TARGETS.

    Text output has one "<file-path>: <category>" line per document,
    the format the validate command reads.

    Example: bayes-categorizer classify -t training/ -s stopwords.txt inbox/
    """
    settings = _settings()
    trace = trace or settings.trace
    setup_logging("DEBUG" if trace else settings.log_level)

    try:
        stopwords = load_stopwords(stopwords_file or settings.stopwords_file)
        classifier = DocumentClassifier(
            stopwords=stopwords,
            smoothing=smoothing if smoothing is not None else settings.smoothing,
        )
    except CategorizerError as e:
        _fail(e)

    trained = classifier.train(training_dirs)
    if not trained.ok:
        _fail(trained.error)

    classified = classifier.classify_paths(targets)
    if not classified.ok:
        _fail(classified.error)
    results = classified.unwrap()

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in results.values()], indent=2))
    elif output == "rich":
        _render_classification(results, classifier.categories)
    else:
        for path, result in results.items():
            click.echo(f"{path}: {result.category}")


@main.command()
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("expected_dirs", nargs=-1, required=True,
                type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "text", "json"]), default="rich",
              help="Output format.")
def validate(results_file: Path, expected_dirs: tuple[Path, ...], output: str) -> None:
    """Score a classify results file against documents sorted by hand.

    EXPECTED_DIRS use the training layout, and their file paths must
    match the paths in RESULTS_FILE.

    Example: bayes-categorizer validate results.txt sorted/
    """
    setup_logging(_settings().log_level)

    outcome = validate_results(results_file, expected_dirs)
    if not outcome.ok:
        _fail(outcome.error)
    report = outcome.unwrap()

    if output == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif output == "text":
        click.echo(report.summary())
    else:
        _render_validation(report)


@main.command()
@click.argument("words", nargs=-1, required=True)
def stem(words: tuple[str, ...]) -> None:
    """Print the stem of each WORD.

    Example: bayes-categorizer stem caresses relational hopping
    """
    for word in words:
        click.echo(f"{word}: {stem_word(word.lower())}")


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_classification(results: dict[str, ClassificationResult], categories: list[str]) -> None:
    """Render classification results as a rich table."""
    table = Table(title="Classification Results", show_lines=False)
    table.add_column("Document", style="white")
    table.add_column("Category", style="cyan")
    table.add_column("Margin", justify="right", width=10)

    counts = {category: 0 for category in categories}
    for path, result in results.items():
        counts[result.category] += 1
        table.add_row(path, result.category, f"{result.margin:.2f}")

    console.print(table)
    console.print(Panel(
        "\n".join(f"{category}: {count}" for category, count in counts.items()),
        title=f"{len(results)} documents",
        border_style="blue",
    ))


def _render_validation(report: ValidationReport) -> None:
    """Render a ValidationReport with rich formatting."""
    table = Table(title="Classifier Accuracy", show_lines=False)
    table.add_column("Category", style="cyan", width=20)
    table.add_column("Correct", justify="right")
    table.add_column("To this", justify="right")
    table.add_column("To other", justify="right")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F", justify="right", style="bold")

    for category, tally in report.per_category.items():
        table.add_row(
            category,
            str(tally.correct),
            str(tally.misclassified_to_this),
            str(tally.misclassified_to_other),
            f"{tally.precision:.2%}",
            f"{tally.recall:.2%}",
            f"{tally.f_measure:.4f}",
        )

    console.print()
    console.print(table)

    accuracy = report.accuracy
    if accuracy > 0.9:
        style = "bold green"
    elif accuracy > 0.6:
        style = "bold yellow"
    else:
        style = "bold red"
    console.print(f"Overall Accuracy: [{style}]{accuracy:.0%}[/] of {report.document_count} documents")
    if report.skipped_lines:
        console.print(f"[dim]{report.skipped_lines} result lines skipped[/]")
    console.print()


if __name__ == "__main__":
    main()
