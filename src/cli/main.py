"""
Typer CLI for the Kuba English learning core.

Commands:
    kuba check        - Evaluate a learner answer against the expected one
    kuba simulate     - Show the SM-2 progression of a fresh word
    kuba plan         - Rank lesson words against stored mastery records
    kuba profile      - Show the adaptive difficulty profile of a learner

Usage:
    kuba --help
    kuba check "I'm fine" "I am fine"
    kuba check "break a leg" "good luck" --lesson-kind idioms --local-only
    kuba simulate 1,1,0,1
    kuba plan mastery.json apple banana cherry --count 2
    kuba profile mastery.json --level 7
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.evaluation import (
    AnswerEvaluator,
    ExerciseType,
    HttpAnswerJudge,
    Verdict,
    build_answer_evaluator,
)
from src.mastery import (
    MasteryScheduler,
    SM2Config,
    WordMasteryRecord,
    adjust_exercise_count,
    calculate_difficulty_profile,
    difficulty_hints,
    get_words_for_review,
    select_words_for_practice,
)

app = typer.Typer(
    help="kuba: answer evaluation and spaced repetition for English practice",
    no_args_is_help=True,
)

console = Console()

CONFIDENCE_STYLES = {
    "high": "green",
    "medium": "yellow",
    "low": "red",
}


# ========================================
# HELPERS
# ========================================


def _load_records(path: Path) -> list[WordMasteryRecord]:
    """Load mastery records stored as a JSON list of record dicts."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("expected a JSON list of mastery records")
        return [WordMasteryRecord.from_dict(item) for item in data]
    except (OSError, ValueError, TypeError) as e:
        rprint(f"[red]✗[/red] Could not read mastery records from {path}: {e}")
        raise typer.Exit(code=1) from e


def _parse_outcomes(outcomes: str) -> list[bool]:
    mapping = {"1": True, "y": True, "true": True, "0": False, "n": False, "false": False}
    parsed = []
    for token in outcomes.split(","):
        token = token.strip().lower()
        if token not in mapping:
            raise typer.BadParameter(f"unknown outcome '{token}', use 1/0")
        parsed.append(mapping[token])
    return parsed


async def _evaluate_once(
    evaluator: AnswerEvaluator,
    user_answer: str,
    correct_answer: str,
    exercise_type: ExerciseType,
    context: str | None,
    lesson_kind: str | None,
) -> Verdict:
    try:
        return await evaluator.evaluate(
            user_answer,
            correct_answer,
            exercise_type,
            context=context,
            lesson_kind=lesson_kind,
        )
    finally:
        if isinstance(evaluator.judge, HttpAnswerJudge):
            await evaluator.judge.close()


# ========================================
# EVALUATION COMMANDS
# ========================================


@app.command("check")
def check(
    user_answer: str = typer.Argument(..., help="What the learner typed"),
    correct_answer: str = typer.Argument(..., help="The expected answer"),
    exercise_type: ExerciseType = typer.Option(
        ExerciseType.TRANSLATE_TYPING, "--type", "-t", help="Exercise kind"
    ),
    lesson_kind: str | None = typer.Option(None, "--lesson-kind", help="Lesson category, e.g. idioms"),
    context: str | None = typer.Option(None, "--context", "-c", help="Question shown to the learner"),
    local_only: bool = typer.Option(False, "--local-only", help="Never call the remote judge"),
) -> None:
    """
    Evaluate a learner answer.

    Runs the local heuristics and, when they are not sure and a judge is
    configured, asks the remote judge.
    """
    evaluator = build_answer_evaluator(local_only=local_only)
    verdict = asyncio.run(
        _evaluate_once(evaluator, user_answer, correct_answer, exercise_type, context, lesson_kind)
    )

    mark = "[green]✓ correct[/green]" if verdict.is_correct else "[red]✗ incorrect[/red]"
    style = CONFIDENCE_STYLES[verdict.confidence.value]
    rprint(f"{mark}  confidence: [{style}]{verdict.confidence.value}[/{style}]")
    if verdict.reason:
        rprint(f"  reason: {verdict.reason}")


# ========================================
# MASTERY COMMANDS
# ========================================


@app.command("simulate")
def simulate(
    outcomes: str = typer.Argument(..., help="Comma-separated answers, e.g. 1,1,0,1"),
    word: str = typer.Option("example", "--word", "-w", help="Word label for the table"),
) -> None:
    """Show how SM-2 schedules a fresh word for a sequence of answers."""
    results = _parse_outcomes(outcomes)
    scheduler = MasteryScheduler(SM2Config.from_settings())

    table = Table(title=f"SM-2 progression: {word}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Answer")
    table.add_column("Repetitions", justify="right")
    table.add_column("Interval", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Level", style="cyan")

    record = scheduler.new_record(word)
    for i, is_correct in enumerate(results, 1):
        record = scheduler.update(record, is_correct)
        table.add_row(
            str(i),
            "[green]correct[/green]" if is_correct else "[red]wrong[/red]",
            str(record.repetition_count),
            f"{record.interval_days}d",
            f"{record.ease_factor:.2f}",
            record.mastery_level.value,
        )

    console.print(table)


@app.command("plan")
def plan(
    records_file: Path = typer.Argument(..., help="JSON file with mastery records"),
    words: list[str] = typer.Argument(..., help="Lesson words in lesson order"),
    count: int | None = typer.Option(None, "--count", "-n", help="Words to pick"),
) -> None:
    """Rank lesson words for the next practice set."""
    records = _load_records(records_file)
    if count is None:
        count = get_settings().practice_words_per_session

    selections = select_words_for_practice(words, records, count=count)

    table = Table(title=f"Practice plan ({len(selections)} words)")
    table.add_column("Word", style="cyan")
    table.add_column("Priority")
    table.add_column("Score", justify="right")

    for selection in selections:
        table.add_row(selection.word, selection.priority.value, str(selection.score))

    console.print(table)


@app.command("profile")
def profile(
    records_file: Path = typer.Argument(..., help="JSON file with mastery records"),
    level: int = typer.Option(1, "--level", "-l", help="Learner level"),
    base_count: int = typer.Option(6, "--base-count", help="Base exercise count"),
) -> None:
    """Show the adaptive difficulty profile and generation hints."""
    records = _load_records(records_file)
    settings = get_settings()

    difficulty = calculate_difficulty_profile(records, level)
    review_count = len(get_words_for_review(records))
    exercises = adjust_exercise_count(
        base_count,
        difficulty,
        review_count,
        max_count=settings.practice_max_exercises,
    )

    rprint(f"[bold]Difficulty:[/bold] {difficulty.level.value}")
    rprint(f"  Complexity: {difficulty.exercise_complexity}")
    rprint(f"  Focus on problem words: {'yes' if difficulty.focus_on_problem_words else 'no'}")
    rprint(f"  Include review words: {'yes' if difficulty.include_review_words else 'no'}")
    rprint(f"  Words due for review: {review_count}")
    rprint(f"  Exercises: {exercises}")

    rprint("\n[bold]Hints:[/bold]")
    for hint in difficulty_hints(difficulty):
        rprint(f"  - {hint}")


def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")

    app()


if __name__ == "__main__":
    main()
