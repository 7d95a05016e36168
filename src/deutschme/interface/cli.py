"""deutschme CLI: learner commands, preferences and config."""

import json
import logging
import random
import sys
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from deutschme.application.config import resolve_config
from deutschme.application.session import SessionService
from deutschme.domain.curriculum import ExamItem, FillBlank, MultipleChoice, WordOrder
from deutschme.domain.errors import CurriculumError, InvalidInput

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="deutschme: German self-study with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage deutschme configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


def _log_level(verbosity: int) -> int:
    return LOG_LEVELS[max(0, min(verbosity, len(LOG_LEVELS) - 1))]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg="red", err=True)
    raise typer.Exit(2)


def _open_session(ctx: typer.Context) -> SessionService:
    from deutschme.application.factory import get_session

    overrides = ctx.obj or {}
    config = resolve_config({"state_path": overrides.get("state_path")})
    try:
        return get_session(config, rng=overrides.get("rng"))
    except CurriculumError as e:
        _fail(f"Curriculum error: {e}")


def _warn_if_unsaved(session: SessionService) -> None:
    if session.last_persist is not None and not session.last_persist.ok:
        typer.secho("Progress could not be saved; it is kept for this run only.", fg="yellow")


def _ask_item(item: ExamItem, number: int, total: int) -> Any:
    typer.echo(f"\n[{number}/{total}] {item.prompt}")
    if isinstance(item, MultipleChoice):
        for i, option in enumerate(item.options, start=1):
            typer.echo(f"  {i}. {option}")
        return typer.prompt("Choice", type=int) - 1
    if isinstance(item, WordOrder):
        typer.echo("  Words: " + " / ".join(item.parts))
        return typer.prompt("Sentence")
    return typer.prompt("Answer")


def _expected_text(item: ExamItem) -> str:
    if isinstance(item, MultipleChoice):
        return item.options[item.correct_index]
    if isinstance(item, (FillBlank, WordOrder)):
        return item.expected
    return ""


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    state: Annotated[
        Path | None, typer.Option("--state", help="Progress file (overrides config).")
    ] = None,
):
    """Global settings for deutschme."""
    ctx.ensure_object(dict)
    ctx.obj["state_path"] = state
    # each -v adds one step on top of the configured verbosity
    config = resolve_config({"state_path": state})
    logging.getLogger().setLevel(_log_level(config.verbose + verbose))


# ---------------------------------------------------------------------------
# Learner commands
# ---------------------------------------------------------------------------


@app.command()
def status(ctx: typer.Context):
    """Show the dashboard: level, XP, streak, due cards and exam result."""
    session = _open_session(ctx)
    summary = session.summary()
    content = session.content

    typer.secho(f"{summary.display_name} · {content.title}", bold=True)
    typer.echo(f"XP: {summary.total_xp}")
    typer.echo(f"Streak: {summary.streak} day(s)")
    typer.echo(f"Cards due: {summary.due_count}")
    exam = f"{summary.exam_percent}%" if summary.exam_percent is not None else "—"
    typer.echo(f"Exam result: {exam}")
    typer.echo(f"Goal progress: {summary.weekly_goal_percent:.0f}%")
    if content.goals:
        typer.echo("Goals: " + ", ".join(content.goals))


@app.command()
def learn(ctx: typer.Context):
    """List the current level's vocabulary and grammar."""
    session = _open_session(ctx)
    content = session.content

    typer.secho(f"{content.title} — vocabulary", bold=True)
    for entry in content.vocab:
        hint = f"  ({entry.hint})" if entry.hint else ""
        typer.echo(f"  {entry.front} — {entry.back}{hint}")

    typer.secho("\nGrammar", bold=True)
    for rule in content.grammar:
        typer.echo(f"  {rule.title}: {rule.rule}")
        for example in rule.examples:
            typer.echo(f"    • {example}")


@app.command()
def say(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="German text to pronounce.")],
):
    """Pronounce a phrase with the configured speech engine."""
    session = _open_session(ctx)
    session.speak(text)


@app.command()
def practice(
    ctx: typer.Context,
    limit: Annotated[int, typer.Option(help="Maximum cards to review.", min=1)] = 20,
):
    """Review due flashcards and grade each from 0 (forgot) to 4 (perfect)."""
    session = _open_session(ctx)

    reviewed = 0
    while reviewed < limit:
        identity = session.next_due_card()
        if identity is None:
            typer.secho("No cards due. Come back later!", fg="green")
            break

        entry = session.vocab_entry(identity)
        typer.secho(f"\n{identity.front}", bold=True)
        if entry and entry.hint:
            typer.echo(f"Hint: {entry.hint}")
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(entry.back if entry else "?")

        quality = typer.prompt("Grade 0-4", type=int)
        try:
            record = session.grade_card(identity, quality)
        except InvalidInput as e:
            _fail(str(e))
        typer.echo(f"Next review in {record.interval} day(s).")
        reviewed += 1

    typer.echo(f"Reviewed {reviewed} card(s). XP: {session.state.total_xp}")
    _warn_if_unsaved(session)


@app.command()
def listen(
    ctx: typer.Context,
    show: Annotated[
        bool, typer.Option("--show", help="Print the transcript instead of speaking it.")
    ] = False,
):
    """Listening tasks: hear a short text and answer a question."""
    session = _open_session(ctx)
    tasks = session.content.listening
    if not tasks:
        typer.echo("No listening tasks for this level.")
        return

    for index, task in enumerate(tasks):
        if show:
            typer.echo(f"\n{task.transcript}")
        else:
            session.speak(task.transcript)
        typer.echo(task.question)
        for i, option in enumerate(task.options, start=1):
            typer.echo(f"  {i}. {option}")
        choice = typer.prompt("Choice", type=int) - 1
        if session.answer_listening(index, choice):
            typer.secho("Correct!", fg="green")
        else:
            typer.secho("Not quite, listen again later.", fg="yellow")
    _warn_if_unsaved(session)


@app.command()
def order(ctx: typer.Context):
    """Word-order practice: assemble the sentence from its parts."""
    session = _open_session(ctx)
    task = session.word_order_task()
    if task is None:
        typer.echo("Build a sentence from: ich / bin / hier")
    else:
        typer.echo(task.prompt)
    answer = typer.prompt("Sentence")
    if session.check_word_order(answer):
        typer.secho("Correct!", fg="green")
    else:
        expected = task.expected if task else ""
        typer.secho(f"Almost. Correct answer: {expected}", fg="yellow")
    _warn_if_unsaved(session)


@app.command()
def quiz(
    ctx: typer.Context,
    seed: Annotated[
        int | None, typer.Option(help="Seed for reproducible distractors and option order.")
    ] = None,
):
    """Take a short generated quiz for the current level."""
    if seed is not None:
        ctx.obj["rng"] = random.Random(seed)
    session = _open_session(ctx)
    items = session.make_quiz()

    for number, item in enumerate(items, start=1):
        answer = _ask_item(item, number, len(items))
        if session.answer_quiz_item(item, answer):
            typer.secho("Correct!", fg="green")
        else:
            typer.secho(f"Correct answer: {_expected_text(item)}", fg="yellow")

    typer.echo(f"XP: {session.state.total_xp}")
    _warn_if_unsaved(session)


@app.command()
def exam(ctx: typer.Context):
    """Sit the level exam. The result is saved and earns a bonus."""
    session = _open_session(ctx)
    pool = session.exam_pool()
    if not pool:
        typer.echo("No exam for this level.")
        return

    answers: dict[int, Any] = {}
    for index, item in enumerate(pool):
        answers[index] = _ask_item(item, index + 1, len(pool))

    if not typer.confirm("Submit answers?", default=True):
        typer.echo("Exam discarded.")
        raise typer.Exit()

    percent = session.submit_exam(answers)
    typer.secho(f"Result: {percent}%", bold=True)
    _warn_if_unsaved(session)


@app.command()
def progress(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show XP per day and the current streak."""
    session = _open_session(ctx)
    summary = session.summary()
    points = session.chart()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "level": summary.level.value,
                    "xp": summary.total_xp,
                    "streak": summary.streak,
                    "due": summary.due_count,
                    "exam": summary.exam_percent,
                    "goal_percent": summary.weekly_goal_percent,
                    "history": [{"date": p.label, "xp": p.xp} for p in points],
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    peak = max((p.xp for p in points), default=0) or 1
    for point in points:
        bar = "█" * round(point.xp / peak * 30)
        typer.echo(f"{point.label} {bar} {point.xp}")
    typer.echo(f"Streak: {summary.streak} day(s)  Total: {summary.total_xp} XP")


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


@app.command()
def level(
    ctx: typer.Context,
    value: Annotated[str, typer.Argument(help="A1, A2 or B1.")],
):
    """Switch the current proficiency level."""
    session = _open_session(ctx)
    try:
        session.set_level(value)
    except InvalidInput as e:
        _fail(str(e))
    typer.echo(f"Level: {session.state.current_level.value}")
    _warn_if_unsaved(session)


@app.command()
def settings(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option(help="Display name.")] = None,
    dark: Annotated[
        bool | None, typer.Option("--dark/--light", help="Dark mode preference.")
    ] = None,
):
    """Show or change learner preferences."""
    session = _open_session(ctx)
    if name is not None:
        session.set_display_name(name)
    if dark is not None:
        session.set_dark_mode(dark)

    state = session.state
    typer.echo(f"Name: {state.display_name}")
    typer.echo(f"Dark mode: {'on' if state.dark_mode else 'off'}")
    _warn_if_unsaved(session)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    overrides = ctx.obj or {}
    config = resolve_config({"state_path": overrides.get("state_path")})
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("path")
def config_path():
    """Print where the config file is read from."""
    from deutschme.application.config import config_file

    typer.echo(str(config_file()))


@app.command()
def version():
    """Print the installed version."""
    from deutschme.consts import VERSION

    typer.echo(VERSION)
