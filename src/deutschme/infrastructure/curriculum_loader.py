"""
Curriculum loader.

Reads the per-level content and exam pools from YAML. The bundled
``deutschme/data/curriculum.yaml`` is used unless a path is configured.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from deutschme.domain.curriculum import (
    Curriculum,
    ExamItem,
    FillBlank,
    GrammarRule,
    LevelContent,
    ListeningTask,
    MultipleChoice,
    VocabEntry,
    WordOrder,
)
from deutschme.domain.errors import CurriculumError, InvalidInput
from deutschme.domain.models import Level

logger = logging.getLogger(__name__)

BUNDLED_CURRICULUM = "curriculum.yaml"


def _require(raw: dict[str, Any], key: str, where: str) -> Any:
    if key not in raw:
        raise CurriculumError(f"{where}: missing '{key}'")
    return raw[key]


def _str_list(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise CurriculumError(f"{where}: expected a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def _mapping_list(value: Any, where: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise CurriculumError(f"{where}: expected a list of mappings")
    return value


def _correct_index(raw: dict[str, Any], options: tuple[str, ...], where: str) -> int:
    correct = _require(raw, "correct", where)
    if isinstance(correct, bool) or not isinstance(correct, int):
        raise CurriculumError(f"{where}: 'correct' must be an integer")
    if not 0 <= correct < len(options):
        raise CurriculumError(f"{where}: 'correct' index {correct} out of range")
    return correct


def parse_exam_item(raw: dict[str, Any], where: str) -> ExamItem:
    kind = raw.get("type")
    prompt = str(raw.get("prompt", ""))

    if kind == "mc":
        options = _str_list(_require(raw, "options", where), where)
        return MultipleChoice(
            prompt=prompt, options=options, correct_index=_correct_index(raw, options, where)
        )
    if kind == "fill":
        return FillBlank(prompt=prompt, expected=str(_require(raw, "answer", where)))
    if kind == "order":
        return WordOrder(
            prompt=prompt,
            parts=_str_list(raw.get("parts"), where),
            expected=str(_require(raw, "answer", where)),
        )
    raise CurriculumError(f"{where}: unknown item type {kind!r}")


def parse_level(level: Level, raw: dict[str, Any]) -> LevelContent:
    where = f"levels.{level.value}"

    vocab = tuple(
        VocabEntry(
            front=str(_require(v, "front", f"{where}.vocab[{i}]")),
            back=str(_require(v, "back", f"{where}.vocab[{i}]")),
            hint=v.get("hint"),
        )
        for i, v in enumerate(_mapping_list(raw.get("vocab"), f"{where}.vocab"))
    )
    fronts = [v.front for v in vocab]
    if len(set(fronts)) != len(fronts):
        raise CurriculumError(f"{where}.vocab: duplicate front text")

    grammar = tuple(
        GrammarRule(
            title=str(_require(g, "title", f"{where}.grammar[{i}]")),
            rule=str(g.get("rule", "")),
            examples=_str_list(g.get("examples"), f"{where}.grammar[{i}]"),
        )
        for i, g in enumerate(_mapping_list(raw.get("grammar"), f"{where}.grammar"))
    )

    listening = []
    for i, t in enumerate(_mapping_list(raw.get("listening"), f"{where}.listening")):
        item_where = f"{where}.listening[{i}]"
        options = _str_list(_require(t, "options", item_where), item_where)
        listening.append(
            ListeningTask(
                transcript=str(_require(t, "text", item_where)),
                question=str(t.get("question", "")),
                options=options,
                correct_index=_correct_index(t, options, item_where),
            )
        )

    exam = tuple(
        parse_exam_item(item, f"{where}.exam[{i}]")
        for i, item in enumerate(_mapping_list(raw.get("exam"), f"{where}.exam"))
    )

    return LevelContent(
        level=level,
        title=str(raw.get("title", level.value)),
        goals=_str_list(raw.get("goals"), f"{where}.goals"),
        vocab=vocab,
        grammar=grammar,
        listening=tuple(listening),
        exam=exam,
    )


def parse_curriculum(text: str) -> Curriculum:
    try:
        doc = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CurriculumError(f"Invalid curriculum YAML: {e}") from e

    levels_raw = doc.get("levels") if isinstance(doc, dict) else None
    if not isinstance(levels_raw, dict):
        raise CurriculumError("Curriculum must have a 'levels' mapping")

    levels: dict[Level, LevelContent] = {}
    for key, raw in levels_raw.items():
        try:
            level = Level.parse(key)
        except InvalidInput as e:
            raise CurriculumError(str(e)) from e
        if not isinstance(raw, dict):
            raise CurriculumError(f"levels.{key}: expected a mapping")
        levels[level] = parse_level(level, raw)

    return Curriculum(levels=levels)


def load_curriculum(path: Path | None = None) -> Curriculum:
    """
    Load the curriculum from ``path`` or from the bundled YAML.

    Raises:
        CurriculumError: If the file is unreadable or malformed.
    """
    if path is None:
        text = resources.files("deutschme.data").joinpath(BUNDLED_CURRICULUM).read_text(
            encoding="utf-8"
        )
        source = "bundled curriculum"
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CurriculumError(f"Cannot read curriculum {path}: {e}") from e
        source = str(path)

    curriculum = parse_curriculum(text)
    logger.debug(f"Loaded {len(curriculum.levels)} levels from {source}")
    return curriculum
