from pathlib import Path

import pytest

from deutschme.domain.curriculum import FillBlank, MultipleChoice, WordOrder
from deutschme.domain.errors import CurriculumError
from deutschme.domain.models import Level
from deutschme.infrastructure.curriculum_loader import load_curriculum, parse_curriculum


@pytest.fixture(scope="module")
def curriculum():
    return load_curriculum()


class TestBundledCurriculum:
    def test_all_levels_present(self, curriculum):
        assert list(curriculum.levels) == [Level.A1, Level.A2, Level.B1]

    def test_a1_vocab_order(self, curriculum):
        vocab = curriculum.for_level(Level.A1).vocab
        assert vocab[0].front == "Guten Morgen"
        assert vocab[0].hint == "формальное"
        assert vocab[3].front == "Danke"
        assert len(vocab) == 10

    def test_exam_item_variants(self, curriculum):
        exam = curriculum.for_level(Level.A1).exam
        assert [type(i) for i in exam] == [MultipleChoice, FillBlank, WordOrder]
        assert exam[2].parts == ("komme", "ich", "aus", "Berlin")

    def test_word_order_answers_are_reachable(self, curriculum):
        # Submissions are lower-cased, so stored answers must be too
        for content in curriculum.levels.values():
            for item in content.exam:
                if isinstance(item, (FillBlank, WordOrder)):
                    assert item.expected == item.expected.lower()

    def test_listening(self, curriculum):
        task = curriculum.for_level(Level.A2).listening[0]
        assert task.options[task.correct_index] == "Работал"


def test_load_from_path(tmp_path: Path):
    path = tmp_path / "c.yaml"
    path.write_text(
        "levels:\n"
        "  a1:\n"
        "    title: Mini\n"
        "    vocab:\n"
        "      - {front: Hallo, back: Привет}\n",
        encoding="utf-8",
    )

    curriculum = load_curriculum(path)

    content = curriculum.for_level(Level.A1)
    assert content.title == "Mini"
    assert content.vocab[0].back == "Привет"
    assert content.exam == ()


def test_missing_level_is_empty():
    curriculum = parse_curriculum("levels:\n  A1:\n    title: Only A1\n")
    content = curriculum.for_level(Level.B1)
    assert content.vocab == ()
    assert content.title == "B1"


def test_unreadable_path(tmp_path: Path):
    with pytest.raises(CurriculumError):
        load_curriculum(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "levels: [",
        "just a string",
        "levels:\n  C2: {}\n",
        "levels:\n  A1:\n    vocab:\n      - {front: Hallo}\n",
        "levels:\n  A1:\n    vocab:\n      - {front: a, back: b}\n      - {front: a, back: c}\n",
        "levels:\n  A1:\n    exam:\n      - {type: essay, prompt: x}\n",
        "levels:\n  A1:\n    exam:\n      - {type: mc, options: [a, b], correct: 2}\n",
        "levels:\n  A1:\n    listening:\n      - {text: t, options: [a], correct: true}\n",
    ],
)
def test_malformed_curriculum_raises(text):
    with pytest.raises(CurriculumError):
        parse_curriculum(text)
