"""
Practice quiz generation.

Builds multiple-choice translation items from the first vocabulary entries
of a level plus one fill-in-the-blank from the first grammar example.
"""

import random

from deutschme.domain.constants import QUIZ_DISTRACTORS, QUIZ_MAX_VOCAB_ITEMS
from deutschme.domain.curriculum import ExamItem, FillBlank, LevelContent, MultipleChoice


def make_quiz(content: LevelContent, rng: random.Random | None = None) -> list[ExamItem]:
    """
    Generate a quiz for one level.

    Args:
        content: The level's curriculum.
        rng: Random source for distractors and option order. Pass a seeded
            instance for reproducible quizzes.
    """
    rng = rng or random.Random()
    items: list[ExamItem] = []

    vocab = list(content.vocab)
    for correct in vocab[:QUIZ_MAX_VOCAB_ITEMS]:
        others = [v for v in vocab if v is not correct]
        wrong = rng.sample(others, k=min(QUIZ_DISTRACTORS, len(others)))
        options = [correct.back, *(w.back for w in wrong)]
        rng.shuffle(options)
        items.append(
            MultipleChoice(
                prompt=f"Перевод: {correct.front}",
                options=tuple(options),
                correct_index=options.index(correct.back),
            )
        )

    if content.grammar:
        rule = content.grammar[0]
        tokens = rule.examples[0].split(" ") if rule.examples else []
        # Second token of the first example; may be empty
        expected = tokens[1] if len(tokens) > 1 else ""
        items.append(
            FillBlank(
                prompt=f"Вставьте пропущенное слово ({rule.title})",
                expected=expected,
            )
        )

    return items
