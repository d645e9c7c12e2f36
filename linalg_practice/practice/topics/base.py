from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from linalg_practice.practice.rng import SeededRng
from linalg_practice.practice.types import ChoiceOption, Difficulty, GenOptions, GenOut

A = TypeVar("A", bound=str)
P = TypeVar("P")

TopicGenerator = Callable[[SeededRng, Difficulty, str, GenOptions | None], GenOut]


class UnknownArchetypeError(ValueError):
    pass


def pick_archetype(
    rng: SeededRng,
    options: GenOptions | None,
    weights: Sequence[tuple[A, float]],
) -> A:
    """Weighted archetype draw; a pinned archetype still consumes the draw."""
    drawn = rng.weighted_choice(weights)
    pinned = options.archetype if options is not None else None
    if pinned is None:
        return drawn
    for value, _ in weights:
        if value == pinned:
            return value
    known = ", ".join(value for value, _ in weights)
    raise UnknownArchetypeError(f"Unknown archetype '{pinned}'. Known: {known}")


def param(options: GenOptions | None, name: str, draw: Callable[[], P]) -> P:
    if options is not None and name in options.params:
        return options.params[name]
    return draw()


def choices(*pairs: tuple[str, str]) -> tuple[ChoiceOption, ...]:
    return tuple(ChoiceOption(id=option_id, text=text) for option_id, text in pairs)


def yes_no(yes_text: str = "Yes", no_text: str = "No") -> tuple[ChoiceOption, ...]:
    return choices(("yes", yes_text), ("no", no_text))


OPTION_LABELS = ("A", "B", "C", "D", "E", "F")


def shuffled_choices(
    rng: SeededRng,
    correct_text: str,
    distractors: Sequence[str],
) -> tuple[tuple[ChoiceOption, ...], str]:
    """Shuffle the correct text among its distractors and label by position.

    Distractors equal to the correct text (or to each other) are dropped so a
    degenerate draw never produces two right answers.
    """
    texts = [correct_text]
    for text in distractors:
        if text not in texts:
            texts.append(text)
    ordered = rng.shuffle(texts[: len(OPTION_LABELS)])
    option_list = tuple(ChoiceOption(id=label, text=text) for label, text in zip(OPTION_LABELS, ordered))
    return option_list, OPTION_LABELS[ordered.index(correct_text)]
