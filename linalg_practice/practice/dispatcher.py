from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass

from linalg_practice.practice.registry import (
    GENERATORS,
    GenKey,
    UnknownGeneratorError,
    canonical_slug,
    resolve_topic,
)
from linalg_practice.practice.rng import Seed, SeededRng
from linalg_practice.practice.topics.matrices_part1 import MatricesPart1Variant
from linalg_practice.practice.types import Difficulty, Exercise, Expected, GenOptions

ALL = "all"

logger = logging.getLogger("linalg.practice.generator")

_DIFFICULTIES = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)
_ALL_KEYS = tuple(GenKey)


@dataclass(frozen=True, slots=True)
class GeneratedExercise:
    exercise: Exercise
    expected: Expected
    archetype: str
    gen_key: GenKey


def _normalize_difficulty(rng: SeededRng, difficulty: Difficulty | str) -> Difficulty:
    if isinstance(difficulty, Difficulty):
        return difficulty
    text = difficulty.strip().lower()
    if text == ALL:
        return rng.choice(_DIFFICULTIES)
    try:
        return Difficulty(text)
    except ValueError as exc:
        raise ValueError(f"Unknown difficulty '{difficulty}'. Known: easy, medium, hard, all") from exc


def generate_exercise(
    topic: str | GenKey,
    difficulty: Difficulty | str,
    seed: Seed = None,
    variant: str | MatricesPart1Variant | None = None,
    options: GenOptions | None = None,
) -> GeneratedExercise:
    """Generate one exercise and its secret expected payload.

    ``topic`` may be a generator key, a canonical slug or ``"all"``. The
    returned exercise always carries the canonical slug as its topic.
    Raises :class:`UnknownGeneratorError` for unknown topics.
    """
    rng = SeededRng(seed)

    if isinstance(topic, str) and topic.strip() == ALL:
        key, slug_variant = rng.choice(_ALL_KEYS), None
    else:
        key, slug_variant = resolve_topic(topic)
    diff = _normalize_difficulty(rng, difficulty)
    exercise_id = f"{key.value}-{diff.value}-{format(math.floor(rng.random() * 1e9), 'x')}"

    gen_options = options or GenOptions()
    requested_variant = variant if variant is not None else slug_variant
    if key is GenKey.MATRICES_PART1 and requested_variant is not None:
        resolved = MatricesPart1Variant.parse(requested_variant)
        gen_options = dataclasses.replace(gen_options, variant=resolved.value)

    out = GENERATORS[key](rng, diff, exercise_id, gen_options)

    if key is GenKey.MATRICES_PART1:
        slug = canonical_slug(key, MatricesPart1Variant.parse(out.exercise.topic))
    else:
        slug = canonical_slug(key)
    exercise = dataclasses.replace(out.exercise, topic=slug)

    logger.debug(
        "practice.generated",
        extra={
            "topic": slug,
            "archetype": out.archetype,
            "difficulty": diff.value,
            "instance_id": exercise.id,
        },
    )
    return GeneratedExercise(exercise=exercise, expected=out.expected, archetype=out.archetype, gen_key=key)


__all__ = ["ALL", "GeneratedExercise", "UnknownGeneratorError", "generate_exercise"]
