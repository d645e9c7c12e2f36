from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from linalg_practice.practice.topics.angle import generate_angle
from linalg_practice.practice.topics.augmented import generate_augmented
from linalg_practice.practice.topics.base import TopicGenerator
from linalg_practice.practice.topics.dot import generate_dot
from linalg_practice.practice.topics.linear_systems import generate_linear_systems
from linalg_practice.practice.topics.matrices_part1 import MatricesPart1Variant, generate_matrices_part1
from linalg_practice.practice.topics.matrix_inverse import generate_matrix_inverse
from linalg_practice.practice.topics.matrix_ops import generate_matrix_ops
from linalg_practice.practice.topics.matrix_properties import generate_matrix_properties
from linalg_practice.practice.topics.parametric import generate_parametric
from linalg_practice.practice.topics.projection import generate_projection
from linalg_practice.practice.topics.rref import generate_rref
from linalg_practice.practice.topics.solution_types import generate_solution_types
from linalg_practice.practice.topics.vectors import generate_vectors
from linalg_practice.practice.topics.vectors_part1 import generate_vectors_part1
from linalg_practice.practice.topics.vectors_part2 import generate_vectors_part2


class GenKey(str, Enum):
    DOT = "dot"
    VECTORS = "vectors"
    ANGLE = "angle"
    PROJECTION = "projection"
    VECTORS_PART1 = "vectors_part1"
    VECTORS_PART2 = "vectors_part2"
    LINEAR_SYSTEMS = "linear_systems"
    AUGMENTED = "augmented"
    RREF = "rref"
    SOLUTION_TYPES = "solution_types"
    PARAMETRIC = "parametric"
    MATRIX_OPS = "matrix_ops"
    MATRIX_INVERSE = "matrix_inverse"
    MATRIX_PROPERTIES = "matrix_properties"
    MATRICES_PART1 = "matrices_part1"


class UnknownGeneratorError(ValueError):
    def __init__(self, topic: str) -> None:
        self.topic = topic
        self.known = known_topics()
        super().__init__(f"Unknown practice topic '{topic}'. Known: {', '.join(self.known)}")


GENERATORS: Mapping[GenKey, TopicGenerator] = MappingProxyType(
    {
        GenKey.DOT: generate_dot,
        GenKey.VECTORS: generate_vectors,
        GenKey.ANGLE: generate_angle,
        GenKey.PROJECTION: generate_projection,
        GenKey.VECTORS_PART1: generate_vectors_part1,
        GenKey.VECTORS_PART2: generate_vectors_part2,
        GenKey.LINEAR_SYSTEMS: generate_linear_systems,
        GenKey.AUGMENTED: generate_augmented,
        GenKey.RREF: generate_rref,
        GenKey.SOLUTION_TYPES: generate_solution_types,
        GenKey.PARAMETRIC: generate_parametric,
        GenKey.MATRIX_OPS: generate_matrix_ops,
        GenKey.MATRIX_INVERSE: generate_matrix_inverse,
        GenKey.MATRIX_PROPERTIES: generate_matrix_properties,
        GenKey.MATRICES_PART1: generate_matrices_part1,
    }
)

# Matrices part 1 has no slug of its own; its exercises carry the variant slug.
CANONICAL_SLUGS: Mapping[GenKey, str] = MappingProxyType(
    {
        GenKey.DOT: "m0.dot",
        GenKey.VECTORS: "m0.vectors",
        GenKey.ANGLE: "m0.angle",
        GenKey.PROJECTION: "m0.projection",
        GenKey.VECTORS_PART1: "m0.vectors_part1",
        GenKey.VECTORS_PART2: "m0.vectors_part2",
        GenKey.LINEAR_SYSTEMS: "m1.linear_systems",
        GenKey.AUGMENTED: "m1.augmented",
        GenKey.RREF: "m1.rref",
        GenKey.SOLUTION_TYPES: "m1.solution_types",
        GenKey.PARAMETRIC: "m1.parametric",
        GenKey.MATRIX_OPS: "m2.matrix_ops",
        GenKey.MATRIX_INVERSE: "m2.matrix_inverse",
        GenKey.MATRIX_PROPERTIES: "m2.matrix_properties",
    }
)

# Mixed practice over every matrices part 1 variant.
MATRICES_PART1_MIX_SLUG = "m2.matrices_part1"

_KEYS_BY_NAME: Mapping[str, GenKey] = MappingProxyType(
    {
        **{key.value: key for key in GenKey},
        **{slug: key for key, slug in CANONICAL_SLUGS.items()},
        MATRICES_PART1_MIX_SLUG: GenKey.MATRICES_PART1,
    }
)


def known_topics() -> list[str]:
    return [
        *(key.value for key in GenKey),
        *CANONICAL_SLUGS.values(),
        MATRICES_PART1_MIX_SLUG,
        *(variant.value for variant in MatricesPart1Variant),
    ]


def canonical_slug(key: GenKey, variant: MatricesPart1Variant | None = None) -> str:
    if key is GenKey.MATRICES_PART1:
        if variant is None:
            raise ValueError("matrices_part1 exercises need a variant to name their topic")
        return variant.value
    return CANONICAL_SLUGS[key]


def resolve_topic(topic: str | GenKey) -> tuple[GenKey, MatricesPart1Variant | None]:
    """Map a generator key or canonical slug to ``(key, variant)``.

    Matrices part 1 variant slugs (``m2.matmul``) resolve to the
    ``matrices_part1`` key plus that variant.
    """
    if isinstance(topic, GenKey):
        return topic, None
    text = topic.strip()
    key = _KEYS_BY_NAME.get(text)
    if key is not None:
        return key, None
    try:
        return GenKey.MATRICES_PART1, MatricesPart1Variant(text)
    except ValueError as exc:
        raise UnknownGeneratorError(text) from exc
