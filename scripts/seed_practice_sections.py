from __future__ import annotations

from sqlalchemy import select

from linalg_practice.db.session import SessionLocal
from linalg_practice.models import PracticeSection
from linalg_practice.practice.registry import resolve_topic

SECTIONS: list[dict[str, object]] = [
    {
        "slug": "module-0-dot",
        "sort_order": 0,
        "title": "Module 0: Dot Product",
        "description": "Dot product intuition, computation and drag practice.",
        "topics": ["m0.dot", "m0.vectors"],
    },
    {
        "slug": "module-0-angle",
        "sort_order": 1,
        "title": "Module 0: Angle & Cosine",
        "description": "Angle between vectors and the cosine relationship.",
        "topics": ["m0.angle"],
    },
    {
        "slug": "module-0-projection",
        "sort_order": 2,
        "title": "Module 0: Projection",
        "description": "Projection basics.",
        "topics": ["m0.projection"],
    },
    {
        "slug": "module-0-vectors-part-1",
        "sort_order": 3,
        "title": "Module 0: Vectors (Part 1)",
        "description": "Dimensions, orientation, magnitude, unit vectors and scalar multiples.",
        "topics": ["m0.vectors_part1"],
    },
    {
        "slug": "module-0-vectors-part-2",
        "sort_order": 4,
        "title": "Module 0: Vectors (Part 2)",
        "description": "Linear combinations, span, independence and bases.",
        "topics": ["m0.vectors_part2"],
    },
    {
        "slug": "module-1-linear-systems",
        "sort_order": 10,
        "title": "Module 1: Linear Systems",
        "description": "Solve systems using elimination and RREF.",
        "topics": ["m1.linear_systems", "m1.augmented", "m1.rref", "m1.solution_types", "m1.parametric"],
    },
    {
        "slug": "module-2-matrices-part-1",
        "sort_order": 20,
        "title": "Module 2: Matrices (Part 1)",
        "description": "Shapes, indexing, special matrices, matmul, transpose, symmetry.",
        "topics": [
            "m2.matrices_intro",
            "m2.index_slice",
            "m2.special",
            "m2.elementwise_shift",
            "m2.matmul",
            "m2.matvec",
            "m2.transpose_liveevil",
            "m2.symmetric",
            "m2.matrices_part1",
        ],
    },
    {
        "slug": "module-2-matrices-core",
        "sort_order": 30,
        "title": "Module 2: Matrices (Core)",
        "description": "Matrix ops, inverse, and key properties.",
        "topics": ["m2.matrix_ops", "m2.matrix_inverse", "m2.matrix_properties"],
    },
]


def seed_sections() -> tuple[int, int]:
    """Upsert every section by slug; returns (created, updated)."""
    created = 0
    updated = 0
    with SessionLocal() as db:
        for data in SECTIONS:
            for topic in data["topics"]:  # type: ignore[union-attr]
                resolve_topic(str(topic))
            section = db.scalar(select(PracticeSection).where(PracticeSection.slug == data["slug"]))
            if section is None:
                db.add(PracticeSection(**data))
                created += 1
                continue
            section.title = str(data["title"])
            section.description = str(data["description"])
            section.topics = list(data["topics"])  # type: ignore[call-overload]
            section.sort_order = int(data["sort_order"])  # type: ignore[call-overload]
            updated += 1
        db.commit()
    return created, updated


def main() -> None:
    created, updated = seed_sections()
    print("=== PRACTICE SECTIONS SEED RESULT ===")
    print(f"created_sections: {created}")
    print(f"updated_sections: {updated}")


if __name__ == "__main__":
    main()
