from __future__ import annotations

from linalg_practice.practice.rng import SeededRng, hash_seed, seed_to_state


def test_same_seed_gives_identical_stream() -> None:
    first = SeededRng("t1")
    second = SeededRng("t1")

    assert [first.random() for _ in range(20)] == [second.random() for _ in range(20)]


def test_different_seeds_diverge() -> None:
    assert SeededRng("t1").random() != SeededRng("t2").random()


def test_string_and_numeric_seeds() -> None:
    assert seed_to_state(0) == 1
    assert seed_to_state(2**32 + 5) == 5
    assert seed_to_state("abc") == hash_seed("abc")
    assert hash_seed("") == 2166136261


def test_draws_stay_in_range() -> None:
    rng = SeededRng(42)
    for _ in range(500):
        value = rng.random()
        assert 0.0 <= value < 1.0
        assert -3 <= rng.randint(-3, 3) <= 3
        stepped = rng.step(-2.0, 2.0, 0.5)
        assert -2.0 <= stepped <= 2.0
        assert (stepped * 2) == int(stepped * 2)


def test_shuffle_is_a_permutation_and_leaves_input_alone() -> None:
    items = [1, 2, 3, 4, 5, 6]
    shuffled = SeededRng("shuffle").shuffle(items)

    assert sorted(shuffled) == items
    assert items == [1, 2, 3, 4, 5, 6]


def test_weighted_choice_skips_zero_weights() -> None:
    rng = SeededRng("weights")
    picks = {rng.weighted_choice([("a", 0.0), ("b", 1.0)]) for _ in range(50)}

    assert picks == {"b"}


def test_weighted_choice_with_no_weight_falls_back_to_last() -> None:
    rng = SeededRng("no-weight")

    assert rng.weighted_choice([("first", 0.0), ("last", 0.0)]) == "last"
