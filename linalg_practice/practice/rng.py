from __future__ import annotations

import math
import random as _entropy
import time
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

Seed = str | int | None

_UINT32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    return (a * b) & _UINT32


def hash_seed(seed_text: str) -> int:
    """FNV-1a (32 bit) over the UTF-16 code units of ``seed_text``."""
    value = _FNV_OFFSET
    encoded = seed_text.encode("utf-16-le")
    for index in range(0, len(encoded), 2):
        value ^= encoded[index] | (encoded[index + 1] << 8)
        value = _imul(value, _FNV_PRIME)
    return value & _UINT32


def seed_to_state(seed: Seed) -> int:
    if seed is None:
        wall_clock = int(time.time() * 1000)
        return (wall_clock ^ _entropy.getrandbits(32)) & _UINT32
    if isinstance(seed, bool):
        raise TypeError("seed must be a string or an integer")
    if isinstance(seed, int):
        return (seed & _UINT32) or 1
    return hash_seed(seed) or 1


class SeededRng:
    """Mulberry32 stream. Same seed and same call sequence give identical draws."""

    __slots__ = ("_state",)

    def __init__(self, seed: Seed = None) -> None:
        self._state = seed_to_state(seed)

    def random(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _UINT32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _UINT32
        return ((t ^ (t >> 14)) & _UINT32) / 4294967296

    def randint(self, min_value: int, max_value: int) -> int:
        return math.floor(self.random() * (max_value - min_value + 1)) + min_value

    def step(self, min_value: float, max_value: float, step: float) -> float:
        low = math.ceil(min_value / step)
        high = math.floor(max_value / step)
        return self.randint(low, high) * step

    def choice(self, values: Sequence[T]) -> T:
        if not values:
            raise ValueError("cannot choose from an empty sequence")
        return values[self.randint(0, len(values) - 1)]

    def shuffle(self, values: Sequence[T]) -> list[T]:
        items = list(values)
        for index in range(len(items) - 1, 0, -1):
            swap = self.randint(0, index)
            items[index], items[swap] = items[swap], items[index]
        return items

    def weighted_choice(self, items: Sequence[tuple[T, float]]) -> T:
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        total = sum(weight for _, weight in items)
        if total <= 0:
            return items[-1][0]
        remaining = self.random() * total
        for value, weight in items:
            remaining -= weight
            if remaining <= 0:
                return value
        return items[-1][0]
