"""
Boolean assignments and their canonical enumeration.

An :class:`Assignment` is one configuration of ``n`` boolean variables. Every
table in the package (CPTs and sampling results alike) is laid out in the
order produced by :class:`AssignmentEnumerator`: ascending binary counting
with position ``0`` as the most significant bit, so for ``n = 2`` the order
is ``FF, FT, TF, TT``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

import numpy as np

_TRUE_CHARS = {"T", "1"}
_FALSE_CHARS = {"F", "0"}


@dataclass(frozen=True)
class Assignment:
    bits: Tuple[bool, ...]

    def __post_init__(self):
        object.__setattr__(self, "bits", tuple(bool(bit) for bit in self.bits))

    @classmethod
    def of(cls, *bits: bool) -> "Assignment":
        return cls(bits)

    @classmethod
    def from_string(cls, text: str) -> "Assignment":
        bits = []
        for char in text.strip().upper():
            if char in _TRUE_CHARS:
                bits.append(True)
            elif char in _FALSE_CHARS:
                bits.append(False)
            else:
                raise ValueError(f"Invalid assignment character {char!r} in {text!r}")
        return cls(tuple(bits))

    @classmethod
    def from_index(cls, index: int, n: int) -> "Assignment":
        if n < 0:
            raise ValueError("Assignment arity must be non-negative")
        if index < 0 or index >= (1 << n):
            raise ValueError(f"Index {index} out of range for arity {n}")
        return cls(tuple(bool((index >> (n - 1 - pos)) & 1) for pos in range(n)))

    @property
    def arity(self) -> int:
        return len(self.bits)

    @property
    def index(self) -> int:
        """Position of this assignment in canonical enumeration order."""
        value = 0
        for bit in self.bits:
            value = (value << 1) | int(bit)
        return value

    def get(self, i: int) -> bool:
        return self.bits[i]

    def set(self, i: int, value: bool) -> "Assignment":
        """Return a copy with bit ``i`` replaced; assignments are immutable."""
        if not -self.arity <= i < self.arity:
            raise IndexError(f"Bit {i} out of range for arity {self.arity}")
        bits = list(self.bits)
        bits[i] = bool(value)
        return Assignment(tuple(bits))

    def __len__(self) -> int:
        return len(self.bits)

    def __getitem__(self, i: int) -> bool:
        return self.bits[i]

    def __iter__(self) -> Iterator[bool]:
        return iter(self.bits)

    def __str__(self) -> str:
        return "".join("T" if bit else "F" for bit in self.bits)


class AssignmentEnumerator:
    """
    All ``2**n`` assignments of arity ``n``, in canonical order.

    Iteration is lazy and each call to :func:`iter` starts over, so a single
    enumerator can be walked any number of times.
    """

    def __init__(self, n: int):
        if n < 0:
            raise ValueError("Assignment arity must be non-negative")
        self.n = int(n)

    def __iter__(self) -> Iterator[Assignment]:
        for bits in itertools.product((False, True), repeat=self.n):
            yield Assignment(bits)

    def __len__(self) -> int:
        return 1 << self.n


def assignment_indices(matrix: Iterable) -> np.ndarray:
    """
    Canonical indices for every row of a boolean matrix of shape ``(rows, n)``.

    Rows are read with column ``0`` as the most significant bit, matching
    :attr:`Assignment.index`.
    """

    bits = np.asarray(matrix, dtype=bool)
    if bits.ndim != 2:
        raise ValueError(f"Expected a 2-D boolean matrix, got shape {bits.shape}")
    n = bits.shape[1]
    if n == 0:
        return np.zeros(bits.shape[0], dtype=np.int64)
    place = np.left_shift(1, np.arange(n - 1, -1, -1, dtype=np.int64))
    return bits.astype(np.int64) @ place
