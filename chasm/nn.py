"""Small dense networks and the vector helpers the gladiators think with."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence

Vector = list[float]
Matrix = list[list[float]]
Network = list[Matrix]

INPUT_SIZE = 40
HIDDEN_SIZE = 50
OUTPUT_SIZE = 11
MUTATION_SPAN = 0.1

# (rows, columns) of each layer: rows are output cells, columns are inputs.
LAYER_SHAPES: tuple[tuple[int, int], ...] = (
    (HIDDEN_SIZE, INPUT_SIZE),
    (HIDDEN_SIZE, HIDDEN_SIZE),
    (HIDDEN_SIZE, HIDDEN_SIZE),
    (OUTPUT_SIZE, HIDDEN_SIZE),
)


def brute_modulo(x: int, c: int) -> int:
    """Wrap ``x`` into ``[0, c)``."""
    if c <= 0:
        raise ValueError(f"modulus must be positive, got {c}")
    return x % c


def relu(x: Sequence[float]) -> Vector:
    """Rectified linear activation, element by element."""
    return [value if value > 0.0 else 0.0 for value in x]


def tanh(x: Sequence[float]) -> Vector:
    """Hyperbolic tangent, element by element."""
    return [math.tanh(value) for value in x]


def dot_product(u: Sequence[float], v: Sequence[float]) -> float:
    """Inner product of two vectors; vectors of different length give 0.0."""
    if len(u) != len(v):
        return 0.0
    return float(sum(a * b for a, b in zip(u, v)))


def feed_forward(layer: Sequence[Sequence[float]], x: Sequence[float]) -> Vector:
    """Apply one layer: each row's dot product with the input."""
    return [dot_product(row, x) for row in layer]


def finite_linear_map(a: Sequence[Sequence[float]], x: Sequence[float]) -> Vector:
    """Multiply matrix ``a`` by vector ``x``."""
    return [dot_product(row, x) for row in a]


def transpose(a: Sequence[Sequence[float]]) -> Matrix:
    """Transpose a rectangular matrix."""
    if not a:
        raise ValueError("cannot transpose an empty matrix")
    width = len(a[0])
    return [[row[m] for row in a] for m in range(width)]


def matmul(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Matrix product; incompatible shapes give a zero matrix of the result shape."""
    b_t = transpose(b)
    if len(a[0]) != len(b_t[0]):
        return [[0.0] * len(b_t) for _ in a]
    return [[dot_product(row, column) for column in b_t] for row in a]


def mutate(network: Network, rng: random.Random) -> Network:
    """Return a copy of ``network`` with every weight nudged by up to 0.1."""
    return [
        [[weight + rng.uniform(-MUTATION_SPAN, MUTATION_SPAN) for weight in row] for row in layer]
        for layer in network
    ]


def zero_network() -> Network:
    """A fresh network of the standard shape with all weights zero."""
    return [[[0.0] * columns for _ in range(rows)] for rows, columns in LAYER_SHAPES]