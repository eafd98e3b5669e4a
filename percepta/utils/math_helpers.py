"""Math helpers — CV, sigmoid, entropy, hashing, quantization. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

# Uppercase quantization scale: 26 symbols, 25 steps between them
QUANT_STEPS = 25


def coefficient_of_variation(values: NDArray[np.float64] | Sequence[float]) -> float:
    """CV = std / mean. Used for quadrant balance and circularity."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    mean = float(np.mean(arr))
    if abs(mean) < 1e-10:
        return float("inf")
    return float(np.std(arr) / mean)


def sigmoid(x: float) -> float:
    return 1.0 / (1.0 + math.exp(-x))


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def normalized_entropy(counts: NDArray[np.float64] | Sequence[float]) -> float:
    """Shannon entropy of a histogram, divided by log2(bins). Empty → 0."""
    arr = np.asarray(counts, dtype=np.float64)
    total = float(arr.sum())
    if total <= 0 or arr.size < 2:
        return 0.0
    p = arr[arr > 0] / total
    return float(-(p * np.log2(p)).sum() / math.log2(arr.size))


def string_hash(value: str) -> int:
    """32-bit ``h = 31·h + c`` string hash, returned as a non-negative int.

    Stable across processes (unlike ``hash()``), so symbol choices that rely
    on it are reproducible.
    """
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def quantize_to_symbol(value: float) -> str:
    """Map [0,1] onto A–Z (``floor(v·25)``, clamped)."""
    idx = int(math.floor(float(value) * QUANT_STEPS))
    return chr(ord("A") + max(0, min(QUANT_STEPS, idx)))


def dequantize_symbol(symbol: str) -> float:
    """Inverse of :func:`quantize_to_symbol`; non-letters clamp into range."""
    idx = ord(symbol.upper()[0]) - ord("A")
    return max(0, min(QUANT_STEPS, idx)) / QUANT_STEPS


def lerp(a: float, b: float, w: float = 0.5) -> float:
    return a * (1.0 - w) + b * w
