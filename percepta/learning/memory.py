"""Perceptual memory — a bounded ring of past codes and echo search over it.

The buffer is owned by one PerceptualSystem: encode appends, decode reads a
snapshot. Entries are immutable; the oldest is evicted once capacity is hit.

Echo strength = (0.4·similarity + 0.6·resonance)·exp(−age_days/30)
  similarity = Σ_{i: a[i]==b[i]} (len−i)/len, divided by len
  resonance  = 1 − (|Δvalence| + |Δarousal|)/2
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from percepta.engine.decoder.segmenter import segment_code
from percepta.errors import FormatError

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
SIMILARITY_THRESHOLD = 0.3
RESONANCE_THRESHOLD = 0.6
MAX_ECHOES = 5
DECAY_DAYS = 30.0
SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class MemoryEntry:
    """One remembered code with the emotion it was encoded under."""

    code: str
    timestamp: float
    context: dict[str, Any] = field(default_factory=dict)
    # valence, arousal, dominance, trajectory, resonance
    emotion: dict[str, Any] = field(default_factory=dict)

    @property
    def payload(self) -> str:
        return self.code[:-1]

    @property
    def valence(self) -> float:
        return float(self.emotion.get("valence", 0.5))

    @property
    def arousal(self) -> float:
        return float(self.emotion.get("arousal", 0.5))


@dataclass(frozen=True)
class Echo:
    entry: MemoryEntry
    similarity: float
    resonance: float
    strength: float
    age_days: float


class MemoryBuffer:
    """FIFO ring of MemoryEntry with a fixed capacity."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("memory capacity must be >= 1")
        self._entries: deque[MemoryEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: MemoryEntry) -> None:
        if len(self._entries) == self.capacity:
            logger.debug("Memory full (%d), evicting %s", self.capacity, self._entries[0].code)
        self._entries.append(entry)

    def snapshot(self) -> tuple[MemoryEntry, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MemoryEntry]:
        return iter(tuple(self._entries))


def positional_similarity(a: str, b: str) -> float:
    """Character agreement weighted toward early positions, in [0, 1)."""
    n = min(len(a), len(b))
    if n == 0:
        return 0.0
    matches = sum((n - i) / n for i in range(n) if a[i] == b[i])
    return matches / n


def emotional_resonance(valence: float, arousal: float, entry: MemoryEntry) -> float:
    return 1.0 - (abs(valence - entry.valence) + abs(arousal - entry.arousal)) / 2


class MemoryResonance:
    """Echo search over a snapshot of remembered entries."""

    def __init__(self, entries: Iterable[MemoryEntry]) -> None:
        self.entries = tuple(entries)

    def find_echoes(
        self,
        payload: str,
        emotion: tuple[float, float],
        now: float | None = None,
    ) -> list[Echo]:
        """Top echoes by strength for a payload and its (valence, arousal)."""
        now = time.time() if now is None else now
        valence, arousal = emotion
        echoes: list[Echo] = []
        for entry in self.entries:
            similarity = positional_similarity(payload, entry.payload)
            resonance = emotional_resonance(valence, arousal, entry)
            if similarity <= SIMILARITY_THRESHOLD and resonance <= RESONANCE_THRESHOLD:
                continue
            age_days = max(0.0, now - entry.timestamp) / SECONDS_PER_DAY
            strength = (0.4 * similarity + 0.6 * resonance) * math.exp(-age_days / DECAY_DAYS)
            echoes.append(Echo(entry, similarity, resonance, strength, age_days))
        echoes.sort(key=lambda e: e.strength, reverse=True)
        return echoes[:MAX_ECHOES]

    def find_object_memories(self, category_letter: str) -> list[MemoryEntry]:
        """Entries whose object segment mentions ``category_letter``."""
        found = []
        for entry in self.entries:
            try:
                _, segments = segment_code(entry.payload)
            except FormatError:
                continue
            if category_letter in segments["objects"]:
                found.append(entry)
        return found

    def find_emotional_memories(self, valence: float, arousal: float) -> list[MemoryEntry]:
        """Entries whose emotion resonates above the echo threshold."""
        return [
            e for e in self.entries if emotional_resonance(valence, arousal, e) > RESONANCE_THRESHOLD
        ]
