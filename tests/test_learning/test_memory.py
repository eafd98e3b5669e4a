"""Memory buffer eviction and echo search."""

import math

import pytest

from percepta.engine.symbols.checksum import append_checksum
from percepta.learning.memory import (
    MAX_ECHOES,
    MemoryBuffer,
    MemoryEntry,
    MemoryResonance,
    emotional_resonance,
    positional_similarity,
)
from tests.conftest import WHITE_32_COMPACT_PAYLOAD

NOW = 1_700_000_000.0
WHITE_CODE = append_checksum(WHITE_32_COMPACT_PAYLOAD)


def _entry(code: str = WHITE_CODE, valence: float = 0.5, arousal: float = 0.5, age_days: float = 0.0) -> MemoryEntry:
    return MemoryEntry(
        code=code,
        timestamp=NOW - age_days * 86400,
        emotion={"valence": valence, "arousal": arousal},
    )


def test_buffer_evicts_oldest_first():
    buffer = MemoryBuffer(capacity=3)
    for i in range(5):
        buffer.append(_entry(code=f"code{i}"))
    assert len(buffer) == 3
    assert [e.code for e in buffer.snapshot()] == ["code2", "code3", "code4"]


def test_buffer_rejects_zero_capacity():
    with pytest.raises(ValueError):
        MemoryBuffer(capacity=0)


def test_snapshot_is_detached():
    buffer = MemoryBuffer(capacity=2)
    buffer.append(_entry())
    snap = buffer.snapshot()
    buffer.append(_entry())
    assert len(snap) == 1
    buffer.clear()
    assert len(buffer) == 0


def test_positional_similarity():
    assert positional_similarity("", "ABC") == 0.0
    assert positional_similarity("ABCD", "WXYZ") == 0.0
    # identical strings score (n + 1) / 2n
    assert positional_similarity("ABCD", "ABCD") == pytest.approx(5 / 8)
    # early positions weigh more
    assert positional_similarity("ABCD", "ABXX") > positional_similarity("ABCD", "XXCD")


def test_emotional_resonance():
    entry = _entry(valence=0.2, arousal=0.8)
    assert emotional_resonance(0.2, 0.8, entry) == pytest.approx(1.0)
    assert emotional_resonance(0.8, 0.2, entry) == pytest.approx(0.4)


def test_missing_emotion_reads_neutral():
    entry = MemoryEntry(code=WHITE_CODE, timestamp=NOW)
    assert entry.valence == 0.5
    assert entry.arousal == 0.5


def test_echo_strength_decays_with_age():
    resonance = MemoryResonance([_entry(age_days=0), _entry(age_days=30)])
    fresh, old = resonance.find_echoes(WHITE_32_COMPACT_PAYLOAD, (0.5, 0.5), NOW)
    assert fresh.age_days == 0.0
    assert old.age_days == pytest.approx(30.0)
    assert old.strength == pytest.approx(fresh.strength * math.exp(-1))


def test_unrelated_memories_do_not_echo():
    stranger = _entry(code="zzzzzzzzzzzzzzzzz", valence=0.0, arousal=1.0)
    resonance = MemoryResonance([stranger])
    assert resonance.find_echoes(WHITE_32_COMPACT_PAYLOAD, (1.0, 0.0), NOW) == []


def test_echoes_are_capped_and_sorted():
    entries = [_entry(age_days=d) for d in range(8)]
    echoes = MemoryResonance(entries).find_echoes(WHITE_32_COMPACT_PAYLOAD, (0.5, 0.5), NOW)
    assert len(echoes) == MAX_ECHOES
    strengths = [e.strength for e in echoes]
    assert strengths == sorted(strengths, reverse=True)
    assert echoes[0].age_days == 0.0


def test_object_memories():
    tree = append_checksum("FLQ" + "dr0000" + "W0%A" + "NK6")
    resonance = MemoryResonance([_entry(), _entry(code=tree), _entry(code="broken")])
    found = resonance.find_object_memories("d")
    assert [e.code for e in found] == [tree]


def test_emotional_memories():
    resonance = MemoryResonance([_entry(valence=0.9, arousal=0.9), _entry(valence=0.1, arousal=0.1)])
    assert len(resonance.find_emotional_memories(0.9, 0.8)) == 1
