"""End-to-end decode: valid codes, fallbacks, dream modes and memory."""

import pytest

from percepta.engine.decoder.d5_01_dream import dream_params, memory_loops
from percepta.engine.decoder.decoder import FALLBACK_NARRATIVE, SymbolicDecoder
from percepta.engine.narrative import NarrativeEngine
from percepta.engine.symbols.checksum import append_checksum
from percepta.learning.memory import MemoryEntry
from percepta.models.experience import MemoryEcho
from tests.conftest import WHITE_32_COMPACT_PAYLOAD

WHITE_CODE = append_checksum(WHITE_32_COMPACT_PAYLOAD)
NOW = 1_700_000_000.0


def _remembered(code: str = WHITE_CODE, age_days: float = 0.0) -> MemoryEntry:
    return MemoryEntry(
        code=code,
        timestamp=NOW - age_days * 86400,
        context={"narrative_tag": "first visit"},
        emotion={"valence": 0.52, "arousal": 0.4},
    )


def test_white_code_decodes():
    result = SymbolicDecoder().decode(WHITE_CODE)
    assert result.experience.scene.category == "minimal"
    assert result.experience.objects == []
    assert result.experience.spatial.focus.primary == "center"
    assert result.metadata.mode == "compact"
    assert result.metadata.confidence == pytest.approx(0.9)
    assert result.metadata.is_reliable
    assert result.metadata.error is None
    assert result.metrics.length == 17
    assert result.narrative.primary
    assert "empty space" in result.narrative.poetic


def test_stable_decode_is_unperturbed():
    result = SymbolicDecoder(seed=1).decode(WHITE_CODE, memory=[_remembered()], now=NOW)
    assert result.experience.temporal.coherence == 1.0
    assert result.experience.temporal.fragments == []
    assert result.experience.spatial.warping is None
    assert len(result.memory.echoes) == 1


def test_decode_is_deterministic():
    a = SymbolicDecoder().decode(WHITE_CODE)
    b = SymbolicDecoder().decode(WHITE_CODE)
    assert a.experience == b.experience
    assert a.narrative == b.narrative


@pytest.mark.parametrize("code", ["", "!!", "not a code at all", None, "FLQ000000W0%ANK6~"])
def test_malformed_code_falls_back(code):
    result = SymbolicDecoder().decode(code)
    meta = result.metadata
    assert meta.confidence == 0.0
    assert not meta.is_reliable
    assert meta.error.startswith("FormatError")
    assert result.narrative == FALLBACK_NARRATIVE
    assert result.experience.scene is not None
    assert result.experience.emotional is not None


def test_checksum_mismatch_falls_back():
    bad = WHITE_CODE[:-1] + chr(65 + (ord(WHITE_CODE[-1]) - 65 + 1) % 26)
    result = SymbolicDecoder().decode(bad)
    assert result.metadata.confidence == 0.0
    assert result.metadata.error.startswith("ChecksumError")


def test_corrected_code_is_penalized():
    corrupted = WHITE_CODE[:3] + "O" + WHITE_CODE[4:]
    result = SymbolicDecoder().decode(corrupted)
    assert result.metadata.corrected
    assert result.metadata.corrected_position == 3
    assert result.metadata.confidence == pytest.approx(0.81)


def test_stage_failure_keeps_partial_results(monkeypatch):
    def boom(self, *args, **kwargs):
        raise RuntimeError("template table missing")

    monkeypatch.setattr(NarrativeEngine, "generate", boom)
    result = SymbolicDecoder().decode(WHITE_CODE)
    meta = result.metadata
    assert meta.confidence == 0.0
    assert "D4.01" in meta.error
    assert "D4.01" in meta.stage_errors
    assert meta.stage_errors["D6.01"].startswith("skipped")
    assert result.narrative.primary == FALLBACK_NARRATIVE.primary
    # reconstruction finished before the failure
    assert result.experience.scene.category == "minimal"


def test_unknown_decoding_mode():
    with pytest.raises(ValueError):
        SymbolicDecoder(decoding_mode="lucid")


def test_dream_params():
    assert dream_params("dreamlike").stability == 0.5
    assert dream_params("dreamlike").associativity == 0.8
    assert dream_params("npc").emotional_bleed == 0.7
    assert dream_params("npc").associativity == 0.3


def test_dreamlike_lowers_coherence_and_confidence():
    result = SymbolicDecoder(decoding_mode="dreamlike", seed=3).decode(
        WHITE_CODE, memory=[_remembered()], now=NOW
    )
    temporal = result.experience.temporal
    assert temporal.mode == "dreamlike"
    assert temporal.coherence == 0.5
    assert len(temporal.fragments) == 1
    assert temporal.fragments[0].snapshot_code == WHITE_CODE
    assert not temporal.fragments[0].faded
    assert result.metadata.confidence == pytest.approx(0.9 * 0.75)


def test_old_fragments_fade():
    result = SymbolicDecoder(decoding_mode="dreamlike", seed=3).decode(
        WHITE_CODE, memory=[_remembered(age_days=3)], now=NOW
    )
    assert result.experience.temporal.fragments[0].faded
    assert result.memory.decay > 0


def test_seeded_dream_is_reproducible():
    def run():
        decoder = SymbolicDecoder(decoding_mode="npc", seed=42)
        return decoder.decode(WHITE_CODE, memory=[_remembered()], now=NOW)

    a, b = run(), run()
    assert a.experience == b.experience
    assert a.narrative == b.narrative


def test_memory_loops_match_exact_codes():
    echoes = [
        MemoryEcho(code=WHITE_CODE, similarity=0.5, resonance=0.9, strength=0.5, age_days=0.0),
        MemoryEcho(code="X" + WHITE_CODE[1:], similarity=0.4, resonance=0.9, strength=0.4, age_days=0.0),
    ]
    assert memory_loops(echoes, WHITE_CODE) == [WHITE_CODE]


def test_memory_report_carries_echo_context():
    result = SymbolicDecoder().decode(WHITE_CODE, memory=[_remembered()], now=NOW)
    echo = result.memory.echoes[0]
    assert echo.code == WHITE_CODE
    assert echo.context == {"narrative_tag": "first visit"}
    assert result.memory.resonance == pytest.approx(1.0)
    assert result.memory.decay == 0.0
    assert result.experience.emotional.resonance.memory_count == 1


def test_rendering_present():
    rendering = SymbolicDecoder().decode(WHITE_CODE).rendering
    assert rendering is not None
    assert rendering.hints["composition"]["rule"] == "central"
    assert rendering.color_palette.key_colors == ["red", "blue", "green"]
