"""Vocabulary tables and the checksum."""

import pytest

from percepta.engine.symbols import vocabulary as vocab
from percepta.engine.symbols.checksum import append_checksum, checksum, verify
from tests.conftest import WHITE_32_COMPACT_PAYLOAD


@pytest.mark.parametrize("mode", vocab.MODES)
def test_budgets_partition_the_payload(mode):
    budget = vocab.BUDGETS[mode]
    assert budget.scene + budget.objects + budget.spatial + budget.emotion == budget.total
    bounds = budget.boundaries()
    assert bounds["scene"][0] == 0
    assert bounds["emotion"][1] == budget.total
    assert bounds["objects"][0] == bounds["scene"][1]


@pytest.mark.parametrize("mode", vocab.MODES)
def test_slot_alphabets_cover_every_position(mode):
    slots = vocab.slot_alphabets(mode)
    assert len(slots) == vocab.BUDGETS[mode].total
    assert all(set(s) <= set(vocab.ALPHABET) for s in slots)


def test_object_and_spatial_alphabets_are_disjoint_from_padding_rules():
    assert not set(vocab.CATEGORY_ALPHABET) & set(vocab.POSITION_ALPHABET)
    assert vocab.OBJECT_PAD in vocab.OBJECT_ALPHABET
    assert vocab.SPATIAL_PAD in vocab.SPATIAL_ALPHABET


def test_mode_for_length():
    assert vocab.mode_for_length(16) == "compact"
    assert vocab.mode_for_length(26) == "balanced"
    assert vocab.mode_for_length(32) == "rich"


def test_symbol_for_known_values_use_table_order():
    assert vocab.symbol_for("general", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET) == "A"
    assert vocab.symbol_for("urban", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET) == "H"
    assert vocab.symbol_for("extreme", vocab.COMPLEXITY, vocab.COMPLEXITY_ALPHABET) == "δ"


def test_symbol_for_unknown_values_hash_into_alphabet():
    first = vocab.symbol_for("Underwater Cave", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET)
    again = vocab.symbol_for("underwater-cave", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET)
    assert first in vocab.SCENE_ALPHABET
    assert first == again


def test_value_for():
    assert vocab.value_for("B", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET, "general") == "natural"
    assert vocab.value_for("Z", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET, "general") == "general"
    assert vocab.value_for("", vocab.SCENE_TYPES, vocab.SCENE_ALPHABET, "general") == "general"


def test_checksum_is_a_letter():
    assert checksum(WHITE_32_COMPACT_PAYLOAD) in vocab.UPPER


def test_verify():
    code = append_checksum(WHITE_32_COMPACT_PAYLOAD)
    assert len(code) == 17
    assert verify(code)
    assert not verify(code[:-1] + ("A" if code[-1] != "A" else "B"))
    assert not verify("A")


def test_checksum_detects_single_symbol_change():
    code = append_checksum(WHITE_32_COMPACT_PAYLOAD)
    tampered = code[:9] + "a" + code[10:]
    assert not verify(tampered)
