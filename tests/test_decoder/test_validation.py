"""Format checks, confusable correction and segmentation."""

import pytest

from percepta.engine.decoder.segmenter import segment_code
from percepta.engine.decoder.validator import SymbolValidator, validate_format
from percepta.engine.symbols.checksum import append_checksum
from percepta.errors import ChecksumError, FormatError
from tests.conftest import WHITE_32_COMPACT_PAYLOAD

WHITE_CODE = append_checksum(WHITE_32_COMPACT_PAYLOAD)


def _bump_checksum(code: str) -> str:
    last = chr(65 + (ord(code[-1]) - 65 + 1) % 26)
    return code[:-1] + last


def test_validate_format_trims():
    assert validate_format(f"  {WHITE_CODE}\n") == WHITE_CODE


@pytest.mark.parametrize("code", ["", "ABC", "A" * 40, "FLQ000000W0%ANK6~", None, 12345])
def test_validate_format_rejects(code):
    with pytest.raises(FormatError):
        validate_format(code)


def test_valid_code_passes_unchanged():
    result = SymbolValidator().check(WHITE_CODE)
    assert result.valid
    assert not result.corrected
    assert result.payload == WHITE_32_COMPACT_PAYLOAD


def test_zero_read_as_letter_o_is_corrected():
    corrupted = WHITE_CODE[:3] + "O" + WHITE_CODE[4:]
    result = SymbolValidator().check(corrupted)
    assert result.corrected
    assert result.corrected_position == 3
    assert result.code == WHITE_CODE


def test_unrepairable_checksum():
    with pytest.raises(ChecksumError):
        SymbolValidator().check(_bump_checksum(WHITE_CODE))


def test_validate_and_correct_reports_instead_of_raising():
    result = SymbolValidator().validate_and_correct(_bump_checksum(WHITE_CODE))
    assert not result.valid
    assert result.error.startswith("ChecksumError")

    result = SymbolValidator().validate_and_correct(None)
    assert not result.valid
    assert result.code == ""
    assert result.error.startswith("FormatError")


def test_segment_compact_payload():
    mode, segments = segment_code(WHITE_32_COMPACT_PAYLOAD)
    assert mode == "compact"
    assert segments == {"scene": "FLQ", "objects": "000000", "spatial": "W0%A", "emotion": "NK6"}


def test_segment_rejects_off_budget_length():
    with pytest.raises(FormatError):
        segment_code("A" * 20)


def test_segment_rejects_foreign_object_symbols():
    payload = "FLQ" + "00X000" + "W0%A" + "NK6"
    with pytest.raises(FormatError):
        segment_code(payload)


def test_segment_rejects_foreign_spatial_symbols():
    payload = "FLQ" + "000000" + "W0%a" + "NK6"
    with pytest.raises(FormatError):
        segment_code(payload)
