"""Code validation and bounded correction.

The checksum detects corruption but cannot locate it, so repair is a search:
each confusable swap (0↔O, 1↔I, 5↔S) is tried at one position at a time and
the first candidate whose checksum verifies wins. Positions whose character
is illegal for its slot are tried first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from percepta.engine.symbols import vocabulary as vocab
from percepta.engine.symbols.checksum import CONFUSABLES, verify
from percepta.errors import ChecksumError, FormatError, PerceptaError

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    valid: bool
    code: str = ""
    payload: str = ""
    corrected: bool = False
    corrected_position: int | None = None
    error: str | None = None


def validate_format(code: str) -> str:
    """Trim and check alphabet and length bounds; raise FormatError otherwise."""
    if not isinstance(code, str):
        raise FormatError(f"code must be a string, got {type(code).__name__}")
    trimmed = code.strip()
    if not vocab.CODE_PATTERN.match(trimmed):
        raise FormatError(f"code {trimmed!r} is outside the alphabet or 16-33 symbols")
    return trimmed


def _candidate_positions(code: str) -> list[int]:
    payload_len = len(code) - 1
    mode = vocab.mode_for_length(payload_len)
    if vocab.BUDGETS[mode].total != payload_len:
        return list(range(len(code)))
    slots = vocab.slot_alphabets(mode) + [vocab.UPPER]
    suspicious = [i for i, ch in enumerate(code) if ch not in slots[i]]
    rest = [i for i in range(len(code)) if i not in suspicious]
    return suspicious + rest


def correct(code: str) -> tuple[str, int]:
    """Find a single confusable swap that makes the checksum verify."""
    for pos in _candidate_positions(code):
        swap = CONFUSABLES.get(code[pos])
        if swap is None:
            continue
        candidate = code[:pos] + swap + code[pos + 1 :]
        if verify(candidate):
            return candidate, pos
    raise ChecksumError(f"checksum mismatch in {code!r} and no confusable swap repairs it")


class SymbolValidator:
    """Shared by the encoder self-check and the decoder."""

    def check(self, code: str) -> ValidationResult:
        """Validate and correct, raising FormatError or ChecksumError on failure."""
        trimmed = validate_format(code)
        if verify(trimmed):
            return ValidationResult(valid=True, code=trimmed, payload=trimmed[:-1])
        fixed, pos = correct(trimmed)
        logger.warning("Corrected confusable symbol at position %d: %r → %r", pos, trimmed[pos], fixed[pos])
        return ValidationResult(
            valid=True,
            code=fixed,
            payload=fixed[:-1],
            corrected=True,
            corrected_position=pos,
        )

    def validate_and_correct(self, code: str) -> ValidationResult:
        """Like :meth:`check` but reports failure in the result instead of raising."""
        try:
            return self.check(code)
        except PerceptaError as e:
            return ValidationResult(
                valid=False,
                code=code if isinstance(code, str) else "",
                error=f"{type(e).__name__}: {e}",
            )
