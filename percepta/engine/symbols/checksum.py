"""Integrity symbol — a single weighted modular sum over the payload.

Detects most single-character corruptions; it carries no error-correcting
capacity of its own. Repair is limited to the confusable swaps below.
"""

from __future__ import annotations

# Visually confusable pairs tried during correction
CONFUSABLES: dict[str, str] = {"0": "O", "O": "0", "1": "I", "I": "1", "5": "S", "S": "5"}


def checksum(payload: str) -> str:
    total = sum(ord(ch) * (i + 1) for i, ch in enumerate(payload))
    return chr(65 + total % 26)


def append_checksum(payload: str) -> str:
    return payload + checksum(payload)


def verify(code: str) -> bool:
    """True when the trailing symbol matches the checksum of the rest."""
    if len(code) < 2:
        return False
    return checksum(code[:-1]) == code[-1]
