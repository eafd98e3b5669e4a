"""Codec error taxonomy.

Encode side: ``InputError`` and ``EncodingInvariantError`` propagate to the
caller. Decode side: ``FormatError``, ``ChecksumError`` and
``ReconstructionError`` are raised internally and always converted into a
low-confidence fallback experience at the decoder boundary.
"""

from __future__ import annotations


class PerceptaError(Exception):
    """Base class for all codec errors."""


class InputError(PerceptaError, ValueError):
    """Malformed or undersized image, rejected before analysis."""


class EncodingInvariantError(PerceptaError, RuntimeError):
    """The encoder produced a code that breaks its own invariants.

    Signals a defect in the allocator, never bad external input.
    """


class FormatError(PerceptaError, ValueError):
    """Code outside the alphabet, length bounds or segment partition."""


class ChecksumError(PerceptaError, ValueError):
    """Checksum mismatch that no confusable substitution could repair."""


class ReconstructionError(PerceptaError):
    """A decode stage failed after validation succeeded."""

    def __init__(self, message: str, stage: str = "") -> None:
        super().__init__(message)
        self.stage = stage
