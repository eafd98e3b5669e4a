"""Payload segmentation by the shared budget table."""

from __future__ import annotations

from percepta.engine.symbols import vocabulary as vocab
from percepta.errors import FormatError


def segment_code(payload: str) -> tuple[str, dict[str, str]]:
    """Split a payload into its four segments; return (mode, segments).

    The tier is chosen by length; anything that is not exactly a budget
    total, or that breaks the object/spatial sub-alphabets, is a FormatError.
    """
    mode = vocab.mode_for_length(len(payload))
    budget = vocab.BUDGETS[mode]
    if len(payload) != budget.total:
        raise FormatError(f"payload has {len(payload)} symbols; {mode} mode needs {budget.total}")

    segments = {name: payload[start:end] for name, (start, end) in budget.boundaries().items()}

    bad = set(segments["objects"]) - set(vocab.OBJECT_ALPHABET)
    if bad:
        raise FormatError(f"object segment {segments['objects']!r} contains {''.join(sorted(bad))!r}")
    bad = set(segments["spatial"]) - set(vocab.SPATIAL_ALPHABET)
    if bad:
        raise FormatError(f"spatial segment {segments['spatial']!r} contains {''.join(sorted(bad))!r}")
    return mode, segments
