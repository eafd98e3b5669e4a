"""Canonical symbol vocabulary — budgets, segment alphabets and value tables.

Every table here is shared by the allocator and the decoder; changing any
of them changes the meaning of existing codes, so bump VOCABULARY_VERSION.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass

from percepta.utils.math_helpers import string_hash

VOCABULARY_VERSION = 1

UPPER = string.ascii_uppercase
LOWER = string.ascii_lowercase
DIGITS = string.digits
MARKS = "!@#$%"
RESERVED_MARKS = "αβγδ"

# Σ, the full code alphabet
ALPHABET = UPPER + LOWER + DIGITS + MARKS + RESERVED_MARKS
CODE_PATTERN = re.compile(f"^[{re.escape(ALPHABET)}]{{16,33}}$")

MODES = ("compact", "balanced", "rich")
SEGMENT_NAMES = ("scene", "objects", "spatial", "emotion")


@dataclass(frozen=True)
class SegmentBudget:
    total: int
    scene: int
    objects: int
    spatial: int
    emotion: int

    def boundaries(self) -> dict[str, tuple[int, int]]:
        """Segment name → (start, end) slice into the payload."""
        out: dict[str, tuple[int, int]] = {}
        pos = 0
        for name in SEGMENT_NAMES:
            size = getattr(self, name)
            out[name] = (pos, pos + size)
            pos += size
        return out


BUDGETS: dict[str, SegmentBudget] = {
    "compact": SegmentBudget(total=16, scene=3, objects=6, spatial=4, emotion=3),
    "balanced": SegmentBudget(total=26, scene=4, objects=12, spatial=6, emotion=4),
    "rich": SegmentBudget(total=32, scene=4, objects=14, spatial=8, emotion=6),
}

# --- Scene ---
SCENE_TYPES = ("general", "natural", "architectural", "portrait", "complex", "minimal", "pattern", "urban")
SCENE_ALPHABET = "ABCDEFGH"
LIGHTING = ("neutral", "bright", "dark", "warm", "cool")
LIGHTING_ALPHABET = "KLMNO"
MOODS = ("neutral", "joyful", "peaceful", "tense", "melancholic")
MOOD_ALPHABET = "QRSTU"
COMPLEXITY = ("low", "medium", "high", "extreme")
COMPLEXITY_ALPHABET = RESERVED_MARKS

# --- Objects ---
CATEGORY_ALPHABET = "abcdefghijklmnopq"
POSITION_ALPHABET = "rstuvwxyz"
OBJECT_PAD = "0"
OBJECT_ALPHABET = LOWER + OBJECT_PAD

# category letter → (primary, variants)
OBJECT_CATEGORIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "a": ("person", ("figure", "silhouette", "presence")),
    "b": ("animal", ("creature", "beast")),
    "c": ("bird", ("flying-thing", "messenger")),
    "d": ("tree", ("growth", "shelter")),
    "e": ("flower", ("bloom", "beauty")),
    "f": ("water", ("flow", "reflection")),
    "g": ("stone", ("permanence", "obstacle")),
    "h": ("mountain", ("ascent", "challenge")),
    "i": ("door", ("passage", "threshold")),
    "j": ("window", ("view", "barrier")),
    "k": ("bridge", ("connection", "crossing")),
    "l": ("wall", ("boundary", "protection")),
    "m": ("tower", ("height", "isolation")),
    "n": ("light", ("illumination", "hope")),
    "o": ("shadow", ("darkness", "unknown")),
    "p": ("spiral", ("journey", "cycle")),
    "q": ("mystery", ("unknown", "question")),
}

# shape type → candidate category letters
SHAPE_CATEGORIES: dict[str, str] = {
    "circle": "nepg",
    "square": "jil",
    "rectangle": "ijlm",
    "triangle": "hm",
    "horizontal-line": "fkl",
    "vertical-line": "mda",
    "complex": "bdq",
    "organic": "acbeo",
    "unknown": "q",
}

# 3×3 grid, row-major
GRID_ZONES = (
    "top-left", "top", "top-right",
    "left", "center", "right",
    "bottom-left", "bottom", "bottom-right",
)

# --- Spatial ---
FOCUS_ALPHABET = "WXYZ"
FOCUS_SYMBOLS: dict[str, str] = {
    "center": "W",
    "top": "X", "top-left": "X", "top-right": "X",
    "north": "X", "northeast": "X", "northwest": "X",
    "bottom": "Y", "bottom-left": "Y", "bottom-right": "Y",
    "south": "Y", "southeast": "Y", "southwest": "Y",
    "left": "Z", "right": "Z", "east": "Z", "west": "Z",
}
DISTRIBUTIONS = ("balanced", "asymmetric", "radial", "diagonal", "clustered")
DISTRIBUTION_ALPHABET = "01234"
DEPTH_DISTRIBUTIONS = ("forward", "distant", "balanced", "centered", "flat")
DEPTH_ALPHABET = MARKS
SPATIAL_PAD = "X"
SPATIAL_ALPHABET = FOCUS_ALPHABET + DISTRIBUTION_ALPHABET + DEPTH_ALPHABET + UPPER

# --- Emotion ---
TRAJECTORIES = ("stable", "escalating", "calming", "brightening", "darkening", "intensifying", "relaxing")
TRAJECTORY_ALPHABET = "6789234"
EMOTION_PAD = "5"


def _normalize(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", value.lower())


def symbol_for(value: str, table: tuple[str, ...], alphabet: str) -> str:
    """Known values map by table index; anything else hashes into the alphabet."""
    if value in table:
        return alphabet[table.index(value)]
    return alphabet[string_hash(_normalize(value)) % len(alphabet)]


def value_for(symbol: str, table: tuple[str, ...], alphabet: str, default: str) -> str:
    if len(symbol) != 1:
        return default
    idx = alphabet.find(symbol)
    if idx < 0 or idx >= len(table):
        return default
    return table[idx]


def slot_alphabets(mode: str) -> list[str]:
    """Legal characters for every payload position in ``mode``.

    Used to rank correction candidates: a character outside its slot's
    alphabet is the most likely corruption.
    """
    budget = BUDGETS[mode]
    scene = [SCENE_ALPHABET, LIGHTING_ALPHABET, MOOD_ALPHABET, COMPLEXITY_ALPHABET][: budget.scene]
    objects = [OBJECT_ALPHABET] * budget.objects
    spatial = [FOCUS_ALPHABET, DISTRIBUTION_ALPHABET, DEPTH_ALPHABET, UPPER]
    spatial = spatial[: budget.spatial] + [SPATIAL_PAD] * (budget.spatial - len(spatial))
    emotion = [UPPER, UPPER, TRAJECTORY_ALPHABET, UPPER]
    emotion = emotion[: budget.emotion] + [EMOTION_PAD] * (budget.emotion - len(emotion))
    return scene + objects + spatial + emotion


def mode_for_length(payload_length: int) -> str:
    if payload_length <= BUDGETS["compact"].total:
        return "compact"
    if payload_length <= BUDGETS["balanced"].total:
        return "balanced"
    return "rich"
