"""Reconstruction tables — fixed lookups that invert the allocator's vocabulary."""

from __future__ import annotations

from percepta.engine.symbols import vocabulary as vocab

# lighting label → (quality, direction, intensity, color)
LIGHTING: dict[str, tuple[str, str, float, str]] = {
    "neutral": ("natural", "overhead", 0.7, "neutral"),
    "bright": ("harsh", "direct", 0.9, "white"),
    "dark": ("dramatic", "backlit", 0.3, "contrast"),
    "warm": ("warm", "side", 0.6, "golden"),
    "cool": ("cool", "diffuse", 0.5, "blue"),
}
DEFAULT_LIGHTING = ("soft", "ambient", 0.4, "neutral")

MOOD_UNDERTONES: dict[str, tuple[str, ...]] = {
    "neutral": ("calm", "observant"),
    "joyful": ("lightness", "anticipation"),
    "peaceful": ("stillness", "contentment"),
    "tense": ("unease", "alertness"),
    "melancholic": ("longing", "remembrance"),
}
# Extra undertone contributed by the light quality
LIGHTING_UNDERTONES: dict[str, str] = {
    "dramatic": "mystery",
    "warm": "nostalgia",
    "cool": "distance",
    "harsh": "exposure",
}

# focus symbol → (zone, strength, type)
FOCUS: dict[str, tuple[str, float, str]] = {
    "W": ("center", 0.9, "concentrated"),
    "X": ("upper-third", 0.7, "elevated"),
    "Y": ("lower-third", 0.7, "grounded"),
    "Z": ("edges", 0.6, "dispersed"),
}

# distribution pattern → (balance, tension)
DISTRIBUTION: dict[str, tuple[float, float]] = {
    "balanced": (0.9, 0.1),
    "asymmetric": (0.4, 0.6),
    "radial": (0.7, 0.3),
    "diagonal": (0.5, 0.5),
    "clustered": (0.3, 0.7),
}

# depth distribution → (perspective, atmospheric perspective)
DEPTH: dict[str, tuple[str, str]] = {
    "forward": ("intimate", "clear"),
    "distant": ("panoramic", "hazy"),
    "balanced": ("layered", "soft"),
    "centered": ("staged", "soft"),
    "flat": ("flat", "clear"),
}

# (focus type, distribution pattern) → visual flow; otherwise by tension
FLOW: dict[tuple[str, str], str] = {
    ("concentrated", "radial"): "radiating",
    ("concentrated", "clustered"): "contracting",
    ("dispersed", "balanced"): "expanding",
    ("elevated", "diagonal"): "rising",
    ("grounded", "diagonal"): "falling",
}

SPATIAL_PHRASES: dict[str, str] = {
    "center": "Everything gathers toward the center",
    "upper-third": "The eye is drawn upward",
    "lower-third": "Weight settles low in the frame",
    "edges": "Attention scatters to the edges",
}

# complexity label → atmospheric density
COMPLEXITY_DENSITY: dict[str, float] = {"low": 0.25, "medium": 0.5, "high": 0.75, "extreme": 0.95}

# token letters → size tier and its base importance
SIZES: dict[int, tuple[str, float]] = {1: ("large", 0.9), 2: ("medium", 0.65), 3: ("small", 0.35)}

TRAJECTORY_MOMENTUM: dict[str, float] = {
    "stable": 0.0,
    "escalating": 0.8,
    "calming": -0.6,
    "brightening": 0.5,
    "darkening": -0.5,
    "intensifying": 0.7,
    "relaxing": -0.4,
}

# Narrative archetypes and the object categories that evoke them
ARCHETYPES: dict[str, tuple[str, ...]] = {
    "journey": ("spiral", "path", "door", "bridge"),
    "transformation": ("butterfly", "fire", "water", "mirror"),
    "conflict": ("shadow", "wall", "storm", "divide"),
    "sanctuary": ("tree", "circle", "light", "embrace"),
    "mystery": ("fog", "veil", "depth", "question", "mystery"),
}
DEFAULT_ARCHETYPE = "threshold"

# emotion label → the form objects drift toward while dreaming
MORPH_TARGETS: dict[str, str] = {
    "excited": "light",
    "content": "flower",
    "anxious": "shadow",
    "melancholic": "water",
    "neutral": "mystery",
}

MOOD_PALETTE_ADJECTIVES: dict[tuple[int, int], str] = {
    # (valence band, arousal high) → adjective; bands: 0 low, 1 mid, 2 high
    (2, 1): "vibrant",
    (2, 0): "serene",
    (0, 1): "anxious",
    (0, 0): "somber",
    (1, 1): "restless",
    (1, 0): "neutral",
}

# Bits carried by one symbol of each character class
SYMBOL_BITS: tuple[tuple[str, int], ...] = (
    (vocab.UPPER, 5),
    (vocab.LOWER, 5),
    (vocab.DIGITS, 4),
    (vocab.MARKS, 3),
    (vocab.RESERVED_MARKS, 4),
)
FALLBACK_BITS = 6


def archetypes_for(category: str) -> list[str]:
    return [name for name, members in ARCHETYPES.items() if category in members]


def forms_for(category_letter: str) -> list[str]:
    """Shape types whose allocation table can emit ``category_letter``."""
    return [shape for shape, letters in vocab.SHAPE_CATEGORIES.items() if category_letter in letters]


def emotion_label(valence: float, arousal: float) -> str:
    """Russell circumplex quadrant."""
    if valence > 0.6 and arousal > 0.6:
        return "excited"
    if valence > 0.6 and arousal < 0.4:
        return "content"
    if valence < 0.4 and arousal > 0.6:
        return "anxious"
    if valence < 0.4 and arousal < 0.4:
        return "melancholic"
    return "neutral"


def mood_hsb(valence: float, arousal: float) -> tuple[float, float, float]:
    """Hue (degrees), saturation, brightness for a valence/arousal pair.

    Calm negative sits at blue-violet (270°); positive valence and high
    arousal both rotate toward red.
    """
    hue = (360.0 * (0.75 + 0.25 * valence - 0.25 * arousal)) % 360.0
    return hue, 0.4 + 0.4 * arousal, 0.4 + 0.4 * valence


def mood_adjective(valence: float, arousal: float) -> str:
    band = 2 if valence > 0.66 else 0 if valence < 0.33 else 1
    return MOOD_PALETTE_ADJECTIVES[(band, int(arousal > 0.66))]
