"""Cultural grammars — closed registry of color, shape and scene meaning tables.

A grammar is immutable. Hybrids come from ``blend(a, b, weight)``, which
interpolates every numeric weight linearly; a key missing on one side counts
as the neutral 1.0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from percepta.utils.colorspace import pairwise_delta_e, rgb_to_lab
from percepta.utils.math_helpers import lerp

logger = logging.getLogger(__name__)

DEFAULT_CULTURE = "universal"


@dataclass(frozen=True)
class ColorMeaning:
    weight: float
    tag: str


@dataclass(frozen=True)
class CulturalGrammar:
    name: str
    colors: dict[str, ColorMeaning] = field(default_factory=dict)
    spatial_priority: str = "cartesian"
    shape_weights: dict[str, float] = field(default_factory=dict)
    # scene type → (interpreted type, subtype)
    scene_interpretations: dict[str, tuple[str, str]] = field(default_factory=dict)
    object_significance: dict[str, float] = field(default_factory=dict)
    # object category → localized label
    object_labels: dict[str, str] = field(default_factory=dict)

    @property
    def is_radial(self) -> bool:
        return self.spatial_priority == "radial"

    def shape_weight(self, shape_type: str) -> float:
        return self.shape_weights.get(shape_type, 1.0)

    def interpret_scene(self, scene_type: str) -> tuple[str, str]:
        return self.scene_interpretations.get(scene_type, (scene_type, "general"))

    def significance(self, category: str) -> float:
        return self.object_significance.get(category, 1.0)

    def label(self, category: str) -> str:
        return self.object_labels.get(category, category)


GRAMMARS: dict[str, CulturalGrammar] = {
    "universal": CulturalGrammar(
        name="universal",
        colors={
            "red": ColorMeaning(1.0, "passion"),
            "blue": ColorMeaning(1.0, "calm"),
            "green": ColorMeaning(1.0, "nature"),
            "white": ColorMeaning(1.0, "purity"),
            "black": ColorMeaning(1.0, "mystery"),
        },
        shape_weights={"circle": 1.0, "rectangle": 0.8, "triangle": 0.9, "organic": 1.1},
    ),
    "japanese": CulturalGrammar(
        name="japanese",
        colors={
            "red": ColorMeaning(1.2, "life"),
            "white": ColorMeaning(1.3, "death"),
            "black": ColorMeaning(0.8, "formality"),
        },
        shape_weights={"circle": 1.2, "organic": 1.5},
        scene_interpretations={
            "architectural": ("interior", "wa"),
            "natural": ("nature", "mono-no-aware"),
            "minimal": ("emptiness", "ma"),
        },
        object_significance={"tree": 1.5, "water": 1.3, "stone": 1.2},
        object_labels={
            "tree": "pine",
            "water": "stream",
            "stone": "garden-stone",
            "light": "lantern",
            "door": "torii",
        },
    ),
    "norse": CulturalGrammar(
        name="norse",
        colors={
            "red": ColorMeaning(1.3, "battle"),
            "blue": ColorMeaning(0.9, "ice"),
            "gold": ColorMeaning(1.4, "glory"),
        },
        spatial_priority="radial",
        shape_weights={"triangle": 1.3, "square": 1.2, "rectangle": 1.2},
        scene_interpretations={
            "natural": ("landscape", "mythic"),
            "architectural": ("hall", "sacred"),
        },
        object_significance={"tree": 2.0, "animal": 1.8, "bird": 1.7},
        object_labels={
            "tree": "yggdrasil",
            "animal": "wolf",
            "bird": "raven",
            "mountain": "jotunheim peak",
            "light": "aurora",
        },
    ),
}

# Reference palette for nearest-color naming
REFERENCE_COLORS: dict[str, tuple[int, int, int]] = {
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "white": (255, 255, 255),
    "black": (0, 0, 0),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "gold": (255, 215, 0),
}
_REFERENCE_NAMES = tuple(REFERENCE_COLORS)
_REFERENCE_LAB = rgb_to_lab(np.asarray([REFERENCE_COLORS[n] for n in _REFERENCE_NAMES]))


def nearest_color_name(rgb: tuple[int, int, int]) -> str:
    """Closest reference color under CIEDE2000."""
    lab = rgb_to_lab(np.asarray([rgb]))
    dist = pairwise_delta_e(lab, _REFERENCE_LAB)[0]
    return _REFERENCE_NAMES[int(np.argmin(dist))]


def _blend_weights(a: dict[str, float], b: dict[str, float], weight: float) -> dict[str, float]:
    return {k: lerp(a.get(k, 1.0), b.get(k, 1.0), weight) for k in sorted(set(a) | set(b))}


def blend(a: CulturalGrammar, b: CulturalGrammar, weight: float = 0.5) -> CulturalGrammar:
    """Linear interpolation of two grammars; ``weight`` is the share of ``b``.

    Tags, labels and the spatial priority come from the dominant side
    (``a`` on a tie), falling back to the other side where it is silent.
    """
    weight = max(0.0, min(1.0, weight))
    major, minor = (b, a) if weight > 0.5 else (a, b)

    colors: dict[str, ColorMeaning] = {}
    for key in sorted(set(a.colors) | set(b.colors)):
        wa = a.colors[key].weight if key in a.colors else 1.0
        wb = b.colors[key].weight if key in b.colors else 1.0
        tag = (major.colors.get(key) or minor.colors[key]).tag
        colors[key] = ColorMeaning(weight=lerp(wa, wb, weight), tag=tag)

    scenes = {**minor.scene_interpretations, **major.scene_interpretations}
    labels = {**minor.object_labels, **major.object_labels}

    return CulturalGrammar(
        name=f"{a.name}+{b.name}",
        colors=colors,
        spatial_priority=major.spatial_priority,
        shape_weights=_blend_weights(a.shape_weights, b.shape_weights, weight),
        scene_interpretations=scenes,
        object_significance=_blend_weights(a.object_significance, b.object_significance, weight),
        object_labels=labels,
    )


def get_grammar(name: str | None) -> CulturalGrammar:
    """Registry lookup; unknown names fall back to universal."""
    key = (name or DEFAULT_CULTURE).strip().lower()
    grammar = GRAMMARS.get(key)
    if grammar is None:
        logger.warning("Unknown culture %r, falling back to %s", name, DEFAULT_CULTURE)
        return GRAMMARS[DEFAULT_CULTURE]
    return grammar


def resolve_culture(culture: str | None, blend_weight: float = 0.5) -> CulturalGrammar:
    """Resolve a culture key or an ``"a+b"`` hybrid into one grammar."""
    if culture and "+" in culture:
        left, _, right = culture.partition("+")
        return blend(get_grammar(left), get_grammar(right), blend_weight)
    return get_grammar(culture)
