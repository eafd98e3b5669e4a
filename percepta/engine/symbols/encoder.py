"""Symbol allocation — turns a FeatureSet and EmotionState into a fixed-budget code.

Pure: no state beyond the vocabulary tables. Segment order is fixed:
scene ⊕ objects ⊕ spatial ⊕ emotion ⊕ checksum.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from percepta.engine.context import ColorFeatures, EmotionState, FeatureSet, Shape, SpatialFeatures
from percepta.engine.symbols import vocabulary as vocab
from percepta.engine.symbols.checksum import append_checksum
from percepta.errors import EncodingInvariantError
from percepta.utils.math_helpers import quantize_to_symbol, string_hash

logger = logging.getLogger(__name__)

# Scene classification thresholds (edge density)
_DENSE_EDGES = 0.3
_SPARSE_EDGES = 0.05
_WARM_NATURAL = 0.6
_PORTRAIT_FILL = 0.25
_PATTERN_MIN_SHAPES = 4

# Lighting: dominant cluster brightness, then temperature
_BRIGHT = 0.8
_DARK = 0.2
_WARM = 0.7
_COOL = 0.3

# Mood quadrants on blended valence/arousal
_HIGH = 0.6
_LOW = 0.4

# Object token length by priority: >0.8 → 1 letter, >0.5 → 2, else 3
_PRIORITY_TIERS = ((0.8, 1), (0.5, 2))

# Depth distribution: share of shapes in one bucket
_DEPTH_MAJORITY = 0.6


def classify_scene(features: FeatureSet, width: int, height: int) -> str:
    shapes = features.shapes
    types = {s.type for s in shapes}
    density = features.edges.density
    if "organic" in types and features.colors.temperature > _WARM_NATURAL:
        return "natural"
    if "square" in types or "rectangle" in types:
        return "urban" if density > _DENSE_EDGES else "architectural"
    if len(shapes) == 1 and shapes[0].bbox_area > _PORTRAIT_FILL * width * height:
        return "portrait"
    if len(shapes) >= _PATTERN_MIN_SHAPES and len(types) == 1:
        return "pattern"
    if density > _DENSE_EDGES:
        return "complex"
    if density < _SPARSE_EDGES:
        return "minimal"
    return "general"


def classify_lighting(colors: ColorFeatures) -> str:
    brightness = colors.palette[0].brightness if colors.palette else 0.5
    if brightness > _BRIGHT:
        return "bright"
    if brightness < _DARK:
        return "dark"
    if colors.temperature > _WARM:
        return "warm"
    if colors.temperature < _COOL:
        return "cool"
    return "neutral"


def dominant_mood(emotion: EmotionState) -> str:
    v, a = emotion.valence, emotion.arousal
    if v > _HIGH and a > _HIGH:
        return "joyful"
    if v > _HIGH and a < _LOW:
        return "peaceful"
    if v < _LOW and a > _HIGH:
        return "tense"
    if v < _LOW and a < _LOW:
        return "melancholic"
    return "neutral"


def scene_complexity(features: FeatureSet) -> str:
    c = (
        min(1.0, len(features.shapes) / 10) * 0.4
        + features.edges.density * 0.4
        + min(1.0, len(features.colors.clusters) / 5) * 0.2
    )
    if c > 0.85:
        return "extreme"
    if c > 0.7:
        return "high"
    if c > 0.3:
        return "medium"
    return "low"


def depth_distribution(depth_map: dict[str, list[int]]) -> str:
    counts = {k: len(v) for k, v in depth_map.items()}
    total = sum(counts.values())
    if total == 0:
        return "flat"
    if counts.get("foreground", 0) / total > _DEPTH_MAJORITY:
        return "forward"
    if counts.get("background", 0) / total > _DEPTH_MAJORITY:
        return "distant"
    if counts.get("midground", 0) / total > _DEPTH_MAJORITY:
        return "centered"
    return "balanced"


def object_priority(shape: Shape) -> float:
    return shape.saliency * shape.cultural_weight


def token_length(priority: float) -> int:
    for threshold, length in _PRIORITY_TIERS:
        if priority > threshold:
            return length
    return 3


def category_for(shape_type: str, zone: str) -> str:
    candidates = vocab.SHAPE_CATEGORIES.get(shape_type, vocab.SHAPE_CATEGORIES["unknown"])
    return candidates[string_hash(f"{shape_type}/{zone}") % len(candidates)]


def object_token(category: str, letters: int, zone_index: int) -> str:
    """Category letter, ``letters − 1`` derived modifiers, then a position letter."""
    alphabet = vocab.CATEGORY_ALPHABET
    base = alphabet.index(category)
    modifiers = "".join(alphabet[(base + i) % len(alphabet)] for i in range(1, letters))
    return category + modifiers + vocab.POSITION_ALPHABET[zone_index]


def _zone_index(shape: Shape, width: int, height: int) -> int:
    gx = min(2, max(0, int(3 * shape.centroid[0] / width)))
    gy = min(2, max(0, int(3 * shape.centroid[1] / height)))
    return gy * 3 + gx


def encode_scene(labels: dict[str, str], size: int) -> str:
    slots = [
        vocab.symbol_for(labels["scene"], vocab.SCENE_TYPES, vocab.SCENE_ALPHABET),
        vocab.symbol_for(labels["lighting"], vocab.LIGHTING, vocab.LIGHTING_ALPHABET),
        vocab.symbol_for(labels["mood"], vocab.MOODS, vocab.MOOD_ALPHABET),
        vocab.symbol_for(labels["complexity"], vocab.COMPLEXITY, vocab.COMPLEXITY_ALPHABET),
    ]
    return "".join(slots[:size])


def encode_objects(shapes: list[Shape], size: int, width: int, height: int) -> str:
    ranked = sorted(shapes, key=object_priority, reverse=True)
    out = ""
    for shape in ranked:
        zone_index = _zone_index(shape, width, height)
        category = category_for(shape.type, vocab.GRID_ZONES[zone_index])
        token = object_token(category, token_length(object_priority(shape)), zone_index)
        if len(out) + len(token) > size:
            break
        out += token
    return out.ljust(size, vocab.OBJECT_PAD)


def encode_spatial(spatial: SpatialFeatures, size: int) -> str:
    slots = [
        vocab.FOCUS_SYMBOLS.get(spatial.primary_focus, vocab.FOCUS_ALPHABET[0]),
        vocab.symbol_for(spatial.distribution_pattern, vocab.DISTRIBUTIONS, vocab.DISTRIBUTION_ALPHABET),
        vocab.symbol_for(depth_distribution(spatial.depth_map), vocab.DEPTH_DISTRIBUTIONS, vocab.DEPTH_ALPHABET),
        quantize_to_symbol(spatial.foreground_weight),
    ]
    return "".join(slots[:size]).ljust(size, vocab.SPATIAL_PAD)


def encode_emotion(emotion: EmotionState, size: int) -> str:
    slots = [
        quantize_to_symbol(emotion.valence),
        quantize_to_symbol(emotion.arousal),
        vocab.symbol_for(emotion.trajectory, vocab.TRAJECTORIES, vocab.TRAJECTORY_ALPHABET),
        quantize_to_symbol(emotion.resonance),
    ]
    return "".join(slots[:size]).ljust(size, vocab.EMOTION_PAD)


def check_partition(segments: dict[str, str], mode: str) -> None:
    """Raise EncodingInvariantError if a segment leaves its sub-alphabet or budget."""
    budget = vocab.BUDGETS[mode]
    for name in vocab.SEGMENT_NAMES:
        if len(segments[name]) != getattr(budget, name):
            raise EncodingInvariantError(
                f"{name} segment has {len(segments[name])} symbols, budget is {getattr(budget, name)}"
            )
    bad = set(segments["objects"]) - set(vocab.OBJECT_ALPHABET)
    if bad:
        raise EncodingInvariantError(f"object segment contains {sorted(bad)}")
    bad = set(segments["spatial"]) - set(vocab.SPATIAL_ALPHABET)
    if bad:
        raise EncodingInvariantError(f"spatial segment contains {sorted(bad)}")


@dataclass
class Allocation:
    code: str
    payload: str
    segments: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)


class SymbolEncoder:
    """Fixed-budget allocator over the canonical vocabulary."""

    def __init__(self, mode: str = "balanced") -> None:
        if mode not in vocab.BUDGETS:
            raise ValueError(f"Unknown mode {mode!r}; expected one of {vocab.MODES}")
        self.mode = mode
        self.budget = vocab.BUDGETS[mode]

    def describe(self, features: FeatureSet, emotion: EmotionState, width: int, height: int) -> dict[str, str]:
        return {
            "scene": classify_scene(features, width, height),
            "lighting": classify_lighting(features.colors),
            "mood": dominant_mood(emotion),
            "complexity": scene_complexity(features),
            "focus": features.spatial.primary_focus,
            "distribution": features.spatial.distribution_pattern,
            "depth": depth_distribution(features.spatial.depth_map),
            "trajectory": emotion.trajectory,
        }

    def encode(self, features: FeatureSet, emotion: EmotionState, width: int, height: int) -> Allocation:
        labels = self.describe(features, emotion, width, height)
        b = self.budget
        segments = {
            "scene": encode_scene(labels, b.scene),
            "objects": encode_objects(features.shapes, b.objects, width, height),
            "spatial": encode_spatial(features.spatial, b.spatial),
            "emotion": encode_emotion(emotion, b.emotion),
        }
        check_partition(segments, self.mode)
        payload = "".join(segments[name] for name in vocab.SEGMENT_NAMES)
        code = append_checksum(payload)
        logger.debug("Allocated %s code %s (%s)", self.mode, code, labels["scene"])
        return Allocation(code=code, payload=payload, segments=segments, labels=labels)
