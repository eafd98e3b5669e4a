"""Narrative generation — template prose for decoded experiences and encode hints.

Template choice is deterministic: the index within a bucket comes from
``string_hash`` of the payload (decode) or of the shape summary (encode), so
two decodes of the same code read the same.

Poetic buckets are the (valence > 0.5, arousal > 0.5) quadrants; the
``{element}`` slot takes the most important object's label, else
"empty space".
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from percepta.engine.context import EmotionState, FeatureSet
from percepta.engine.decoder import tables
from percepta.models.experience import (
    EmotionalModel,
    MemoryEcho,
    Narrative,
    ObjectModel,
    SceneModel,
    SpatialModel,
)
from percepta.models.responses import NarrativeHint
from percepta.utils.math_helpers import string_hash

logger = logging.getLogger(__name__)

EMPTY_ELEMENT = "empty space"

SCENE_TEMPLATES: dict[str, tuple[str, ...]] = {
    "general": ("In a space without edges", "Somewhere ordinary and open", "In a place half-noticed"),
    "natural": ("Among the living earth", "Where nature breathes", "In the wild's embrace"),
    "architectural": ("Within sheltering walls", "In the quiet interior", "Enclosed in familiar space"),
    "portrait": ("Face to face with a single presence", "Before one held figure", "In the company of one"),
    "complex": ("In a tangle of lines and voices", "Where everything happens at once", "Amid crowded detail"),
    "minimal": ("In near-emptiness", "Where little remains", "In a pale, quiet field"),
    "pattern": ("Among repeating forms", "Where one shape echoes itself", "In a rhythm of likeness"),
    "urban": ("Between hard edges and corners", "Where the city stacks itself", "In streets of angles"),
}
UNDEFINED_SCENE = ("In a space undefined",)

LIGHTING_DESCRIPTIONS: dict[str, str] = {
    "natural": "bathed in honest light",
    "warm": "glowing with golden warmth",
    "cool": "washed in ethereal blue",
    "dramatic": "carved by shadows and brilliance",
    "soft": "caressed by gentle illumination",
    "harsh": "exposed in unforgiving clarity",
}
UNKNOWN_LIGHTING = "lit by mysterious sources"

# (valence high, arousal high) → poetic templates
POETIC_TEMPLATES: dict[tuple[bool, bool], tuple[str, ...]] = {
    (True, True): ("Light dances through {element}", "Joy erupts from {element}", "Energy pulses in {element}"),
    (False, True): ("Shadows chase through {element}", "Tension coils around {element}", "Storm gathers in {element}"),
    (True, False): ("Peace settles over {element}", "Gentle warmth embraces {element}", "Quiet beauty rests in {element}"),
    (False, False): ("Melancholy pools in {element}", "Silence weighs upon {element}", "Memory fades through {element}"),
}

EMOTIONAL_TONES: dict[str, str] = {
    "excited": "Everything hums with bright energy",
    "content": "A calm contentment holds the moment",
    "anxious": "Something restless presses at the edges",
    "melancholic": "A quiet sadness lingers",
    "neutral": "The feeling stays even and unhurried",
}

HINT_HIGH = 0.7
HINT_LOW = 0.3


def _pick(options: Sequence[str], seed: str, offset: int = 0) -> str:
    return options[(string_hash(seed) + offset) % len(options)]


def poetic_bucket(valence: float, arousal: float) -> tuple[str, ...]:
    return POETIC_TEMPLATES[(valence > 0.5, arousal > 0.5)]


def describe_lighting(quality: str) -> str:
    return LIGHTING_DESCRIPTIONS.get(quality, UNKNOWN_LIGHTING)


def describe_objects(objects: Sequence[ObjectModel]) -> str:
    if not objects:
        return ""
    if len(objects) == 1:
        obj = objects[0]
        return f"A {obj.label} rests in the {obj.position.zone}."
    labels = [o.label for o in objects[:3]]
    listed = ", ".join(labels[:-1]) + f" and {labels[-1]}"
    return f"{listed[0].upper()}{listed[1:]} share the frame."


def archetypal_pattern(objects: Sequence[ObjectModel]) -> str:
    """Most frequent archetype among objects; ties go to table order."""
    counts = Counter(a for obj in objects for a in obj.archetypes)
    if not counts:
        return tables.DEFAULT_ARCHETYPE
    order = list(tables.ARCHETYPES)
    return max(counts, key=lambda name: (counts[name], -order.index(name)))


class NarrativeEngine:
    """Pure prose generator over a reconstructed experience."""

    def generate(
        self,
        scene: SceneModel,
        objects: Sequence[ObjectModel],
        spatial: SpatialModel,
        emotional: EmotionalModel,
        echoes: Sequence[MemoryEcho] = (),
        seed: str = "",
    ) -> Narrative:
        ranked = sorted(objects, key=lambda o: o.importance, reverse=True)
        element = ranked[0].label if ranked else EMPTY_ELEMENT
        current = emotional.current
        templates = SCENE_TEMPLATES.get(scene.category, UNDEFINED_SCENE)
        lighting = describe_lighting(scene.lighting.quality)
        tone = EMOTIONAL_TONES.get(current.label, EMOTIONAL_TONES["neutral"])
        bucket = poetic_bucket(current.valence, current.arousal)

        parts = [f"{_pick(templates, seed)}, {lighting}.", describe_objects(ranked)]
        if spatial.narrative:
            parts.append(f"{spatial.narrative}.")
        parts.append(f"{tone}.")
        primary = " ".join(p for p in parts if p)

        variations = [
            f"{_pick(templates, seed, 1)}, {lighting}. {tone}.",
            f"{_pick(templates, seed, 2)}; {spatial.narrative.lower() or 'the space holds still'}.",
        ]
        echo_line = _pick(bucket, seed, 1).format(element=element)
        if echoes:
            plural = "s" if len(echoes) > 1 else ""
            echo_line = f"It stirs {len(echoes)} earlier moment{plural}; {echo_line.lower()}"
        variations.append(echo_line)

        archetypal = archetypal_pattern(ranked)
        logger.debug("Narrative for %s: %s / %s", seed or "<unseeded>", scene.category, archetypal)
        return Narrative(
            primary=primary,
            poetic=_pick(bucket, seed).format(element=element),
            variations=variations,
            archetypal=archetypal,
        )


def _shape_summary(features: FeatureSet) -> str:
    counts = Counter(s.type for s in features.shapes)
    names = [f"{t}s" if n > 1 else t for t, n in counts.most_common(2)]
    return " and ".join(names)


def _hint_mood(v: float, a: float) -> str:
    if v > HINT_HIGH and a > HINT_HIGH:
        return "exhilarating and bright"
    if v > HINT_HIGH and a < HINT_LOW:
        return "peaceful and content"
    if v < HINT_LOW and a > HINT_HIGH:
        return "tense and urgent"
    if v < HINT_LOW and a < HINT_LOW:
        return "melancholic and still"
    return "balanced and neutral"


def narrative_hint(features: FeatureSet, emotion: EmotionState, color_name: str, complexity: str) -> NarrativeHint:
    """Short prose summary attached to an encode result."""
    shapes = features.shapes
    if not shapes:
        scene = "An abstract field of"
    elif len(shapes) == 1:
        scene = f"A solitary {shapes[0].type} within"
    elif len(shapes) < 4:
        scene = f"A few {_shape_summary(features)} arranged in"
    else:
        scene = f"A complex scene of {_shape_summary(features)} filling"
    if color_name:
        scene += f" {color_name}-tinted"
    scene += f" {complexity} space."

    v, a = emotion.valence, emotion.arousal
    mood = _hint_mood(v, a)
    feeling = f"The mood is {mood}"
    if emotion.trajectory != "stable":
        feeling += f", {emotion.trajectory}"
    feeling += "."

    element = shapes[0].type if shapes else EMPTY_ELEMENT
    poetic = _pick(poetic_bucket(v, a), f"{element}/{complexity}").format(element=element)
    return NarrativeHint(scene=scene, emotion=feeling, poetic=poetic, summary=f"{scene} {feeling}".strip())
