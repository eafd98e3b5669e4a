"""Emotion analysis — valence/arousal/dominance from visual features.

  valence   = σ(temperature − 0.5 + 0.3·harmony)
  arousal   = σ(edge density·orientation entropy + asymmetry − 0.5)
  dominance = σ(central mass − 0.5)

The visual reading is blended 0.7/0.3 with caller context. The analyzer keeps
the last ten visual readings; the trajectory label compares the mean step
across the last three against ±0.1.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping

from percepta.engine.context import EmotionState, FeatureSet
from percepta.utils.math_helpers import clamp01, sigmoid

logger = logging.getLogger(__name__)

BUFFER_SIZE = 10
VISUAL_WEIGHT = 0.7
TREND_WINDOW = 3
TREND_THRESHOLD = 0.1
# Missing context dimensions read as neutral
NEUTRAL = 0.5


def visual_emotion(features: FeatureSet) -> EmotionState:
    edge_chaos = features.edges.density * features.edges.entropy
    return EmotionState(
        valence=sigmoid(features.colors.temperature - 0.5 + 0.3 * features.colors.harmony),
        arousal=sigmoid(edge_chaos + features.spatial.asymmetry - 0.5),
        dominance=sigmoid(features.spatial.central_mass - 0.5),
    )


def emotional_resonance(features: FeatureSet) -> float:
    """mean(palette emotional weight, 0.5 + 0.5·asymmetry, edge density)."""
    color = features.colors.mean_emotional_weight
    spatial = 0.5 + 0.5 * features.spatial.asymmetry
    return clamp01((color + spatial + features.edges.density) / 3)


def classify_trajectory(dv: float, da: float) -> str:
    if abs(dv) < TREND_THRESHOLD and abs(da) < TREND_THRESHOLD:
        return "stable"
    if dv > TREND_THRESHOLD and da > TREND_THRESHOLD:
        return "escalating"
    if dv < -TREND_THRESHOLD and da < -TREND_THRESHOLD:
        return "calming"
    if dv > TREND_THRESHOLD:
        return "brightening"
    if dv < -TREND_THRESHOLD:
        return "darkening"
    if da > TREND_THRESHOLD:
        return "intensifying"
    return "relaxing"


class EmotionAnalyzer:
    """Stateful affect reader owned by one PerceptualSystem."""

    def __init__(self, buffer_size: int = BUFFER_SIZE) -> None:
        self._history: deque[EmotionState] = deque(maxlen=buffer_size)

    @property
    def history(self) -> tuple[EmotionState, ...]:
        return tuple(self._history)

    def reset(self) -> None:
        self._history.clear()

    def trajectory(self) -> str:
        if len(self._history) < 2:
            return "stable"
        recent = list(self._history)[-TREND_WINDOW:]
        steps = len(recent) - 1
        dv = sum(recent[i].valence - recent[i - 1].valence for i in range(1, len(recent))) / steps
        da = sum(recent[i].arousal - recent[i - 1].arousal for i in range(1, len(recent))) / steps
        return classify_trajectory(dv, da)

    def analyze(
        self,
        features: FeatureSet,
        context: Mapping[str, float | None] | None = None,
    ) -> tuple[EmotionState, EmotionState]:
        """Return (visual, blended) readings and record the visual one."""
        visual = visual_emotion(features)
        self._history.append(visual)

        ctx = context or {}

        def _ctx(key: str) -> float:
            value = ctx.get(key)
            return NEUTRAL if value is None else clamp01(value)

        w = VISUAL_WEIGHT
        blended = EmotionState(
            valence=clamp01(w * visual.valence + (1 - w) * _ctx("valence")),
            arousal=clamp01(w * visual.arousal + (1 - w) * _ctx("arousal")),
            dominance=clamp01(w * visual.dominance + (1 - w) * _ctx("dominance")),
            trajectory=self.trajectory(),
            resonance=emotional_resonance(features),
        )
        logger.debug(
            "Emotion: v=%.3f a=%.3f d=%.3f trajectory=%s",
            blended.valence,
            blended.arousal,
            blended.dominance,
            blended.trajectory,
        )
        return visual, blended
