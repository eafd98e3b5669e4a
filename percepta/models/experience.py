"""DecodedExperience — the structured output of a decode.

Every field carries a default so a fallback result is fully populated.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Lighting(BaseModel):
    quality: str = "soft"
    direction: str = "ambient"
    intensity: float = 0.4
    color: str = "neutral"


class MoodInfo(BaseModel):
    primary: str = "neutral"
    undertones: list[str] = Field(default_factory=list)


class Atmosphere(BaseModel):
    temperature: str = "neutral"  # warm, cool, neutral
    density: float = 0.5
    description: str = ""


class SceneModel(BaseModel):
    # Vocabulary scene type before cultural interpretation
    category: str = "general"
    type: str = "general"
    subtype: str = "general"
    lighting: Lighting = Field(default_factory=Lighting)
    mood: MoodInfo = Field(default_factory=MoodInfo)
    complexity: str = "medium"
    atmosphere: Atmosphere = Field(default_factory=Atmosphere)


class Position(BaseModel):
    x: float = 0.5
    y: float = 0.5
    zone: str = "center"


class ObjectModel(BaseModel):
    category: str
    symbol: str = ""
    label: str = ""
    variants: list[str] = Field(default_factory=list)
    form: list[str] = Field(default_factory=list)  # shape types that emit this category
    position: Position = Field(default_factory=Position)
    size: str = "medium"  # large, medium, small
    importance: float = 0.5
    archetypes: list[str] = Field(default_factory=list)
    cultural_significance: float = 1.0
    emotional_weight: float = 0.5
    memory_count: int = 0
    from_memory: bool = False
    opacity: float = 1.0
    morphing: bool = False
    morph_target: str | None = None
    morph_strength: float = 0.0


class FocusInfo(BaseModel):
    primary: str = "center"
    strength: float = 0.9
    type: str = "concentrated"


class DistributionInfo(BaseModel):
    pattern: str = "balanced"
    balance: float = 0.9
    tension: float = 0.1


class DepthLayers(BaseModel):
    foreground: float = 0.33
    midground: float = 0.33
    background: float = 0.67


class DepthInfo(BaseModel):
    distribution: str = "flat"
    foreground_weight: float = 0.33
    layers: DepthLayers = Field(default_factory=DepthLayers)
    perspective: str = "flat"
    atmosphere: str = "clear"


class Warping(BaseModel):
    type: str = "stretch"
    strength: float = 0.0
    epicenter: str = "center"


class SpatialModel(BaseModel):
    focus: FocusInfo = Field(default_factory=FocusInfo)
    distribution: DistributionInfo = Field(default_factory=DistributionInfo)
    depth: DepthInfo = Field(default_factory=DepthInfo)
    flow: str = "still"
    narrative: str = ""
    warping: Warping | None = None


class EmotionCurrent(BaseModel):
    valence: float = 0.5
    arousal: float = 0.5
    dominance: float = 0.5
    label: str = "neutral"


class TrajectoryInfo(BaseModel):
    direction: str = "stable"
    momentum: float = 0.0
    prediction: str = "continued-neutral"


class ResonanceInfo(BaseModel):
    strength: float = 0.3
    harmonics: list[float] = Field(default_factory=list)
    memory_count: int = 0


class EmotionalModel(BaseModel):
    current: EmotionCurrent = Field(default_factory=EmotionCurrent)
    trajectory: TrajectoryInfo = Field(default_factory=TrajectoryInfo)
    resonance: ResonanceInfo = Field(default_factory=ResonanceInfo)
    color: str = "#808080"
    texture: str = "smooth"


class TemporalFragment(BaseModel):
    snapshot_code: str
    duration_sec: float
    faded: bool = False


class TemporalModel(BaseModel):
    mode: str = "stable"
    coherence: float = 1.0
    fragments: list[TemporalFragment] = Field(default_factory=list)
    loops: list[str] = Field(default_factory=list)


class Experience(BaseModel):
    scene: SceneModel = Field(default_factory=SceneModel)
    objects: list[ObjectModel] = Field(default_factory=list)
    spatial: SpatialModel = Field(default_factory=SpatialModel)
    emotional: EmotionalModel = Field(default_factory=EmotionalModel)
    temporal: TemporalModel = Field(default_factory=TemporalModel)


class Narrative(BaseModel):
    primary: str = ""
    poetic: str = ""
    variations: list[str] = Field(default_factory=list)
    archetypal: str = "threshold"


class MemoryEcho(BaseModel):
    code: str
    similarity: float
    resonance: float
    strength: float
    age_days: float
    valence: float = 0.5
    arousal: float = 0.5
    context: dict[str, Any] = Field(default_factory=dict)


class MemoryReport(BaseModel):
    echoes: list[MemoryEcho] = Field(default_factory=list)
    resonance: float = 0.0
    decay: float = 0.0


class MoodPalette(BaseModel):
    hue: float = 0.0  # degrees
    saturation: float = 0.0
    brightness: float = 0.5
    adjective: str = "muted"


class ColorPalette(BaseModel):
    key_colors: list[str] = Field(default_factory=list)
    accent: str = "neutral"
    semantics: dict[str, str] = Field(default_factory=dict)


class FocalPoint(BaseModel):
    x: float
    y: float
    weight: float
    label: str = ""


class Rendering(BaseModel):
    hints: dict[str, Any] = Field(default_factory=dict)
    focus: list[FocalPoint] = Field(default_factory=list)
    mood_palette: MoodPalette = Field(default_factory=MoodPalette)
    color_palette: ColorPalette = Field(default_factory=ColorPalette)


class Metrics(BaseModel):
    entropy_bits_per_symbol: float = 0.0
    total_bits: int = 0
    length: int = 0


class DecodeMetadata(BaseModel):
    confidence: float = 0.0
    is_reliable: bool = False
    corrected: bool = False
    corrected_position: int | None = None
    mode: str = ""
    decoding_mode: str = "stable"
    culture: str = "universal"
    vocabulary_version: int = 1
    error: str | None = None
    stage_errors: dict[str, str] = Field(default_factory=dict)
    processing_time_ms: float = 0.0


class DecodedExperience(BaseModel):
    experience: Experience = Field(default_factory=Experience)
    narrative: Narrative = Field(default_factory=Narrative)
    memory: MemoryReport = Field(default_factory=MemoryReport)
    rendering: Rendering = Field(default_factory=Rendering)
    metrics: Metrics = Field(default_factory=Metrics)
    metadata: DecodeMetadata = Field(default_factory=DecodeMetadata)
