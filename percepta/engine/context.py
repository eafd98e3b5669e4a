"""Codec contexts — the mutable state objects flowing through encode and decode stages.

Per-shape results → Shape fields
Scene-level results → EncodingContext.* (edges, colors, spatial, saliency, emotion)
Decode-side reconstructions → DecodingContext.* (pydantic parts of DecodedExperience)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from percepta.engine.config import CodecConfig
from percepta.errors import InputError

if TYPE_CHECKING:
    from percepta.engine.affect.emotion import EmotionAnalyzer
    from percepta.engine.culture.grammar import CulturalGrammar
    from percepta.engine.decoder.validator import ValidationResult
    from percepta.learning.memory import MemoryEntry
    from percepta.models.experience import (
        EmotionalModel,
        MemoryReport,
        Metrics,
        Narrative,
        ObjectModel,
        Rendering,
        SceneModel,
        SpatialModel,
        TemporalModel,
    )

# Minimum side length on the strict encode path / the light path
MIN_SIDE_STRICT = 16
MIN_SIDE_LIGHT = 8


@dataclass
class RasterImage:
    """RGBA raster. ``data`` is a flat byte buffer or a (h, w, 4) uint8 array."""

    width: int
    height: int
    data: bytes | bytearray | NDArray[np.uint8]

    def validate(self, strict: bool = True) -> None:
        """Reject undersized or inconsistent images with ``InputError``."""
        min_side = MIN_SIDE_STRICT if strict else MIN_SIDE_LIGHT
        if not isinstance(self.width, (int, np.integer)) or not isinstance(self.height, (int, np.integer)):
            raise InputError("width and height must be integers")
        if self.width < min_side or self.height < min_side:
            raise InputError(
                f"image is {self.width}x{self.height}; both sides must be >= {min_side}"
            )
        expected = int(self.width) * int(self.height) * 4
        size = self.data.size if isinstance(self.data, np.ndarray) else len(self.data)
        if size != expected:
            raise InputError(f"buffer holds {size} bytes, expected {expected} (width*height*4)")

    def to_array(self) -> NDArray[np.uint8]:
        """(h, w, 4) uint8 view of the buffer."""
        if isinstance(self.data, np.ndarray):
            arr = self.data.astype(np.uint8, copy=False)
        else:
            arr = np.frombuffer(bytes(self.data), dtype=np.uint8)
        return arr.reshape(int(self.height), int(self.width), 4)

    @classmethod
    def from_array(cls, arr: NDArray) -> RasterImage:
        """Build from an (h, w, 3) or (h, w, 4) array; RGB gets an opaque alpha."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InputError(f"expected an (h, w, 3|4) array, got shape {arr.shape}")
        arr = arr.astype(np.uint8)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(width=arr.shape[1], height=arr.shape[0], data=np.ascontiguousarray(arr))

    @classmethod
    def coerce(cls, image: Any) -> RasterImage:
        """Accept a RasterImage or any object exposing width, height and data."""
        if isinstance(image, cls):
            return image
        if isinstance(image, dict):
            try:
                return cls(width=image["width"], height=image["height"], data=image["data"])
            except KeyError as e:
                raise InputError(f"image mapping lacks {e.args[0]!r}") from e
        for attr in ("width", "height", "data"):
            if not hasattr(image, attr):
                raise InputError(f"image object lacks {attr!r}")
        return cls(width=image.width, height=image.height, data=image.data)


@dataclass
class Shape:
    """One traced contour and everything computed about it."""

    # Nx2 array of (x, y) pixel coordinates in walk order
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    centroid: tuple[float, float] = (0.0, 0.0)
    area: int = 0
    perimeter: float = 0.0
    # (xmin, ymin, xmax, ymax)
    bounding_box: tuple[int, int, int, int] = (0, 0, 0, 0)
    saliency: float = 0.0
    type: str = "unknown"
    symbol_weight: float = 0.0
    cultural_weight: float = 1.0
    depth: str = "midground"

    @property
    def bbox_width(self) -> int:
        return self.bounding_box[2] - self.bounding_box[0] + 1

    @property
    def bbox_height(self) -> int:
        return self.bounding_box[3] - self.bounding_box[1] + 1

    @property
    def bbox_area(self) -> int:
        return self.bbox_width * self.bbox_height

    @property
    def mass(self) -> float:
        return self.area * self.saliency


@dataclass
class EdgeFeatures:
    density: float = 0.0
    angle: float = 0.0  # dominant orientation bin center, radians
    entropy: float = 0.0
    histogram: list[int] = field(default_factory=lambda: [0] * 8)


@dataclass
class ColorCluster:
    center: tuple[int, int, int]
    weight: float
    lab: tuple[float, float, float] = (0.0, 0.0, 0.0)
    cultural_weight: float = 1.0
    cultural_tag: str = ""
    color_name: str = ""


@dataclass
class PaletteEntry:
    warmth: float
    brightness: float
    saturation: float
    emotional_weight: float


@dataclass
class ColorFeatures:
    clusters: list[ColorCluster] = field(default_factory=list)
    harmony: float = 1.0
    temperature: float = 0.5
    palette: list[PaletteEntry] = field(default_factory=list)

    @property
    def dominant(self) -> ColorCluster | None:
        return self.clusters[0] if self.clusters else None

    @property
    def mean_emotional_weight(self) -> float:
        if not self.palette:
            return 0.5
        return float(np.mean([p.emotional_weight for p in self.palette]))


@dataclass
class RadialDistribution:
    sectors: list[float] = field(default_factory=lambda: [0.0] * 8)
    balance: float = 1.0
    dominant_sector: int = 0


@dataclass
class SpatialFeatures:
    center_of_mass: tuple[float, float] = (0.0, 0.0)
    distribution_pattern: str = "balanced"
    # depth bucket → indices into the shape list
    depth_map: dict[str, list[int]] = field(
        default_factory=lambda: {"foreground": [], "midground": [], "background": []}
    )
    primary_focus: str = "center"
    asymmetry: float = 0.0
    central_mass: float = 0.0
    foreground_weight: float = 0.0
    radial: RadialDistribution | None = None


@dataclass
class FeatureSet:
    """Read-only bundle of what the feature stages measured."""

    edges: EdgeFeatures
    shapes: list[Shape]
    colors: ColorFeatures
    spatial: SpatialFeatures
    saliency: float


@dataclass(frozen=True)
class EmotionState:
    valence: float = 0.5
    arousal: float = 0.5
    dominance: float = 0.5
    trajectory: str = "stable"
    resonance: float = 0.5


@dataclass
class EncodingContext:
    """Shared state flowing through the encode stages."""

    image: RasterImage
    mode: str = "balanced"
    config: CodecConfig = field(default_factory=CodecConfig)
    grammar: CulturalGrammar | None = None
    # Caller-supplied emotion: valence, arousal, optional dominance
    context_emotion: dict[str, float] | None = None
    # Facade-owned analyzer; a fresh one is used when absent
    emotion_analyzer: EmotionAnalyzer | None = None

    # --- Raster state (F0.01) ---
    pixels: NDArray[np.uint8] | None = None
    gradient_x: NDArray[np.float64] | None = None
    gradient_y: NDArray[np.float64] | None = None
    magnitude: NDArray[np.float64] | None = None
    edge_threshold: float = 0.0

    # --- Features ---
    edges: EdgeFeatures = field(default_factory=EdgeFeatures)
    shapes: list[Shape] = field(default_factory=list)
    colors: ColorFeatures = field(default_factory=ColorFeatures)
    spatial: SpatialFeatures = field(default_factory=SpatialFeatures)
    saliency: float = 0.0

    # --- Affect ---
    visual_emotion: EmotionState | None = None
    emotion: EmotionState = field(default_factory=EmotionState)

    # --- Symbol allocation ---
    labels: dict[str, str] = field(default_factory=dict)
    segments: dict[str, str] = field(default_factory=dict)
    payload: str = ""
    code: str = ""

    # --- Pipeline metadata ---
    gated_tags: set[str] = field(default_factory=set)
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return int(self.image.width)

    @property
    def height(self) -> int:
        return int(self.image.height)

    @property
    def features(self) -> FeatureSet:
        return FeatureSet(
            edges=self.edges,
            shapes=self.shapes,
            colors=self.colors,
            spatial=self.spatial,
            saliency=self.saliency,
        )


@dataclass
class DecodingContext:
    """Shared state flowing through the decode stages."""

    code: str
    decoding_mode: str = "stable"
    config: CodecConfig = field(default_factory=CodecConfig)
    grammar: CulturalGrammar | None = None
    # Snapshot of the facade's memory buffer at decode time
    memory: tuple[MemoryEntry, ...] = ()
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    now: float | None = None

    # --- Validation (performed before the pipeline runs) ---
    validation: ValidationResult | None = None

    # --- Segmentation (D0) ---
    mode: str = ""
    segments: dict[str, str] = field(default_factory=dict)

    # --- Reconstruction (D1) ---
    scene: SceneModel | None = None
    objects: list[ObjectModel] = field(default_factory=list)
    spatial: SpatialModel | None = None
    emotional: EmotionalModel | None = None
    temporal: TemporalModel | None = None

    # --- Memory, narrative, scoring ---
    memory_report: MemoryReport | None = None
    narrative: Narrative | None = None
    rendering: Rendering | None = None
    metrics: Metrics | None = None
    confidence: float = 0.0
    segment_scores: dict[str, float] = field(default_factory=dict)

    # --- Pipeline metadata ---
    gated_tags: set[str] = field(default_factory=set)
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def payload(self) -> str:
        if self.validation is not None:
            return self.validation.payload
        return self.code[:-1]
