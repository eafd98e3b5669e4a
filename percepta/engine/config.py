"""Codec configuration — controls feature extraction and allocation behavior."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CodecConfig:
    """Engine thresholds. Not exposed to end users; tests may override."""

    # Sobel magnitude threshold (luminance units, max ≈ 1442)
    edge_threshold: float = 30.0
    edge_threshold_compact: float = 50.0

    # Pixel stride for edge density / orientation sampling
    sample_stride: int = 1
    # Shape seeds are scanned at 2× the stride, colors at 4×
    shape_seed_factor: int = 2
    color_sample_factor: int = 4

    # Contour walk
    min_shape_points: int = 8
    max_shapes: int = 64

    # Shape classification
    line_aspect_high: float = 2.5
    line_aspect_low: float = 0.4
    square_aspect_tolerance: float = 0.2
    circle_radial_cv: float = 0.08  # a traced square outline sits near 0.11
    complex_path_ratio: float = 2.0
    hull_rdp_epsilon_pct: float = 0.05  # fraction of bbox diagonal

    # Shape saliency blend: size, compactness, centrality
    saliency_weights: tuple[float, float, float] = (0.4, 0.3, 0.3)

    # Color clustering
    max_color_clusters: int = 8
    max_kmeans_iterations: int = 50
    center_shift_tolerance: float = 1.0  # ΔE00
    kmeans_seed: int = 0

    # Harmony: complementary above / analogous below (ΔE00)
    harmony_complementary: float = 80.0
    harmony_analogous: float = 20.0

    # Spatial classification
    clustered_fraction: float = 0.6
    diagonal_imbalance: float = 0.3
    asymmetric_cv: float = 0.3

    def threshold_for(self, mode: str) -> float:
        return self.edge_threshold_compact if mode == "compact" else self.edge_threshold
