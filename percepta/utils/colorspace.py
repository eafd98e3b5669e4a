"""Color-space helpers: sRGB → CIELAB, CIEDE2000 distance matrices, HSV → hex."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from skimage.color import deltaE_ciede2000, hsv2rgb, rgb2lab


def rgb_to_lab(rgb: NDArray) -> NDArray[np.float64]:
    """Convert (N, 3) sRGB bytes to (N, 3) CIELAB (D65, gamma-corrected)."""
    arr = np.asarray(rgb, dtype=np.float64).reshape(-1, 1, 3) / 255.0
    return rgb2lab(np.clip(arr, 0.0, 1.0)).reshape(-1, 3)


def pairwise_delta_e(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    """CIEDE2000 distance matrix between LAB rows of ``a`` and ``b``: shape (len(a), len(b))."""
    lab_a = np.repeat(a[:, None, :], len(b), axis=1)
    lab_b = np.repeat(b[None, :, :], len(a), axis=0)
    return np.asarray(deltaE_ciede2000(lab_a, lab_b), dtype=np.float64)


def luminance(rgb: NDArray) -> NDArray[np.float64]:
    """Perceived lightness (ITU-R BT.601) in byte units."""
    arr = np.asarray(rgb, dtype=np.float64)
    return 0.299 * arr[..., 0] + 0.587 * arr[..., 1] + 0.114 * arr[..., 2]


def hsv_to_hex(hue_deg: float, saturation: float, value: float) -> str:
    """``#rrggbb`` for a hue in degrees and saturation/value in [0, 1]."""
    hsv = np.array([[[(hue_deg % 360.0) / 360.0, saturation, value]]], dtype=np.float64)
    r, g, b = np.round(np.clip(hsv2rgb(hsv)[0, 0], 0.0, 1.0) * 255).astype(int)
    return f"#{r:02x}{g:02x}{b:02x}"
