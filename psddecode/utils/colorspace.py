from __future__ import annotations

from typing import Final

import numpy as np
from numpy.typing import ArrayLike, NDArray

# D65 reference white, 2 degree observer
REF_X: Final[float] = 95.047
REF_Y: Final[float] = 100.0
REF_Z: Final[float] = 108.883

LAB_EPSILON: Final[float] = 0.008856
LAB_KAPPA: Final[float] = 7.787

SRGB_THRESHOLD: Final[float] = 0.0031308

SRGB_FROM_XYZ: Final[NDArray[np.float64]] = np.array(
    [
        [3.2406, -1.5372, -0.4986],
        [-0.9689, 1.8758, 0.0415],
        [0.0557, -0.2040, 1.0570],
    ],
    dtype=np.float64,
)


def _f64(x: ArrayLike) -> NDArray[np.float64]:
    return np.asarray(x, dtype=np.float64)


def cmyk_to_rgb(
    c: ArrayLike, m: ArrayLike, y: ArrayLike, k: ArrayLike
) -> NDArray[np.uint8]:
    """Ink fractions in [0, 1] -> RGB bytes with shape (..., 3)."""
    cmy = np.stack([_f64(c), _f64(m), _f64(y)], axis=-1)
    kk = _f64(k)[..., None]
    v = np.rint(255.0 * (1.0 - (cmy * (1.0 - kk) + kk)))
    return np.clip(v, 0.0, 255.0).astype(np.uint8)


def _lab_f_inv(t: NDArray[np.float64]) -> NDArray[np.float64]:
    t3 = t * t * t
    return np.where(t3 > LAB_EPSILON, t3, (t - 16.0 / 116.0) / LAB_KAPPA)


def lab_to_xyz(
    l: ArrayLike, a: ArrayLike, b: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    fy = (_f64(l) + 16.0) / 116.0
    fx = _f64(a) / 500.0 + fy
    fz = fy - _f64(b) / 200.0
    return REF_X * _lab_f_inv(fx), REF_Y * _lab_f_inv(fy), REF_Z * _lab_f_inv(fz)


def _compand(v: NDArray[np.float64]) -> NDArray[np.float64]:
    hi = 1.055 * np.power(np.maximum(v, SRGB_THRESHOLD), 1.0 / 2.4) - 0.055
    return np.where(v > SRGB_THRESHOLD, hi, 12.92 * v)


def xyz_to_rgb(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> NDArray[np.uint8]:
    xyz = np.stack([_f64(x), _f64(y), _f64(z)], axis=-1) / 100.0
    lin = xyz @ SRGB_FROM_XYZ.T
    v = np.trunc(_compand(lin) * 256.0)
    return np.clip(v, 0.0, 255.0).astype(np.uint8)


def lab_to_rgb(l: ArrayLike, a: ArrayLike, b: ArrayLike) -> NDArray[np.uint8]:
    return xyz_to_rgb(*lab_to_xyz(l, a, b))
