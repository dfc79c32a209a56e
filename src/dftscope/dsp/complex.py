"""Complex arithmetic and twiddle-factor generation for direct DFT summation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


FloatArray = npt.NDArray[np.float64]


@dataclass(frozen=True, slots=True)
class Complex:
    """Immutable double-precision complex value."""

    real: float
    imag: float

    def scale(self, factor: float) -> Complex:
        """Multiply by a real scalar."""
        return Complex(self.real * factor, self.imag * factor)


def twiddle_parts(
    n_total: float,
    k: npt.ArrayLike,
    n: npt.ArrayLike,
) -> tuple[FloatArray, FloatArray]:
    """Real and imaginary parts of W_N^(kn) = e^(-2*pi*i*k*n/N), broadcast over `k` and `n`.

    For an integral N with integer indices the exponent k*n is reduced
    modulo N first, so every caller sees the same angle for the same
    rotation regardless of how large k*n grows.
    """
    products = np.multiply(np.asarray(k), np.asarray(n))
    if np.issubdtype(products.dtype, np.integer) and float(n_total).is_integer():
        products = products % int(n_total)
    angles = (-2.0 * np.pi / n_total) * products.astype(np.float64)
    return np.cos(angles), np.sin(angles)


def twiddle_factor(n_total: float, k: float, n: float) -> Complex:
    """Rotation factor W_N^(kn) = e^(-2*pi*i*k*n/N)."""
    real, imag = twiddle_parts(n_total, k, n)
    return Complex(float(real), float(imag))


def magnitude_parts(real: npt.ArrayLike, imag: npt.ArrayLike) -> FloatArray:
    """Element-wise Euclidean norm."""
    return np.hypot(np.asarray(real, dtype=np.float64), np.asarray(imag, dtype=np.float64))


def phase_degrees_parts(real: npt.ArrayLike, imag: npt.ArrayLike) -> FloatArray:
    """Element-wise phase in degrees within (-180, 180]; zero at the origin."""
    re = np.asarray(real, dtype=np.float64)
    im = np.asarray(imag, dtype=np.float64)
    degrees = np.degrees(np.arctan2(im, re))
    degrees = np.where(degrees <= -180.0, degrees + 360.0, degrees)
    return np.where((re == 0.0) & (im == 0.0), 0.0, degrees)


def magnitude(value: Complex) -> float:
    """Euclidean norm of a complex value."""
    return float(magnitude_parts(value.real, value.imag))


def phase_degrees(value: Complex) -> float:
    """Phase angle in degrees within (-180, 180]; zero for the origin."""
    return float(phase_degrees_parts(value.real, value.imag))
