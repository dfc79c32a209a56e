"""Window extraction and tapering for one-dimensional audio signals."""

from __future__ import annotations

from enum import StrEnum

import numpy as np
import numpy.typing as npt


FloatArray = npt.NDArray[np.float64]


class WindowFunction(StrEnum):
    """Tapering functions a caller may apply before transforming a window."""

    RECTANGULAR = "rectangular"
    HANN = "hann"
    HAMMING = "hamming"


def extract_window(
    signal: npt.ArrayLike,
    *,
    start_index: int,
    window_size: int,
) -> FloatArray:
    """Copy `window_size` samples starting at `start_index`, zero-filling past the end."""
    if window_size <= 0:
        raise ValueError("window_size must be > 0")
    if start_index < 0:
        raise ValueError("start_index must be >= 0")

    x = np.asarray(signal, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("signal must be 1D")

    window = np.zeros(window_size, dtype=np.float64)
    available = max(0, min(window_size, x.size - start_index))
    window[:available] = x[start_index : start_index + available]
    return window


def window_coefficients(function: WindowFunction, size: int) -> FloatArray:
    """Coefficients of a symmetric tapering window of length `size`."""
    if size <= 0:
        raise ValueError("size must be > 0")
    if function == WindowFunction.RECTANGULAR or size == 1:
        return np.ones(size, dtype=np.float64)
    if function == WindowFunction.HANN:
        return np.hanning(size)
    if function == WindowFunction.HAMMING:
        return np.hamming(size)
    raise ValueError(f"unsupported window function: {function}")


def apply_window(samples: npt.ArrayLike, function: WindowFunction | str) -> FloatArray:
    """Return a tapered copy of `samples`."""
    x = np.asarray(samples, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("samples must be 1D")
    return x * window_coefficients(WindowFunction(function), x.size)


def normalize_peak(signal: npt.ArrayLike) -> FloatArray:
    """Scale a signal so its largest absolute sample is 1; silence is returned unchanged."""
    x = np.asarray(signal, dtype=np.float64)
    peak = float(np.max(np.abs(x))) if x.size else 0.0
    if peak == 0.0:
        return x.copy()
    return x / peak
