"""Frequency labelling and level summaries for captured audio buffers."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


FloatArray = npt.NDArray[np.float64]

DB_FLOOR_EPSILON = 1e-10
BYTE_FULL_SCALE = 255.0


@dataclass(frozen=True, slots=True)
class SignalLevels:
    """Loudness and dominant-frequency summary of one analyser capture."""

    rms_db: float
    dominant_frequency_hz: float
    peak_magnitude_db: float
    frequency_resolution_hz: float


def bin_frequency_hz(k: int, *, window_size: int, sampling_rate_hz: float) -> float:
    """Analysed frequency of DFT bin `k` for an N-sample window."""
    _validate_sampling_params(window_size=window_size, sampling_rate_hz=sampling_rate_hz)
    return k * sampling_rate_hz / window_size


def frequency_bins_hz(
    window_size: int,
    sampling_rate_hz: float,
    *,
    bin_count: int | None = None,
) -> FloatArray:
    """Frequencies of bins ``0..bin_count-1`` (all N bins by default)."""
    _validate_sampling_params(window_size=window_size, sampling_rate_hz=sampling_rate_hz)
    count = window_size if bin_count is None else bin_count
    if count < 0:
        raise ValueError("bin_count must be >= 0")
    return np.arange(count, dtype=np.float64) * (sampling_rate_hz / window_size)


def frequency_resolution_hz(fft_size: int, sampling_rate_hz: float) -> float:
    """Hz spanned by one analyser bin."""
    _validate_sampling_params(window_size=fft_size, sampling_rate_hz=sampling_rate_hz)
    return sampling_rate_hz / fft_size


def rms(samples: npt.ArrayLike) -> float:
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(x))))


def rms_to_db(value: float) -> float:
    return float(20.0 * np.log10(value + DB_FLOOR_EPSILON))


def peak_frequency_hz(frequency_data: npt.ArrayLike, sampling_rate_hz: float) -> float:
    """Frequency of the strongest bin of a byte magnitude spectrum spanning 0..Nyquist."""
    if sampling_rate_hz <= 0:
        raise ValueError("sampling_rate_hz must be > 0")
    data = np.asarray(frequency_data)
    if data.size == 0:
        return 0.0
    # argmax keeps the first maximum, so an all-zero spectrum reports 0 Hz.
    peak_index = int(np.argmax(data))
    return (peak_index / data.size) * (sampling_rate_hz / 2.0)


def summarize_levels(
    time_data: npt.ArrayLike,
    frequency_data: npt.ArrayLike,
    *,
    sampling_rate_hz: float,
    fft_size: int,
) -> SignalLevels:
    """Derive the transport read-outs from paired time and byte-frequency captures."""
    freq = np.asarray(frequency_data, dtype=np.float64)
    peak_byte = float(np.max(freq)) if freq.size else 0.0
    return SignalLevels(
        rms_db=rms_to_db(rms(time_data)),
        dominant_frequency_hz=peak_frequency_hz(freq, sampling_rate_hz),
        peak_magnitude_db=float(20.0 * np.log10(peak_byte / BYTE_FULL_SCALE + DB_FLOOR_EPSILON)),
        frequency_resolution_hz=frequency_resolution_hz(fft_size, sampling_rate_hz),
    )


def format_frequency(frequency_hz: float) -> str:
    """Compact label such as ``"440"`` or ``"1.5k"``."""
    if frequency_hz >= 1000.0:
        return f"{frequency_hz / 1000.0:.1f}k"
    return f"{frequency_hz:.0f}"


def _validate_sampling_params(*, window_size: int, sampling_rate_hz: float) -> None:
    if window_size <= 0:
        raise ValueError("window_size must be > 0")
    if sampling_rate_hz <= 0:
        raise ValueError("sampling_rate_hz must be > 0")
