"""Tests for windowing and frequency helpers."""

from __future__ import annotations

import numpy as np
import pytest

from dftscope.dsp import (
    WindowFunction,
    apply_window,
    bin_frequency_hz,
    extract_window,
    format_frequency,
    frequency_bins_hz,
    frequency_resolution_hz,
    normalize_peak,
    peak_frequency_hz,
    rms,
    rms_to_db,
    summarize_levels,
    window_coefficients,
)


def test_extract_window_zero_fills_past_end() -> None:
    signal = np.asarray([0, 1, 2, 3, 4], dtype=np.float64)

    assert extract_window(signal, start_index=1, window_size=3).tolist() == [1.0, 2.0, 3.0]
    assert extract_window(signal, start_index=3, window_size=4).tolist() == [3.0, 4.0, 0.0, 0.0]
    assert extract_window(signal, start_index=10, window_size=2).tolist() == [0.0, 0.0]


def test_extract_window_validates_arguments() -> None:
    with pytest.raises(ValueError, match="window_size"):
        extract_window([1.0], start_index=0, window_size=0)
    with pytest.raises(ValueError, match="start_index"):
        extract_window([1.0], start_index=-1, window_size=1)


def test_hann_and_hamming_endpoints() -> None:
    hann = window_coefficients(WindowFunction.HANN, 5)
    hamming = window_coefficients(WindowFunction.HAMMING, 5)

    assert hann[0] == pytest.approx(0.0)
    assert hann[2] == pytest.approx(1.0)
    assert hamming[0] == pytest.approx(0.08)
    assert hamming[2] == pytest.approx(1.0)
    assert np.allclose(hann, hann[::-1])
    expected = 0.54 - 0.46 * np.cos(2.0 * np.pi * np.arange(8) / 7)
    assert np.allclose(window_coefficients(WindowFunction.HAMMING, 8), expected)


def test_apply_window_accepts_names() -> None:
    tapered = apply_window(np.ones(4), "rectangular")

    assert np.allclose(tapered, 1.0)
    with pytest.raises(ValueError):
        apply_window(np.ones(4), "triangle")


def test_normalize_peak_scales_to_unit_peak() -> None:
    assert normalize_peak([0.5, -0.25]).tolist() == [1.0, -0.5]
    assert normalize_peak([0.0, 0.0]).tolist() == [0.0, 0.0]


def test_bin_frequency_labels() -> None:
    assert bin_frequency_hz(2, window_size=8, sampling_rate_hz=8000.0) == pytest.approx(2000.0)
    bins = frequency_bins_hz(8, 8000.0, bin_count=3)
    assert bins.tolist() == [0.0, 1000.0, 2000.0]
    assert frequency_resolution_hz(2048, 44_100.0) == pytest.approx(21.533, abs=1e-3)


def test_frequency_helpers_validate_sampling_params() -> None:
    with pytest.raises(ValueError, match="window_size"):
        bin_frequency_hz(1, window_size=0, sampling_rate_hz=1.0)
    with pytest.raises(ValueError, match="sampling_rate_hz"):
        frequency_bins_hz(4, 0.0)


def test_rms_and_decibels() -> None:
    assert rms([1.0, -1.0]) == pytest.approx(1.0)
    assert rms([]) == 0.0
    assert rms_to_db(1.0) == pytest.approx(0.0, abs=1e-6)
    assert rms_to_db(0.0) == pytest.approx(-200.0)


def test_peak_frequency_from_byte_spectrum() -> None:
    data = np.zeros(1024, dtype=np.uint8)
    data[256] = 200

    assert peak_frequency_hz(data, 48_000.0) == pytest.approx(6000.0)
    assert peak_frequency_hz(np.zeros(4, dtype=np.uint8), 48_000.0) == 0.0


def test_summarize_levels() -> None:
    frequency_data = np.zeros(8, dtype=np.uint8)
    frequency_data[2] = 255
    levels = summarize_levels(np.ones(16), frequency_data, sampling_rate_hz=1600.0, fft_size=16)

    assert levels.rms_db == pytest.approx(0.0, abs=1e-6)
    assert levels.dominant_frequency_hz == pytest.approx(200.0)
    assert levels.peak_magnitude_db == pytest.approx(0.0, abs=1e-6)
    assert levels.frequency_resolution_hz == pytest.approx(100.0)


def test_format_frequency() -> None:
    assert format_frequency(440.0) == "440"
    assert format_frequency(1500.0) == "1.5k"
