"""Tests for WAV decoding and test-tone helpers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from scipy.io import wavfile

from dftscope.playback import LoadedAudio, format_time, generate_sine_wave, load_wav, pcm_to_float


def test_load_wav_scales_int16_and_mixes_to_mono(tmp_path: Path) -> None:
    path = tmp_path / "stereo.wav"
    stereo = np.asarray([[16384, -16384], [32767, 32767], [0, -32768]], dtype=np.int16)
    wavfile.write(path, 8_000, stereo)

    audio = load_wav(path)

    assert audio.sample_rate == 8_000.0
    assert audio.samples.shape == (3,)
    assert audio.samples[0] == pytest.approx(0.0)
    assert audio.samples[1] == pytest.approx(32767 / 32768)
    assert audio.samples[2] == pytest.approx(-0.5)
    assert audio.duration == pytest.approx(3 / 8_000)
    assert audio.source == str(path)


def test_load_wav_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="does not exist"):
        load_wav(tmp_path / "missing.wav")


def test_pcm_to_float_handles_common_dtypes() -> None:
    assert pcm_to_float(np.asarray([0, 128, 255], dtype=np.uint8)).tolist() == pytest.approx(
        [-1.0, 0.0, 127 / 128]
    )
    assert pcm_to_float(np.asarray([2**30], dtype=np.int32)).tolist() == [0.5]
    assert pcm_to_float(np.asarray([0.25], dtype=np.float32)).tolist() == [0.25]


def test_loaded_audio_validation() -> None:
    with pytest.raises(ValueError, match="sample_rate"):
        LoadedAudio(samples=np.zeros(4), sample_rate=0.0)
    with pytest.raises(ValueError, match="finite"):
        LoadedAudio(samples=np.asarray([np.nan]), sample_rate=8_000.0)


def test_generate_sine_wave_length_and_values() -> None:
    tone = generate_sine_wave(2.0, 8.0, 1.0, amplitude=0.5)

    assert tone.shape == (8,)
    assert tone[1] == pytest.approx(0.5)
    assert tone[0] == pytest.approx(0.0)


def test_format_time() -> None:
    assert format_time(0.0) == "0:00"
    assert format_time(75.9) == "1:15"
