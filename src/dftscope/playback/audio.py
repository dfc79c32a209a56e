"""Audio decoding and test-signal generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt
from scipy.io import wavfile


FloatArray = npt.NDArray[np.float64]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class LoadedAudio:
    """Decoded mono signal in [-1, 1] with its sample rate."""

    samples: FloatArray
    sample_rate: float
    source: str = ""

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be > 0")
        samples = np.asarray(self.samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError("samples must be 1D")
        if not np.all(np.isfinite(samples)):
            raise ValueError("samples must contain only finite values")
        object.__setattr__(self, "samples", samples)

    @property
    def duration(self) -> float:
        return self.samples.size / self.sample_rate


def load_wav(path: str | Path) -> LoadedAudio:
    """Decode a PCM or float WAV file, mixing multi-channel audio down to mono."""
    wav_path = Path(path)
    if not wav_path.exists():
        raise FileNotFoundError(f"audio file does not exist: {wav_path}")
    if not wav_path.is_file():
        raise ValueError(f"audio path is not a file: {wav_path}")

    sample_rate, raw = wavfile.read(wav_path)
    samples = pcm_to_float(raw)
    if samples.ndim == 2:
        samples = samples.mean(axis=1)
    logger.info(
        "Loaded %s: %d samples at %d Hz (%.2f s)",
        wav_path.name,
        samples.shape[0],
        sample_rate,
        samples.shape[0] / sample_rate,
    )
    return LoadedAudio(samples=samples, sample_rate=float(sample_rate), source=str(wav_path))


def pcm_to_float(raw: npt.ArrayLike) -> FloatArray:
    """Scale integer PCM to [-1, 1]; floating-point data passes through."""
    data = np.asarray(raw)
    if data.dtype == np.uint8:
        return (data.astype(np.float64) - 128.0) / 128.0
    if np.issubdtype(data.dtype, np.integer):
        full_scale = float(2 ** (np.iinfo(data.dtype).bits - 1))
        return data.astype(np.float64) / full_scale
    if np.issubdtype(data.dtype, np.floating):
        return data.astype(np.float64)
    raise ValueError(f"unsupported sample dtype: {data.dtype}")


def generate_sine_wave(
    frequency_hz: float,
    sample_rate: float,
    duration_s: float,
    amplitude: float = 1.0,
) -> FloatArray:
    """Sampled sine tone of the given length."""
    if sample_rate <= 0:
        raise ValueError("sample_rate must be > 0")
    if duration_s < 0:
        raise ValueError("duration_s must be >= 0")
    count = int(np.floor(sample_rate * duration_s))
    t = np.arange(count, dtype=np.float64) / sample_rate
    return amplitude * np.sin(2.0 * np.pi * frequency_hz * t)


def format_time(seconds: float) -> str:
    """Playback position as ``m:ss``."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"
