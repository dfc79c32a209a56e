"""Signal sources consumed by the sampling controller.

A source plays the role of an audio analyser attached to a transport: it
exposes the most recent time-domain capture, a byte-scaled magnitude
spectrum of the same audio, and whether the transport is playing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from dftscope.dsp.frequency import SignalLevels, summarize_levels
from dftscope.playback.audio import LoadedAudio


FloatArray = npt.NDArray[np.float64]
ByteArray = npt.NDArray[np.uint8]

logger = logging.getLogger(__name__)


@runtime_checkable
class SignalSource(Protocol):
    """Read-only view of an audio analyser and its transport state."""

    @property
    def sample_rate(self) -> float: ...

    def time_domain_window(self) -> FloatArray | None:
        """Latest time-domain capture, or `None` when no audio is available."""
        ...

    def frequency_domain_window(self) -> ByteArray | None:
        """Latest magnitude spectrum scaled to 0..255, or `None` when no audio is available."""
        ...

    def is_playing(self) -> bool: ...


@runtime_checkable
class PlaybackTransport(SignalSource, Protocol):
    """Signal source whose playhead is driven by elapsed wall-clock time."""

    @property
    def ended(self) -> bool: ...

    def advance(self, elapsed_s: float) -> None: ...


@dataclass(frozen=True, slots=True)
class AnalyserSettings:
    """Capture geometry and byte-scaling range of the analyser."""

    fft_size: int = 2048
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    smoothing_time_constant: float = 0.8

    def __post_init__(self) -> None:
        if self.fft_size < 32 or self.fft_size > 32768 or self.fft_size & (self.fft_size - 1):
            raise ValueError("fft_size must be a power of two in [32, 32768]")
        if self.min_decibels >= self.max_decibels:
            raise ValueError("min_decibels must be < max_decibels")
        if not 0.0 <= self.smoothing_time_constant <= 1.0:
            raise ValueError("smoothing_time_constant must be within [0, 1]")

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2


class BufferedSignalSource:
    """Transport over an in-memory signal with analyser-style captures.

    While paused or stopped the analyser hears silence, exactly as a
    stopped playback node would; the playhead only moves through
    :meth:`advance`. Reaching the end stops playback and rewinds to 0.
    """

    def __init__(
        self,
        audio: LoadedAudio | None = None,
        *,
        settings: AnalyserSettings | None = None,
        sample_rate: float = 44_100.0,
    ) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be > 0")
        self._settings = settings or AnalyserSettings()
        self._sample_rate = float(sample_rate)
        self._signal: FloatArray | None = None
        self._position = 0.0
        self._playing = False
        self._ended = False
        self._smoothed = np.zeros(self._settings.frequency_bin_count, dtype=np.float64)
        self._blackman = np.blackman(self._settings.fft_size)
        self._frame = 0
        self._frequency_cache: tuple[tuple[int, float, bool], ByteArray] | None = None
        if audio is not None:
            self.load(audio)

    @property
    def settings(self) -> AnalyserSettings:
        return self._settings

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def loaded(self) -> bool:
        return self._signal is not None

    @property
    def duration(self) -> float:
        if self._signal is None:
            return 0.0
        return self._signal.size / self._sample_rate

    @property
    def current_time(self) -> float:
        return self._position / self._sample_rate

    @property
    def progress_percent(self) -> float:
        if self.duration <= 0:
            return 0.0
        return 100.0 * self.current_time / self.duration

    @property
    def ended(self) -> bool:
        """Whether playback ran to the end since the last `play()`."""
        return self._ended

    def load(self, audio: LoadedAudio) -> None:
        """Replace the signal, rewinding and pausing the transport."""
        self._signal = audio.samples
        self._sample_rate = audio.sample_rate
        self._position = 0.0
        self._playing = False
        self._ended = False
        self._smoothed[:] = 0.0
        self._frequency_cache = None
        logger.debug("Loaded %.2f s of audio at %.0f Hz", self.duration, self._sample_rate)

    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        if self._signal is None:
            logger.debug("play() ignored: no audio loaded")
            return
        self._playing = True
        self._ended = False
        logger.debug("Playback started at %.3f s", self.current_time)

    def pause(self) -> None:
        if self._playing:
            logger.debug("Playback paused at %.3f s", self.current_time)
        self._playing = False

    def toggle(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        self._playing = False
        self._position = 0.0
        logger.debug("Playback stopped")

    def seek(self, seconds: float) -> None:
        """Move the playhead, clamped to the loaded duration."""
        clamped = min(max(0.0, float(seconds)), self.duration)
        self._position = clamped * self._sample_rate

    def advance(self, elapsed_s: float) -> None:
        """Move the playhead by `elapsed_s` seconds of audio while playing."""
        if elapsed_s < 0:
            raise ValueError("elapsed_s must be >= 0")
        self._frame += 1
        if not self._playing or self._signal is None:
            return
        self._position += elapsed_s * self._sample_rate
        if self._position >= self._signal.size:
            self._playing = False
            self._ended = True
            self._position = 0.0
            logger.debug("Playback reached the end")

    def time_domain_window(self) -> FloatArray | None:
        if self._signal is None:
            return None
        return self._recent_samples(self._settings.frequency_bin_count)

    def frequency_domain_window(self) -> ByteArray | None:
        """Blackman-windowed, smoothed magnitude spectrum scaled to bytes.

        The smoothing state advances once per frame; reading the same frame
        again, as :meth:`levels` does, returns the same bytes.
        """
        if self._signal is None:
            return None
        key = (self._frame, self._position, self._playing)
        if self._frequency_cache is not None and self._frequency_cache[0] == key:
            return self._frequency_cache[1].copy()
        settings = self._settings
        frame = self._recent_samples(settings.fft_size) * self._blackman
        magnitudes = np.abs(np.fft.rfft(frame))[: settings.frequency_bin_count] / settings.fft_size

        tau = settings.smoothing_time_constant
        self._smoothed = tau * self._smoothed + (1.0 - tau) * magnitudes

        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(self._smoothed)
        scale = 255.0 / (settings.max_decibels - settings.min_decibels)
        scaled = np.floor(scale * (decibels - settings.min_decibels))
        data = np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)
        self._frequency_cache = (key, data)
        return data.copy()

    def levels(self) -> SignalLevels | None:
        """RMS, dominant frequency and peak read-outs of the current capture."""
        time_data = self.time_domain_window()
        frequency_data = self.frequency_domain_window()
        if time_data is None or frequency_data is None:
            return None
        return summarize_levels(
            time_data,
            frequency_data,
            sampling_rate_hz=self._sample_rate,
            fft_size=self._settings.fft_size,
        )

    def _recent_samples(self, count: int) -> FloatArray:
        window = np.zeros(count, dtype=np.float64)
        if not self._playing or self._signal is None:
            return window
        end = min(int(self._position), self._signal.size)
        start = max(0, end - count)
        chunk = self._signal[start:end]
        window[count - chunk.size :] = chunk
        return window
