"""Live sampling and freeze control for the DFT engine.

The controller mirrors the transport's play state at every tick. While
playing it captures a fresh window, recomputes the spectrum and the
selected bin's twiddle series, and replaces the frozen snapshot. While
paused it computes nothing and serves the frozen snapshot.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import StrEnum

import numpy as np
import numpy.typing as npt

from dftscope.dsp.dft import (
    DEFAULT_MAX_BINS,
    InvalidWindowError,
    SampleWindow,
    Spectrum,
    TwiddleSeries,
    full_spectrum,
    twiddle_series,
)
from dftscope.dsp.frequency import bin_frequency_hz
from dftscope.playback.sources import SignalSource


ByteArray = npt.NDArray[np.uint8]

logger = logging.getLogger(__name__)


class TransportState(StrEnum):
    """Play state observed from the signal source."""

    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class SamplingConfig:
    """Initial window length, bin selection and compute limits."""

    sample_window: int = 8
    selected_bin: int = 0
    max_bins: int = DEFAULT_MAX_BINS
    refresh_paused_twiddles: bool = True

    def __post_init__(self) -> None:
        if self.sample_window <= 0:
            raise ValueError("sample_window must be > 0")
        if self.max_bins <= 0:
            raise ValueError("max_bins must be > 0")
        if not 0 <= self.selected_bin < self.sample_window:
            raise ValueError("selected_bin must be within [0, sample_window)")


@dataclass(frozen=True, slots=True, eq=False)
class FrozenSnapshot:
    """Results of one computed tick; replaced whole, never edited."""

    window: SampleWindow
    spectrum: Spectrum
    twiddles: TwiddleSeries
    tick_index: int
    frequency_data: ByteArray | None = None

    def __post_init__(self) -> None:
        if self.frequency_data is not None:
            data = np.array(self.frequency_data, dtype=np.uint8, copy=True)
            data.setflags(write=False)
            object.__setattr__(self, "frequency_data", data)


@dataclass(frozen=True, slots=True)
class ControllerStats:
    """Tick counters for observability."""

    ticks: int
    computed_ticks: int
    paused_ticks: int
    no_data_ticks: int
    invalid_window_ticks: int
    last_compute_ms: float


@dataclass(frozen=True, slots=True, eq=False)
class ControllerView:
    """What a renderer should draw for the current frame."""

    state: TransportState
    frozen: bool
    window: SampleWindow | None
    spectrum: Spectrum
    twiddles: TwiddleSeries
    frequency_data: ByteArray | None
    selected_bin: int
    current_sample: int
    sample_rate: float

    @property
    def has_data(self) -> bool:
        return self.window is not None

    def bin_frequency_hz(self, k: int) -> float:
        """Frequency label k * sample_rate / N for the displayed window."""
        window_size = self.window.size if self.window is not None else 1
        return bin_frequency_hz(k, window_size=window_size, sampling_rate_hz=self.sample_rate)


class SamplingController:
    """Single writer of the live results and the frozen snapshot."""

    def __init__(self, source: SignalSource, config: SamplingConfig | None = None) -> None:
        config = config or SamplingConfig()
        self._source = source
        self._sample_window = config.sample_window
        self._selected_bin = config.selected_bin
        self._max_bins = config.max_bins
        self._refresh_paused_twiddles = config.refresh_paused_twiddles

        self._state = TransportState.PAUSED
        self._live: FrozenSnapshot | None = None
        self._frozen: FrozenSnapshot | None = None
        self._paused_twiddles: dict[int, TwiddleSeries] = {}
        self._current_sample = 0

        self._ticks = 0
        self._computed_ticks = 0
        self._paused_ticks = 0
        self._no_data_ticks = 0
        self._invalid_window_ticks = 0
        self._last_compute_ms = 0.0

    @property
    def source(self) -> SignalSource:
        return self._source

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def sample_window(self) -> int:
        return self._sample_window

    @property
    def selected_bin(self) -> int:
        return self._selected_bin

    @property
    def max_bins(self) -> int:
        return self._max_bins

    @property
    def current_sample(self) -> int:
        return self._current_sample

    @property
    def frozen_snapshot(self) -> FrozenSnapshot | None:
        return self._frozen

    @property
    def live_snapshot(self) -> FrozenSnapshot | None:
        return self._live

    @property
    def stats(self) -> ControllerStats:
        return ControllerStats(
            ticks=self._ticks,
            computed_ticks=self._computed_ticks,
            paused_ticks=self._paused_ticks,
            no_data_ticks=self._no_data_ticks,
            invalid_window_ticks=self._invalid_window_ticks,
            last_compute_ms=self._last_compute_ms,
        )

    def set_sample_window(self, size: int) -> None:
        """Change N from the next tick on.

        Non-positive sizes are accepted here and make every playing tick
        fail as an invalid window until a valid size is set.
        """
        self._sample_window = int(size)
        self._selected_bin = self._clamp_bin(self._selected_bin)
        if self._sample_window > 0:
            self._current_sample %= self._sample_window
        else:
            self._current_sample = 0

    def select_bin(self, k: int) -> None:
        """Select the bin whose summation terms are exposed; clamped to [0, N)."""
        self._selected_bin = self._clamp_bin(int(k))

    def tick(self) -> bool:
        """Advance one frame; return whether a new snapshot was computed."""
        self._ticks += 1
        self._observe_transport()

        if self._state is TransportState.PAUSED:
            self._paused_ticks += 1
            return False

        capture = self._source.time_domain_window()
        if capture is None or len(capture) == 0:
            self._no_data_ticks += 1
            logger.debug("Tick %d skipped: no time-domain data available", self._ticks)
            return False

        started = time.perf_counter()
        try:
            window = SampleWindow.from_capture(capture, self._sample_window)
            spectrum = full_spectrum(window, max_bins=self._max_bins)
            twiddles = twiddle_series(
                window,
                window.size,
                self._clamp_bin(self._selected_bin),
                max_terms=self._max_bins,
            )
        except InvalidWindowError as exc:
            self._invalid_window_ticks += 1
            logger.warning("Tick %d skipped: invalid window (%s)", self._ticks, exc)
            return False

        snapshot = FrozenSnapshot(
            window=window,
            spectrum=spectrum,
            twiddles=twiddles,
            tick_index=self._ticks,
            frequency_data=self._source.frequency_domain_window(),
        )
        # Snapshots are immutable, so live and frozen may share one object.
        self._live = snapshot
        self._frozen = snapshot
        self._paused_twiddles = {}
        self._current_sample = (self._current_sample + 1) % window.size
        self._computed_ticks += 1
        self._last_compute_ms = (time.perf_counter() - started) * 1000.0
        return True

    def view(self) -> ControllerView:
        """Live results while playing, otherwise the frozen snapshot."""
        if self._state is TransportState.PLAYING and self._live is not None:
            snapshot: FrozenSnapshot | None = self._live
            frozen = False
        else:
            snapshot = self._frozen
            frozen = snapshot is not None

        if snapshot is None:
            return ControllerView(
                state=self._state,
                frozen=False,
                window=None,
                spectrum=Spectrum.empty(),
                twiddles=TwiddleSeries.empty(self._selected_bin),
                frequency_data=None,
                selected_bin=self._selected_bin,
                current_sample=self._current_sample,
                sample_rate=self._source.sample_rate,
            )

        return ControllerView(
            state=self._state,
            frozen=frozen,
            window=snapshot.window,
            spectrum=snapshot.spectrum,
            twiddles=self._served_twiddles(snapshot, frozen=frozen),
            frequency_data=snapshot.frequency_data,
            selected_bin=self._selected_bin,
            current_sample=self._current_sample,
            sample_rate=self._source.sample_rate,
        )

    def _observe_transport(self) -> None:
        state = TransportState.PLAYING if self._source.is_playing() else TransportState.PAUSED
        if state is self._state:
            return
        logger.info("Transport %s -> %s at tick %d", self._state.value, state.value, self._ticks)
        if state is TransportState.PLAYING:
            # Serve the frozen snapshot until the first fresh result lands.
            self._live = None
        self._state = state

    def _served_twiddles(self, snapshot: FrozenSnapshot, *, frozen: bool) -> TwiddleSeries:
        # The frozen window may be shorter than the current N after a resize.
        selected = min(self._selected_bin, snapshot.window.size - 1)
        if not frozen or not self._refresh_paused_twiddles or snapshot.twiddles.bin_index == selected:
            return snapshot.twiddles
        cached = self._paused_twiddles.get(selected)
        if cached is None:
            cached = twiddle_series(
                snapshot.window,
                snapshot.window.size,
                selected,
                max_terms=self._max_bins,
            )
            self._paused_twiddles[selected] = cached
        return cached

    def _clamp_bin(self, k: int) -> int:
        upper = max(self._sample_window - 1, 0)
        return min(max(k, 0), upper)
