"""Tests for the buffered transport and analyser captures."""

from __future__ import annotations

import numpy as np
import pytest

from dftscope.playback import (
    AnalyserSettings,
    BufferedSignalSource,
    LoadedAudio,
    PlaybackTransport,
    SignalSource,
    generate_sine_wave,
)


def _tone_source(*, duration_s: float = 1.0, fft_size: int = 256) -> BufferedSignalSource:
    sample_rate = 8_000.0
    audio = LoadedAudio(
        samples=generate_sine_wave(1_000.0, sample_rate, duration_s, amplitude=0.5),
        sample_rate=sample_rate,
        source="tone",
    )
    return BufferedSignalSource(audio, settings=AnalyserSettings(fft_size=fft_size))


def test_source_satisfies_transport_protocols() -> None:
    source = _tone_source()

    assert isinstance(source, SignalSource)
    assert isinstance(source, PlaybackTransport)


def test_no_audio_means_no_data() -> None:
    source = BufferedSignalSource()

    assert source.time_domain_window() is None
    assert source.frequency_domain_window() is None
    assert source.levels() is None
    source.play()
    assert not source.is_playing()


def test_paused_analyser_hears_silence() -> None:
    source = _tone_source()
    window = source.time_domain_window()

    assert window is not None
    assert window.shape == (128,)
    assert np.all(window == 0.0)


def test_playhead_follows_elapsed_time() -> None:
    source = _tone_source()
    source.play()
    source.advance(0.25)

    assert source.current_time == pytest.approx(0.25)
    assert source.progress_percent == pytest.approx(25.0)
    window = source.time_domain_window()
    assert window is not None
    assert np.max(np.abs(window)) == pytest.approx(0.5, abs=1e-6)


def test_advance_is_ignored_while_paused() -> None:
    source = _tone_source()
    source.advance(0.5)

    assert source.current_time == 0.0
    with pytest.raises(ValueError, match="elapsed_s"):
        source.advance(-0.1)


def test_reaching_end_stops_and_rewinds() -> None:
    source = _tone_source(duration_s=0.1)
    source.play()
    source.advance(0.2)

    assert source.ended
    assert not source.is_playing()
    assert source.current_time == 0.0
    source.play()
    assert not source.ended


def test_toggle_seek_and_stop() -> None:
    source = _tone_source()
    source.toggle()
    assert source.is_playing()
    source.seek(5.0)
    assert source.current_time == pytest.approx(source.duration)
    source.seek(-1.0)
    assert source.current_time == 0.0
    source.seek(0.5)
    source.toggle()
    assert not source.is_playing()
    assert source.current_time == pytest.approx(0.5)
    source.stop()
    assert source.current_time == 0.0


def test_frequency_capture_peaks_at_tone_bin() -> None:
    source = BufferedSignalSource(
        LoadedAudio(
            # Quiet enough that the main lobe stays below max_decibels.
            samples=generate_sine_wave(1_000.0, 8_000.0, 1.0, amplitude=0.02),
            sample_rate=8_000.0,
        ),
        settings=AnalyserSettings(fft_size=256, smoothing_time_constant=0.0),
    )
    source.play()
    source.advance(0.5)
    data = source.frequency_domain_window()

    assert data is not None
    assert data.dtype == np.uint8
    assert data.shape == (128,)
    # 1 kHz at 8 kHz with 256 points lands on bin 32.
    assert int(np.argmax(data)) == 32
    levels = source.levels()
    assert levels is not None
    assert levels.dominant_frequency_hz == pytest.approx(1_000.0)


def test_rereading_a_frame_does_not_smooth_twice() -> None:
    def quiet_source() -> BufferedSignalSource:
        return BufferedSignalSource(
            LoadedAudio(
                samples=generate_sine_wave(1_000.0, 8_000.0, 1.0, amplitude=0.02),
                sample_rate=8_000.0,
            ),
            settings=AnalyserSettings(fft_size=256),
        )

    reader = quiet_source()
    reference = quiet_source()
    reader.play()
    reference.play()
    for _ in range(3):
        reader.advance(0.05)
        reference.advance(0.05)
        first = reader.frequency_domain_window()
        assert reader.levels() is not None
        again = reader.frequency_domain_window()
        expected = reference.frequency_domain_window()

        assert first is not None and again is not None and expected is not None
        assert np.array_equal(first, again)
        assert np.array_equal(first, expected)


def test_silence_maps_to_zero_bytes() -> None:
    data = _tone_source().frequency_domain_window()

    assert data is not None
    assert np.all(data == 0)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"fft_size": 100}, "power of two"),
        ({"fft_size": 16}, "power of two"),
        ({"min_decibels": -30.0, "max_decibels": -100.0}, "min_decibels"),
        ({"smoothing_time_constant": 1.5}, "smoothing_time_constant"),
    ],
)
def test_analyser_settings_validation(kwargs: dict[str, float], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        AnalyserSettings(**kwargs)  # type: ignore[arg-type]
