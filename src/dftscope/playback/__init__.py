"""Audio sources and transport used to feed the sampling controller."""

from dftscope.playback.audio import LoadedAudio, format_time, generate_sine_wave, load_wav, pcm_to_float
from dftscope.playback.sources import (
    AnalyserSettings,
    BufferedSignalSource,
    PlaybackTransport,
    SignalSource,
)

__all__ = [
    "AnalyserSettings",
    "BufferedSignalSource",
    "LoadedAudio",
    "PlaybackTransport",
    "SignalSource",
    "format_time",
    "generate_sine_wave",
    "load_wav",
    "pcm_to_float",
]
