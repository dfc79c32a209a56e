"""Direct-summation DFT engine and signal helpers."""

from dftscope.dsp.complex import (
    Complex,
    magnitude,
    magnitude_parts,
    phase_degrees,
    phase_degrees_parts,
    twiddle_factor,
    twiddle_parts,
)
from dftscope.dsp.dft import (
    DEFAULT_MAX_BINS,
    DftBinResult,
    InvalidWindowError,
    SampleWindow,
    Spectrum,
    TwiddleSeries,
    TwiddleTerm,
    dft_bin,
    full_spectrum,
    normalize_spectrum,
    twiddle_series,
)
from dftscope.dsp.frequency import (
    SignalLevels,
    bin_frequency_hz,
    format_frequency,
    frequency_bins_hz,
    frequency_resolution_hz,
    peak_frequency_hz,
    rms,
    rms_to_db,
    summarize_levels,
)
from dftscope.dsp.windowing import (
    WindowFunction,
    apply_window,
    extract_window,
    normalize_peak,
    window_coefficients,
)

__all__ = [
    "DEFAULT_MAX_BINS",
    "Complex",
    "DftBinResult",
    "InvalidWindowError",
    "SampleWindow",
    "SignalLevels",
    "Spectrum",
    "TwiddleSeries",
    "TwiddleTerm",
    "WindowFunction",
    "apply_window",
    "bin_frequency_hz",
    "dft_bin",
    "extract_window",
    "format_frequency",
    "frequency_bins_hz",
    "frequency_resolution_hz",
    "full_spectrum",
    "magnitude",
    "magnitude_parts",
    "normalize_peak",
    "normalize_spectrum",
    "peak_frequency_hz",
    "phase_degrees",
    "phase_degrees_parts",
    "rms",
    "rms_to_db",
    "summarize_levels",
    "twiddle_factor",
    "twiddle_parts",
    "window_coefficients",
]
