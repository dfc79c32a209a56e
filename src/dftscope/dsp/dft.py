"""Direct-summation discrete Fourier transform.

Every coefficient is computed straight from the definition

    X[k] = sum_{n=0}^{N-1} x[n] * e^(-2*pi*i*k*n/N)

with no fast-transform factorisation, so each addend can be inspected on
its own (see :func:`twiddle_series`). A full spectrum costs O(N^2); to
bound that cost the number of computed bins is capped by ``max_bins``.
Spectra of windows longer than the cap are truncated to the first
``max_bins`` bins, not aliased or resampled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
import numpy.typing as npt

from dftscope.dsp.complex import (
    Complex,
    magnitude,
    magnitude_parts,
    phase_degrees,
    phase_degrees_parts,
    twiddle_parts,
)


FloatArray = npt.NDArray[np.float64]

DEFAULT_MAX_BINS = 1024


class InvalidWindowError(ValueError):
    """Raised when a sample window cannot be transformed."""


@dataclass(frozen=True, slots=True, eq=False)
class SampleWindow:
    """Fixed-length, read-only window of real-valued samples."""

    samples: FloatArray

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", _read_only(_as_valid_samples(self.samples)))

    @classmethod
    def from_capture(cls, capture: npt.ArrayLike, size: int) -> SampleWindow:
        """Take the first `size` samples of a capture, zero-padding short captures."""
        if size <= 0:
            raise InvalidWindowError("window size must be > 0")
        try:
            x = np.asarray(capture, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidWindowError(f"capture is not numeric: {exc}") from exc
        if x.ndim != 1:
            raise InvalidWindowError("capture must be 1D")
        window = np.zeros(size, dtype=np.float64)
        count = min(size, x.size)
        window[:count] = x[:count]
        return cls(window)

    @property
    def size(self) -> int:
        return int(self.samples.size)

    def __len__(self) -> int:
        return self.size


@dataclass(frozen=True, slots=True)
class DftBinResult:
    """DFT coefficient of one frequency bin with derived polar form."""

    bin_index: int
    real: float
    imag: float
    magnitude: float
    phase_degrees: float


@dataclass(frozen=True, slots=True, eq=False)
class Spectrum:
    """Ordered DFT coefficients for bins ``0..len(self)-1`` of an N-sample window."""

    window_size: int
    real: FloatArray
    imag: FloatArray

    def __post_init__(self) -> None:
        if self.window_size < 0:
            raise ValueError("window_size must be >= 0")
        real = np.asarray(self.real, dtype=np.float64)
        imag = np.asarray(self.imag, dtype=np.float64)
        if real.ndim != 1 or imag.ndim != 1:
            raise ValueError("spectrum components must be 1D")
        if real.shape != imag.shape:
            raise ValueError("real and imag components must have equal length")
        if real.size > self.window_size:
            raise ValueError("spectrum cannot hold more bins than window_size")
        object.__setattr__(self, "real", _read_only(real))
        object.__setattr__(self, "imag", _read_only(imag))

    @classmethod
    def empty(cls) -> Spectrum:
        return cls(window_size=0, real=np.zeros(0), imag=np.zeros(0))

    def __len__(self) -> int:
        return int(self.real.size)

    def __getitem__(self, k: int) -> DftBinResult:
        value = Complex(float(self.real[k]), float(self.imag[k]))
        return DftBinResult(
            bin_index=int(k) if k >= 0 else len(self) + int(k),
            real=value.real,
            imag=value.imag,
            magnitude=magnitude(value),
            phase_degrees=phase_degrees(value),
        )

    def __iter__(self) -> Iterator[DftBinResult]:
        for k in range(len(self)):
            yield self[k]

    @property
    def is_truncated(self) -> bool:
        """Whether fewer than N bins were computed."""
        return len(self) < self.window_size

    @property
    def magnitudes(self) -> FloatArray:
        return magnitude_parts(self.real, self.imag)

    @property
    def phases_degrees(self) -> FloatArray:
        return phase_degrees_parts(self.real, self.imag)


@dataclass(frozen=True, slots=True)
class TwiddleTerm:
    """One addend of a bin's DFT sum: x[n] * W_N^(kn)."""

    sample_index: int
    twiddle: Complex
    input_amplitude: float
    weighted: Complex


@dataclass(frozen=True, slots=True, eq=False)
class TwiddleSeries:
    """All summation terms of one bin, exposed for per-term visualisation."""

    bin_index: int
    window_size: int
    twiddle_real: FloatArray
    twiddle_imag: FloatArray
    amplitudes: FloatArray

    def __post_init__(self) -> None:
        shapes = {np.shape(self.twiddle_real), np.shape(self.twiddle_imag), np.shape(self.amplitudes)}
        if len(shapes) != 1:
            raise ValueError("twiddle and amplitude arrays must have equal shape")
        for name in ("twiddle_real", "twiddle_imag", "amplitudes"):
            object.__setattr__(self, name, _read_only(np.asarray(getattr(self, name), dtype=np.float64)))

    @classmethod
    def empty(cls, bin_index: int = 0) -> TwiddleSeries:
        return cls(
            bin_index=bin_index,
            window_size=0,
            twiddle_real=np.zeros(0),
            twiddle_imag=np.zeros(0),
            amplitudes=np.zeros(0),
        )

    def __len__(self) -> int:
        return int(self.amplitudes.size)

    @property
    def weighted_real(self) -> FloatArray:
        return self.amplitudes * self.twiddle_real

    @property
    def weighted_imag(self) -> FloatArray:
        return self.amplitudes * self.twiddle_imag

    def term(self, n: int) -> TwiddleTerm:
        twiddle = Complex(float(self.twiddle_real[n]), float(self.twiddle_imag[n]))
        amplitude = float(self.amplitudes[n])
        return TwiddleTerm(
            sample_index=n,
            twiddle=twiddle,
            input_amplitude=amplitude,
            weighted=twiddle.scale(amplitude),
        )

    def terms(self) -> tuple[TwiddleTerm, ...]:
        return tuple(self.term(n) for n in range(len(self)))

    def total(self) -> Complex:
        """Sum of all weighted terms, i.e. the bin's DFT coefficient."""
        return Complex(float(self.twiddle_real @ self.amplitudes), float(self.twiddle_imag @ self.amplitudes))


def dft_bin(
    samples: npt.ArrayLike | SampleWindow,
    k: int,
    n_effective: int | None = None,
) -> Complex:
    """DFT coefficient of bin `k` by direct summation over the window."""
    x = _as_valid_samples(samples)
    n_total = x.size if n_effective is None else n_effective
    if n_total <= 0:
        raise InvalidWindowError("transform length must be > 0")

    count = min(int(n_total), x.size)
    twiddle_real, twiddle_imag = twiddle_parts(n_total, k, np.arange(count, dtype=np.int64))
    return Complex(float(twiddle_real @ x[:count]), float(twiddle_imag @ x[:count]))


def full_spectrum(
    samples: npt.ArrayLike | SampleWindow,
    *,
    max_bins: int = DEFAULT_MAX_BINS,
) -> Spectrum:
    """DFT coefficients for bins ``0..min(N, max_bins)-1``."""
    if max_bins <= 0:
        raise ValueError("max_bins must be > 0")
    x = _as_valid_samples(samples)
    n_total = x.size
    bin_count = min(n_total, max_bins)

    twiddle_real, twiddle_imag = twiddle_parts(
        n_total,
        np.arange(bin_count, dtype=np.int64)[:, np.newaxis],
        np.arange(n_total, dtype=np.int64),
    )
    real = twiddle_real @ x
    imag = twiddle_imag @ x
    return Spectrum(window_size=n_total, real=real, imag=imag)


def twiddle_series(
    samples: npt.ArrayLike | SampleWindow,
    n_total: int,
    k: int,
    *,
    max_terms: int = DEFAULT_MAX_BINS,
) -> TwiddleSeries:
    """Twiddle factor, input amplitude and weighted term for every n of bin `k`."""
    if n_total <= 0:
        raise InvalidWindowError("transform length must be > 0")
    if max_terms <= 0:
        raise ValueError("max_terms must be > 0")
    x = _as_valid_samples(samples)

    count = min(n_total, max_terms)
    amplitudes = np.zeros(count, dtype=np.float64)
    available = min(count, x.size)
    amplitudes[:available] = x[:available]

    twiddle_real, twiddle_imag = twiddle_parts(n_total, k, np.arange(count, dtype=np.int64))
    return TwiddleSeries(
        bin_index=k,
        window_size=n_total,
        twiddle_real=twiddle_real,
        twiddle_imag=twiddle_imag,
        amplitudes=amplitudes,
    )


def normalize_spectrum(spectrum: Spectrum) -> Spectrum:
    """Scale every coefficient by 1/N."""
    if spectrum.window_size == 0:
        return spectrum
    return Spectrum(
        window_size=spectrum.window_size,
        real=spectrum.real / spectrum.window_size,
        imag=spectrum.imag / spectrum.window_size,
    )


def _as_valid_samples(samples: npt.ArrayLike | SampleWindow) -> FloatArray:
    if isinstance(samples, SampleWindow):
        return samples.samples
    try:
        x = np.array(samples, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidWindowError(f"samples are not numeric: {exc}") from exc
    if x.ndim != 1:
        raise InvalidWindowError("samples must be 1D")
    if x.size == 0:
        raise InvalidWindowError("samples must not be empty")
    if not np.all(np.isfinite(x)):
        raise InvalidWindowError("samples must contain only finite values")
    return x


def _read_only(values: FloatArray) -> FloatArray:
    values = np.array(values, dtype=np.float64, copy=True)
    values.setflags(write=False)
    return values
