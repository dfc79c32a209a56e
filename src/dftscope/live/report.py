"""JSON-safe serialisation of controller output."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from dftscope.dsp.dft import Spectrum, TwiddleSeries
from dftscope.live.controller import ControllerStats, ControllerView


def spectrum_to_jsonable(spectrum: Spectrum, *, sample_rate: float | None = None) -> list[dict[str, Any]]:
    """One entry per computed bin, with a Hz label when `sample_rate` is given."""
    payload: list[dict[str, Any]] = []
    for result in spectrum:
        entry = asdict(result)
        if sample_rate is not None and spectrum.window_size > 0:
            entry["frequency_hz"] = result.bin_index * sample_rate / spectrum.window_size
        payload.append(entry)
    return payload


def twiddles_to_jsonable(twiddles: TwiddleSeries) -> dict[str, Any]:
    return {
        "bin_index": twiddles.bin_index,
        "window_size": twiddles.window_size,
        "terms": [asdict(term) for term in twiddles.terms()],
        "total": asdict(twiddles.total()),
    }


def view_to_jsonable(view: ControllerView) -> dict[str, Any]:
    """Serialize a controller view into a JSON-safe structure."""
    return {
        "state": view.state.value,
        "frozen": view.frozen,
        "selected_bin": view.selected_bin,
        "current_sample": view.current_sample,
        "sample_rate": view.sample_rate,
        "window": view.window.samples.tolist() if view.window is not None else None,
        "spectrum": spectrum_to_jsonable(view.spectrum, sample_rate=view.sample_rate),
        "spectrum_truncated": view.spectrum.is_truncated,
        "twiddles": twiddles_to_jsonable(view.twiddles),
        "frequency_data": view.frequency_data.tolist() if view.frequency_data is not None else None,
    }


def stats_to_jsonable(stats: ControllerStats) -> dict[str, Any]:
    return asdict(stats)
