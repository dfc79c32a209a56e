"""Tick-driven sampling, freezing and frame loop around the DFT engine."""

from dftscope.live.controller import (
    ControllerStats,
    ControllerView,
    FrozenSnapshot,
    SamplingConfig,
    SamplingController,
    TransportState,
)
from dftscope.live.loop import DEFAULT_FRAME_INTERVAL_S, TickLoop
from dftscope.live.report import (
    spectrum_to_jsonable,
    stats_to_jsonable,
    twiddles_to_jsonable,
    view_to_jsonable,
)

__all__ = [
    "DEFAULT_FRAME_INTERVAL_S",
    "ControllerStats",
    "ControllerView",
    "FrozenSnapshot",
    "SamplingConfig",
    "SamplingController",
    "TickLoop",
    "TransportState",
    "spectrum_to_jsonable",
    "stats_to_jsonable",
    "twiddles_to_jsonable",
    "view_to_jsonable",
]
