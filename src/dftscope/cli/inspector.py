"""CLI that plays a signal through the sampling controller and reports the frozen view."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Sequence

from dftscope.dsp import DEFAULT_MAX_BINS, format_frequency
from dftscope.live import (
    ControllerView,
    SamplingConfig,
    SamplingController,
    TickLoop,
    stats_to_jsonable,
    view_to_jsonable,
)
from dftscope.playback import (
    AnalyserSettings,
    BufferedSignalSource,
    LoadedAudio,
    format_time,
    generate_sine_wave,
    load_wav,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InspectArtifacts:
    """Report location and summary of one inspection run."""

    report_path: Path
    frames_run: int
    computed_ticks: int
    final_state: str
    peak_bin: int | None


class _VirtualClock:
    """Clock whose time only moves when the loop sleeps."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def build_parser() -> argparse.ArgumentParser:
    """Create CLI parser for a headless DFT inspection run."""
    parser = argparse.ArgumentParser(
        prog="dftscope-inspect",
        description=(
            "Play a WAV file or test tone through the live DFT controller, optionally pause "
            "mid-run, and write the served spectrum and twiddle series as JSON."
        ),
    )
    parser.add_argument("--wav", type=Path, default=None, help="WAV file to analyse instead of a test tone.")
    parser.add_argument("--sine-hz", type=float, default=440.0, help="Test tone frequency.")
    parser.add_argument("--sample-rate", type=float, default=44_100.0, help="Test tone sample rate.")
    parser.add_argument("--duration", type=float, default=2.0, help="Test tone duration in seconds.")
    parser.add_argument("--amplitude", type=float, default=0.8, help="Test tone amplitude.")
    parser.add_argument("--fft-size", type=int, default=2048, help="Analyser FFT size (power of two).")
    parser.add_argument("--window-size", type=int, default=8, help="DFT sample window N.")
    parser.add_argument("--bin", type=int, default=0, help="Selected frequency bin k.")
    parser.add_argument(
        "--max-bins",
        type=int,
        default=DEFAULT_MAX_BINS,
        help="Maximum number of bins computed per tick; longer spectra are truncated.",
    )
    parser.add_argument("--ticks", type=int, default=30, help="Number of frames to run.")
    parser.add_argument("--fps", type=float, default=60.0, help="Target frame rate.")
    parser.add_argument(
        "--pause-after-ticks",
        type=int,
        default=None,
        help="Pause the transport after this many frames.",
    )
    parser.add_argument(
        "--select-bin-after-pause",
        type=int,
        default=None,
        help="Select a different bin once paused.",
    )
    parser.add_argument(
        "--refresh-paused-twiddles",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Recompute the twiddle series against the frozen window when the bin changes while paused.",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Sleep between frames instead of advancing a virtual clock.",
    )
    parser.add_argument(
        "--workspace-root",
        type=Path,
        default=Path.cwd(),
        help="Workspace root path used to resolve relative inputs/outputs.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("artifacts/inspect"),
        help="Directory for dft_report.json.",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity.",
    )
    return parser


def run_inspect_from_args(args: argparse.Namespace) -> InspectArtifacts:
    """Execute an inspection run and persist the report."""
    if args.ticks <= 0:
        raise ValueError("--ticks must be > 0")
    if args.fps <= 0:
        raise ValueError("--fps must be > 0")
    if args.pause_after_ticks is not None and args.pause_after_ticks <= 0:
        raise ValueError("--pause-after-ticks must be > 0")

    workspace_root = args.workspace_root.resolve()
    output_dir = _resolve_path(workspace_root, args.output_dir)
    audio = _load_audio(args, workspace_root)

    source = BufferedSignalSource(audio, settings=AnalyserSettings(fft_size=args.fft_size))
    controller = SamplingController(
        source,
        SamplingConfig(
            sample_window=args.window_size,
            selected_bin=args.bin,
            max_bins=args.max_bins,
            refresh_paused_twiddles=bool(args.refresh_paused_twiddles),
        ),
    )

    if args.realtime:
        loop = TickLoop(controller, frame_interval_s=1.0 / args.fps)
    else:
        clock = _VirtualClock()
        loop = TickLoop(controller, clock=clock, scheduler=clock.sleep, frame_interval_s=1.0 / args.fps)

    frame_count = 0

    def on_frame(view: ControllerView) -> None:
        nonlocal frame_count
        frame_count += 1
        if args.pause_after_ticks is not None and frame_count == args.pause_after_ticks:
            source.pause()
            if args.select_bin_after_pause is not None:
                controller.select_bin(args.select_bin_after_pause)

    loop.add_listener(on_frame)
    source.play()
    frames_run = loop.run(max_ticks=args.ticks)
    # One more tick so the controller observes a pause issued by the last frame.
    controller.tick()
    view = controller.view()
    stats = controller.stats

    peak_bin = int(view.spectrum.magnitudes.argmax()) if len(view.spectrum) else None
    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / "dft_report.json"
    _write_json(
        report_path,
        {
            "source": {
                "name": audio.source,
                "sample_rate": audio.sample_rate,
                "duration_s": audio.duration,
                "position": format_time(source.current_time),
                "progress_percent": source.progress_percent,
                "ended": source.ended,
            },
            "config": {
                "sample_window": controller.sample_window,
                "selected_bin": controller.selected_bin,
                "max_bins": controller.max_bins,
                "refresh_paused_twiddles": bool(args.refresh_paused_twiddles),
                "analyser": asdict(source.settings),
            },
            "frames_run": frames_run,
            "stats": stats_to_jsonable(stats),
            "peak_bin": peak_bin,
            "peak_frequency_hz": view.bin_frequency_hz(peak_bin) if peak_bin is not None else None,
            "view": view_to_jsonable(view),
        },
    )

    return InspectArtifacts(
        report_path=report_path,
        frames_run=frames_run,
        computed_ticks=stats.computed_ticks,
        final_state=view.state.value,
        peak_bin=peak_bin,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        artifacts = run_inspect_from_args(args)
    except Exception as exc:
        logger.debug("Inspection failed", exc_info=True)
        print(f"[ERROR] DFT inspection failed: {exc}", file=sys.stderr)
        return 1

    print(f"report: {artifacts.report_path}")
    print(f"frames_run: {artifacts.frames_run}")
    print(f"computed_ticks: {artifacts.computed_ticks}")
    print(f"final_state: {artifacts.final_state}")
    if artifacts.peak_bin is not None:
        print(f"peak_bin: {artifacts.peak_bin}")
    return 0


def _load_audio(args: argparse.Namespace, workspace_root: Path) -> LoadedAudio:
    if args.wav is not None:
        return load_wav(_resolve_path(workspace_root, args.wav))
    samples = generate_sine_wave(args.sine_hz, args.sample_rate, args.duration, amplitude=args.amplitude)
    return LoadedAudio(
        samples=samples,
        sample_rate=args.sample_rate,
        source=f"sine:{format_frequency(args.sine_hz)}Hz",
    )


def _resolve_path(base_dir: Path, path_value: Path) -> Path:
    if path_value.is_absolute():
        return path_value.resolve()
    return (base_dir / path_value).resolve()


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


if __name__ == "__main__":
    raise SystemExit(main())
