from __future__ import annotations

"""Command line interface for periodscan using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import numpy as np
import typer
from pydantic import ValidationError

from .config import SearchSettings, Settings, load_settings
from .core import average_phases, error_curve, format_pitch, frequency_to_pitch, scan_phase, to_frequency_f
from .core.notes import PITCH_MAX, PITCH_MIN
from .diagnostics import EvaluationCounter, TraceReporter
from .errors import PeriodScanError
from .ingest import ArraySource, load_source, save_samples, tiled_pattern
from .types import as_buffer
from .utils.logging import configure_logging

app = typer.Typer(help="Time-domain period and pitch estimation")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys:
        fields = getattr(type(current), "model_fields", {})
        if key not in fields:
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


def _fail(exc: Exception, debug: bool) -> None:
    if debug:
        logger.exception("command failed")
        raise exc
    typer.secho(f"error: {exc}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _open_source(cfg: Settings, path: Optional[Path]) -> ArraySource:
    if path is None:
        if cfg.source.path is None:
            raise typer.BadParameter("no sample file given and source.path is not configured")
        path = Path(cfg.source.path)
    return load_source(path, settings=cfg)


def _search_settings(
    cfg: Settings,
    phase_min: Optional[int],
    phase_max: Optional[int],
) -> Settings:
    overrides = {
        key: value
        for key, value in (("phase_min", phase_min), ("phase_max", phase_max))
        if value is not None
    }
    if not overrides:
        return cfg
    try:
        search = SearchSettings.model_validate({**cfg.search.model_dump(), **overrides})
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid phase range: {exc}") from exc
    return cfg.model_copy(update={"search": search}, deep=True)


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. search.phase_min=400",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity"),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (FileNotFoundError, TypeError, json.JSONDecodeError, ValidationError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    configure_logging(settings, verbose=verbose)
    ctx.obj = settings


@app.command()
def estimate(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Sample file (.npy, .npz, .csv, .txt, .wav)"),
    offsets: Optional[List[int]] = typer.Option(None, "--offset", "-o", help="Buffer offset; repeatable"),
    phase_min: Optional[int] = typer.Option(None, "--phase-min"),
    phase_max: Optional[int] = typer.Option(None, "--phase-max"),
    sample_rate: Optional[float] = typer.Option(
        None, "--sample-rate", help="Defaults to the file's rate, then search.sample_rate"
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w"),
    trace: bool = typer.Option(True, "--trace/--no-trace", help="Print per-offset phases"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Estimate the fundamental frequency of a sample file.

    The phase is searched at every offset and the truncated average phase is
    converted to a frequency.  With ``--trace`` each offset's phase and the
    running phase sum are printed, followed by the number of metric
    evaluations.
    """

    cfg = _search_settings(ctx.obj, phase_min, phase_max)
    try:
        source = _open_source(cfg, path)
        counter = EvaluationCounter()
        reporter = TraceReporter()
        result = average_phases(
            source,
            offsets or None,
            settings=cfg,
            workers=workers,
            counter=counter,
            reporter=reporter,
        )
        rate = sample_rate or source.sample_rate or cfg.search.sample_rate
        freq = to_frequency_f(result.phase, rate)
    except PeriodScanError as exc:
        _fail(exc, debug)
        return

    if trace:
        for offset, phase, total in reporter.phases:
            typer.echo(f"offset: {offset}, phase: {phase}, sum: {total}")
    typer.echo(f"phase: {result.phase} (mean {result.mean:.3f})")
    typer.echo(f"freq: {freq:.6f} Hz")
    pitch, cents = frequency_to_pitch(freq)
    if PITCH_MIN <= pitch <= PITCH_MAX:
        typer.echo(f"pitch: {format_pitch(pitch)} ({cents:+.1f} cents)")
    if trace:
        typer.echo(f"window error loops: {counter.count}")


@app.command()
def curve(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Sample file"),
    offset: int = typer.Option(0, "--offset", "-o"),
    phase_min: Optional[int] = typer.Option(None, "--phase-min"),
    phase_max: Optional[int] = typer.Option(None, "--phase-max"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the curve to .npy or .csv"),
    plot: bool = typer.Option(False, "--plot/--no-plot"),
    save: Optional[Path] = typer.Option(None, "--save", help="Save the plot instead of showing it"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Compute the exact window error of every candidate phase at one offset."""

    cfg = _search_settings(ctx.obj, phase_min, phase_max)
    search = cfg.search
    try:
        buf = as_buffer(_open_source(cfg, path))
        errors = error_curve(buf, offset, settings=cfg)
        best = scan_phase(buf, offset, settings=cfg)
    except PeriodScanError as exc:
        _fail(exc, debug)
        return

    if output is not None:
        table = np.column_stack([np.arange(search.phase_min, search.phase_max), errors])
        if output.suffix.lower() == ".csv":
            np.savetxt(output, table, delimiter=",", fmt="%d", header="phase,error", comments="")
        else:
            np.save(output, table)
        typer.echo(f"wrote {len(errors)} candidates to {output}")
    typer.echo(f"best phase: {best.phase} error: {best.error}")

    if plot:
        from .viz import plot_error_curve

        save_path = save or (Path(cfg.viz.save) if cfg.viz.save else None)
        plot_error_curve(
            errors,
            search.phase_min,
            best=best.phase,
            title=cfg.viz.title,
            save=save_path,
            show=save_path is None,
        )
        if save_path is not None:
            typer.echo(f"saved plot to {save_path}")


@app.command()
def synth(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Destination (.npy, .npz or .csv)"),
    period: int = typer.Option(700, "--period", "-p"),
    length: Optional[int] = typer.Option(
        None, "--length", "-n", help="Defaults to enough samples for every configured offset"
    ),
    amplitude: int = typer.Option(100, "--amplitude"),
    seed: int = typer.Option(0, "--seed"),
) -> None:
    """Write a buffer that repeats a random pattern of ``period`` samples."""

    cfg: Settings = ctx.obj
    if length is None:
        search = cfg.search
        length = max(cfg.average.offsets, default=0) + search.phase_max + search.window
    try:
        samples = tiled_pattern(period, length, amplitude=amplitude, seed=seed)
        save_samples(output, samples, sample_rate=cfg.search.sample_rate)
    except (PeriodScanError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"wrote {length} samples with period {period} to {output}")


@app.command()
def note(
    frequency: float = typer.Argument(..., help="Frequency in Hz"),
    reference: float = typer.Option(440.0, "--reference", help="Frequency of A4"),
) -> None:
    """Print the pitch name nearest to ``frequency``."""

    if frequency <= 0:
        raise typer.BadParameter("frequency must be positive")
    pitch, cents = frequency_to_pitch(frequency, reference)
    if not PITCH_MIN <= pitch <= PITCH_MAX:
        raise typer.BadParameter(f"{frequency} Hz is outside the named pitch range")
    typer.echo(f"{format_pitch(pitch)} ({cents:+.1f} cents, {pitch:+d} half steps from A4)")


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
