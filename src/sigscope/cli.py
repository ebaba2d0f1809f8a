from __future__ import annotations

"""Command line interface for sigscope using Typer.

The commands are a thin shell over :mod:`sigscope.core`: they read sample
arrays, call one analysis routine and print the outcome to stdout.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import numpy as np
import typer
from pydantic import ValidationError

from ._typer import bad_parameter
from .config import Settings, load_settings
from .core import generator, spectral, statistics
from .core.filters import DigitalFilter
from .types import ChirpConfig, FilterConfig, NoiseConfig
from .utils.io import load_array
from .utils.logging import get_logger

app = typer.Typer(help="Signal generation and analysis utilities")
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
        if not hasattr(current, key):
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


def _format(values: np.ndarray) -> str:
    return " ".join(f"{float(v):.10g}" for v in values)


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
        help="Override configuration values using dotted paths, e.g. spectrum.window=hamming",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (FileNotFoundError, RuntimeError, TypeError, ValidationError, json.JSONDecodeError) as exc:
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
            _apply_override(data, keys, _parse_override_value(raw_value))
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    get_logger("sigscope", settings=settings)
    ctx.obj = settings


@app.command()
def generate(
    ctx: typer.Context,
    waveform: str = typer.Argument(..., help="sine, cosine, square, triangle, sawtooth, pulse or chirp"),
    sample_rate: Optional[float] = typer.Option(None, "--sample-rate", "-r"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d"),
    frequency: Optional[float] = typer.Option(None, "--frequency", "-f"),
    amplitude: Optional[float] = typer.Option(None, "--amplitude", "-a"),
    phase: float = typer.Option(0.0, "--phase"),
    offset: float = typer.Option(0.0, "--offset"),
    duty_cycle: float = typer.Option(0.5, "--duty-cycle"),
    start_frequency: Optional[float] = typer.Option(None, "--start-frequency"),
    end_frequency: Optional[float] = typer.Option(None, "--end-frequency"),
    method: str = typer.Option("linear", "--method"),
    noise: Optional[str] = typer.Option(None, "--noise", help="white, pink or brown"),
    noise_amplitude: float = typer.Option(0.1, "--noise-amplitude"),
    seed: Optional[int] = typer.Option(None, "--seed"),
) -> None:
    """Synthesise a waveform and print its samples."""

    cfg: Settings = ctx.obj
    try:
        base = generator.config_from_settings(
            cfg,
            sample_rate=sample_rate,
            duration=duration,
            frequency=frequency,
            amplitude=amplitude,
            phase=phase,
            offset=offset,
        )
        if waveform == "chirp":
            samples = generator.chirp(
                ChirpConfig(
                    sample_rate=base.sample_rate,
                    duration=base.duration,
                    amplitude=base.amplitude,
                    phase=base.phase,
                    offset=base.offset,
                    start_frequency=start_frequency if start_frequency is not None else base.frequency,
                    end_frequency=end_frequency if end_frequency is not None else base.frequency,
                    method=method,
                )
            )
        elif waveform == "pulse":
            samples = generator.pulse(base, duty_cycle)
        elif waveform in generator.WAVEFORMS:
            samples = generator.WAVEFORMS[waveform](base)
        else:
            bad_parameter(f"unknown waveform: {waveform}", param_hint="WAVEFORM")
        if noise is not None:
            if seed is None:
                seed = cfg.generator.seed
            samples = generator.add_noise(samples, NoiseConfig(noise, noise_amplitude, seed))
    except ValueError as exc:
        bad_parameter(str(exc))
    logger.debug("generated %d samples of %s", len(samples), waveform)
    typer.echo(_format(samples))


@app.command()
def spectrum(
    ctx: typer.Context,
    input: Path = typer.Argument(..., exists=True, dir_okay=False),
    sample_rate: Optional[float] = typer.Option(None, "--sample-rate", "-r"),
    window: Optional[str] = typer.Option(None, "--window", "-w"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t"),
    top: int = typer.Option(5, "--top", help="Number of peaks to list"),
) -> None:
    """List the strongest spectral peaks of a sample array."""

    cfg: Settings = ctx.obj
    try:
        data = load_array(input)
        if window is not None:
            cfg.spectrum.window = window
        psd = spectral.power_spectral_density(data, sample_rate, settings=cfg)
        peaks = spectral.find_peaks(data, sample_rate, threshold, settings=cfg)
    except ValueError as exc:
        bad_parameter(str(exc))
    typer.echo(f"bins={len(psd)} resolution={psd.frequency_resolution:.6g} Hz")
    for p in peaks[:top]:
        typer.echo(f"{p.frequency:.6g} Hz magnitude={p.magnitude:.6g} phase={p.phase:.4f}")


def _filter_config(
    cfg: Settings,
    type: str,
    cutoff: float,
    cutoff2: Optional[float],
    sample_rate: Optional[float],
    order: Optional[int],
) -> FilterConfig:
    return FilterConfig(
        type=type,
        cutoff_frequency=cutoff,
        sample_rate=sample_rate if sample_rate is not None else cfg.spectrum.sample_rate,
        cutoff_frequency2=cutoff2,
        order=order if order is not None else cfg.filter.order,
    )


@app.command("filter")
def filter_(
    ctx: typer.Context,
    input: Path = typer.Argument(..., exists=True, dir_okay=False),
    type: str = typer.Option("lowpass", "--type"),
    cutoff: float = typer.Option(..., "--cutoff"),
    cutoff2: Optional[float] = typer.Option(None, "--cutoff2"),
    sample_rate: Optional[float] = typer.Option(None, "--sample-rate", "-r"),
    order: Optional[int] = typer.Option(None, "--order"),
) -> None:
    """Run a sample array through an IIR filter and print the output."""

    cfg: Settings = ctx.obj
    try:
        data = load_array(input)
        filt = DigitalFilter(_filter_config(cfg, type, cutoff, cutoff2, sample_rate, order))
    except ValueError as exc:
        bad_parameter(str(exc))
    typer.echo(_format(filt.process_data(data)))


@app.command()
def response(
    ctx: typer.Context,
    type: str = typer.Option("lowpass", "--type"),
    cutoff: float = typer.Option(..., "--cutoff"),
    cutoff2: Optional[float] = typer.Option(None, "--cutoff2"),
    sample_rate: Optional[float] = typer.Option(None, "--sample-rate", "-r"),
    order: Optional[int] = typer.Option(None, "--order"),
    frequency: List[float] = typer.Option([], "--frequency", "-f"),
) -> None:
    """Print the magnitude and phase response of an IIR filter."""

    cfg: Settings = ctx.obj
    try:
        filt = DigitalFilter(_filter_config(cfg, type, cutoff, cutoff2, sample_rate, order))
    except ValueError as exc:
        bad_parameter(str(exc))
    freqs = frequency or list(np.linspace(0.0, filt.config.sample_rate / 2.0, 11))
    resp = filt.frequency_response(freqs)
    for f, m, p in zip(resp.frequencies, resp.magnitudes, resp.phases):
        db = 20.0 * np.log10(m) if m > 0 else float("-inf")
        typer.echo(f"{f:.6g} Hz |H|={m:.6g} ({db:.2f} dB) phase={p:.4f}")


@app.command()
def stats(
    ctx: typer.Context,
    input: Path = typer.Argument(..., exists=True, dir_okay=False),
    outliers: bool = typer.Option(False, "--outliers/--no-outliers"),
) -> None:
    """Print descriptive statistics of a sample array as JSON."""

    cfg: Settings = ctx.obj
    try:
        data = load_array(input)
        result: Dict[str, object] = asdict(statistics.basic_statistics(data))
        if outliers:
            result["outliers"] = asdict(statistics.detect_outliers(data, settings=cfg))
    except ValueError as exc:
        bad_parameter(str(exc))
    typer.echo(json.dumps(result, indent=2, default=float))


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
