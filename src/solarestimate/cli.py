"""Command line entrypoint for solarestimate.

Commands:

* ``run``: fetch historical weather for a configuration and estimate PV energy.
* ``config``: prompt for every configuration field and save a YAML/JSON file.
* ``show``: print the last stored estimation summary.
* ``export``: write the stored daily estimates as CSV.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from solarestimate.core.config import ConfigError, load_configuration, load_run_section, write_configuration
from solarestimate.core.debug import DebugCollector, build_debug_collector
from solarestimate.core.models import Configuration, InvalidConfigError
from solarestimate.core import store as store_mod
from solarestimate.engine.estimate import run_estimation
from solarestimate.reporting.export import write_csv
from solarestimate.reporting.summary import format_summary
from solarestimate.weather.base import FetchError, ShapeError
from solarestimate.weather.open_meteo import OpenMeteoArchiveProvider

__version__ = "0.1.0"

DEFAULT_STORE = Path("estimate_store.json")

app = typer.Typer(add_completion=False, help="Historical PV energy estimator CLI")


def default_weather_provider(debug: DebugCollector, base_url: str | None = None) -> OpenMeteoArchiveProvider:
    """Factory separated for easy monkeypatching in tests."""

    if base_url:
        return OpenMeteoArchiveProvider(base_url=base_url, debug=debug)
    return OpenMeteoArchiveProvider(debug=debug)


def _exit_with_error(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(code=1)


def _describe(cfg: Configuration) -> str:
    return f"Location: {cfg.latitude}, {cfg.longitude} | Period: {cfg.start_date} → {cfg.end_date}"


@app.command()
def run(
    config: Path = typer.Option(Path("etc/config.yaml"), exists=True, readable=True, help="Configuration YAML/JSON file"),
    store: Optional[Path] = typer.Option(
        None, help="Store file for configuration and result; defaults to run.store in config, else estimate_store.json"
    ),
    csv: Optional[Path] = typer.Option(None, help="Also write daily estimates as CSV to this path"),
    debug: Optional[Path] = typer.Option(None, help="Write debug events (.json array, otherwise JSONL)"),
):
    """Estimate energy for the configured location and date range."""

    try:
        cfg = load_configuration(config)
        run_section = load_run_section(config)
    except (ConfigError, InvalidConfigError) as exc:
        _exit_with_error(str(exc))

    store_path = store or Path(run_section.get("store") or DEFAULT_STORE)
    csv_path = csv or (Path(run_section["csv"]) if run_section.get("csv") else None)

    debug_collector = build_debug_collector(debug)
    provider = default_weather_provider(debug_collector, base_url=run_section.get("base_url"))
    typer.echo(_describe(cfg))
    try:
        result = run_estimation(cfg, provider=provider, debug=debug_collector)
    except FetchError as exc:
        _exit_with_error(f"weather fetch failed: {exc}")
    except ShapeError as exc:
        _exit_with_error(f"unexpected weather data: {exc}")
    finally:
        finalize = getattr(debug_collector, "finalize", None)
        if finalize is not None:
            finalize()

    kv = store_mod.JsonFileStore(store_path)
    store_mod.save_configuration(kv, cfg)
    store_mod.save_result(kv, result)

    typer.echo(format_summary(result))
    typer.echo(f"Saved estimation to {store_path}")
    if csv_path:
        write_csv(csv_path, result, cfg)
        typer.echo(f"Wrote {len(result.daily_kwh)} daily rows to {csv_path}")
    if debug:
        typer.echo(f"Debug events -> {debug}")


def _load_existing(path: Path) -> Configuration | None:
    if not path.exists():
        return None
    try:
        cfg = load_configuration(path)
        typer.echo(f"Loaded existing configuration from {path}")
        return cfg
    except (ConfigError, InvalidConfigError) as exc:
        typer.echo(f"Could not load existing config: {exc}", err=True)
        return None


@app.command()
def config(
    path: Path = typer.Argument(..., help="Path to save configuration YAML/JSON"),
):
    """Interactive configuration builder/editor."""

    existing = _load_existing(path)

    def prompt_float(label: str, attr: str, default: float) -> float:
        value = getattr(existing, attr) if existing else default
        return typer.prompt(label, default=value, type=float)

    raw = {
        "latitude": prompt_float("Latitude", "latitude", 0.0),
        "longitude": prompt_float("Longitude", "longitude", 0.0),
        "system_capacity_kwp": prompt_float("System capacity kWp", "system_capacity_kwp", 4.0),
        "tilt_deg": prompt_float("Tilt deg", "tilt_deg", 30.0),
        "azimuth_deg": prompt_float("Azimuth deg", "azimuth_deg", 0.0),
        "panel_efficiency": prompt_float("Panel efficiency (0-1]", "panel_efficiency", 0.2),
        "performance_ratio": prompt_float("Performance ratio (0-1]", "performance_ratio", 0.85),
        "start_date": typer.prompt(
            "Start date (YYYY-MM-DD)", default=existing.start_date.isoformat() if existing else None
        ),
        "end_date": typer.prompt("End date (YYYY-MM-DD)", default=existing.end_date.isoformat() if existing else None),
    }
    try:
        cfg = Configuration.from_dict(raw)
    except InvalidConfigError as exc:
        _exit_with_error(f"Invalid configuration: {exc}")

    try:
        write_configuration(path, cfg)
    except ConfigError as exc:
        _exit_with_error(str(exc))
    typer.echo(f"Saved configuration to {path}")


@app.command()
def show(
    store: Path = typer.Option(DEFAULT_STORE, help="Store file written by `run`"),
):
    """Print the stored estimation summary."""

    kv = store_mod.JsonFileStore(store)
    result = store_mod.load_result(kv)
    if result is None:
        typer.echo("No estimation result available. Run `solarestimate run` first.")
        return
    cfg = store_mod.load_configuration(kv)
    if cfg is not None:
        typer.echo(_describe(cfg))
    typer.echo(format_summary(result))


@app.command("export")
def export_cmd(
    output: Path = typer.Option(..., "--output", "-o", help="CSV file to write"),
    store: Path = typer.Option(DEFAULT_STORE, help="Store file written by `run`"),
):
    """Write stored daily estimates as CSV."""

    kv = store_mod.JsonFileStore(store)
    result = store_mod.load_result(kv)
    cfg = store_mod.load_configuration(kv)
    if result is None or cfg is None:
        _exit_with_error("No stored estimation to export. Run `solarestimate run` first.")
    write_csv(output, result, cfg)
    typer.echo(f"Wrote {len(result.daily_kwh)} daily rows to {output}")


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    if version:
        typer.echo(__version__)
        raise typer.Exit()


def main() -> None:  # pragma: no cover - thin wrapper for console_script
    app()


__all__ = ["app", "main", "default_weather_provider"]


if __name__ == "__main__":  # pragma: no cover
    main()
