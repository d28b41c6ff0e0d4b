import json
from pathlib import Path

from typer.testing import CliRunner

from solarestimate import cli
from solarestimate.core.config import load_configuration
from solarestimate.core.models import WeatherDataPoint, WeatherDataset
from solarestimate.core.store import RESULT_KEY
from solarestimate.weather.base import FetchError

runner = CliRunner()


def _write_fixture(tmp_path: Path, performance_ratio: float = 0.85) -> Path:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "latitude: 51.5\n"
        "longitude: -0.13\n"
        "system_capacity_kwp: 4\n"
        "tilt_deg: 30\n"
        "azimuth_deg: 0\n"
        "panel_efficiency: 0.2\n"
        f"performance_ratio: {performance_ratio}\n"
        "start_date: '2024-06-01'\n"
        "end_date: '2024-06-02'\n"
    )
    return cfg


class DummyWeatherProvider:
    def __init__(self, error=None):
        self.error = error

    def fetch_daily(self, latitude, longitude, start_date, end_date):
        if self.error:
            raise self.error
        return WeatherDataset(
            latitude=latitude,
            longitude=longitude,
            start_date=str(start_date),
            end_date=str(end_date),
            points=[WeatherDataPoint("2024-06-01", 20.0, 18.0), WeatherDataPoint("2024-06-02", None, 17.0)],
        )


def _patch_provider(monkeypatch, provider):
    def fake_provider(debug, base_url=None):
        return provider

    monkeypatch.setattr(cli, "default_weather_provider", fake_provider)


def test_help_exits_zero():
    res = runner.invoke(cli.app, ["--help"])
    assert res.exit_code == 0
    for command in ("run", "config", "show", "export"):
        assert command in res.output


def test_version_flag():
    res = runner.invoke(cli.app, ["--version"])
    assert res.exit_code == 0
    assert cli.__version__ in res.output


def test_run_command_smoke(monkeypatch, tmp_path):
    cfg = _write_fixture(tmp_path)
    store = tmp_path / "store.json"
    out_csv = tmp_path / "estimate.csv"
    debug_path = tmp_path / "debug.json"
    _patch_provider(monkeypatch, DummyWeatherProvider())

    res = runner.invoke(
        cli.app,
        ["run", "--config", str(cfg), "--store", str(store), "--csv", str(out_csv), "--debug", str(debug_path)],
    )

    assert res.exit_code == 0, res.output
    assert "Annual energy:      19 kWh" in res.output
    stored = json.loads(json.loads(store.read_text())[RESULT_KEY])
    assert stored["dailyKWh"] == {"2024-06-01": 18.89, "2024-06-02": 0.0}
    assert stored["annualKWh"] == 18.89
    assert out_csv.read_text().splitlines()[-2:] == ["2024-06-01,18.89", "2024-06-02,0.00"]
    events = json.loads(debug_path.read_text())
    assert [e["stage"] for e in events] == ["estimate.summary"]


def test_run_rejects_invalid_config(monkeypatch, tmp_path):
    cfg = _write_fixture(tmp_path, performance_ratio=1.5)
    store = tmp_path / "store.json"
    _patch_provider(monkeypatch, DummyWeatherProvider())

    res = runner.invoke(cli.app, ["run", "--config", str(cfg), "--store", str(store)])
    assert res.exit_code == 1
    assert "performance_ratio" in res.output
    assert not store.exists()


def test_run_reports_fetch_failure(monkeypatch, tmp_path):
    cfg = _write_fixture(tmp_path)
    store = tmp_path / "store.json"
    _patch_provider(monkeypatch, DummyWeatherProvider(error=FetchError("Open-Meteo request failed (500).", 500)))

    res = runner.invoke(cli.app, ["run", "--config", str(cfg), "--store", str(store)])
    assert res.exit_code == 1
    assert "weather fetch failed" in res.output
    assert not store.exists()


def test_run_uses_store_from_run_section(monkeypatch, tmp_path):
    cfg = _write_fixture(tmp_path)
    store = tmp_path / "configured_store.json"
    cfg.write_text(cfg.read_text() + f"run:\n  store: {store}\n")
    _patch_provider(monkeypatch, DummyWeatherProvider())

    res = runner.invoke(cli.app, ["run", "--config", str(cfg)])
    assert res.exit_code == 0, res.output
    assert store.exists()


def test_show_and_export_after_run(monkeypatch, tmp_path):
    cfg = _write_fixture(tmp_path)
    store = tmp_path / "store.json"
    _patch_provider(monkeypatch, DummyWeatherProvider())
    assert runner.invoke(cli.app, ["run", "--config", str(cfg), "--store", str(store)]).exit_code == 0

    shown = runner.invoke(cli.app, ["show", "--store", str(store)])
    assert shown.exit_code == 0
    assert "Location: 51.5, -0.13" in shown.output
    assert "2024-06: 18.89" in shown.output

    out_csv = tmp_path / "export.csv"
    exported = runner.invoke(cli.app, ["export", "--store", str(store), "--output", str(out_csv)])
    assert exported.exit_code == 0, exported.output
    assert out_csv.read_text().startswith("latitude,51.5\n")


def test_show_without_data(tmp_path):
    res = runner.invoke(cli.app, ["show", "--store", str(tmp_path / "missing.json")])
    assert res.exit_code == 0
    assert "No estimation result available" in res.output

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{broken")
    res = runner.invoke(cli.app, ["show", "--store", str(corrupt)])
    assert res.exit_code == 0
    assert "No estimation result available" in res.output


def test_export_without_data_fails(tmp_path):
    res = runner.invoke(cli.app, ["export", "--store", str(tmp_path / "missing.json"), "--output", str(tmp_path / "x.csv")])
    assert res.exit_code == 1
    assert not (tmp_path / "x.csv").exists()


def test_config_command_prompts_and_saves(tmp_path):
    path = tmp_path / "config.yaml"
    input_lines = ["51.5", "-0.13", "4", "30", "0", "0.2", "0.85", "2024-06-01", "2024-06-30"]

    res = runner.invoke(cli.app, ["config", str(path)], input="\n".join(input_lines) + "\n")

    assert res.exit_code == 0, res.output
    cfg = load_configuration(path)
    assert cfg.system_capacity_kwp == 4.0
    assert cfg.end_date.isoformat() == "2024-06-30"


def test_config_command_edits_existing_defaults(tmp_path):
    path = _write_fixture(tmp_path)
    # accept every default except tilt
    input_lines = ["", "", "", "35", "", "", "", "", ""]

    res = runner.invoke(cli.app, ["config", str(path)], input="\n".join(input_lines) + "\n")

    assert res.exit_code == 0, res.output
    cfg = load_configuration(path)
    assert cfg.tilt_deg == 35.0
    assert cfg.start_date.isoformat() == "2024-06-01"


def test_config_command_rejects_invalid_values(tmp_path):
    path = tmp_path / "config.yaml"
    input_lines = ["51.5", "-0.13", "4", "30", "0", "0.2", "1.5", "2024-06-01", "2024-06-30"]

    res = runner.invoke(cli.app, ["config", str(path)], input="\n".join(input_lines) + "\n")

    assert res.exit_code == 1
    assert "Invalid configuration" in res.output
    assert not path.exists()
