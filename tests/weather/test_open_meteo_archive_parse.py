import json
from pathlib import Path

from solarestimate.core.debug import ListDebugCollector
from solarestimate.weather.open_meteo import OpenMeteoArchiveProvider, fetch_historical_daily

FIXTURE = Path(__file__).parents[1] / "fixtures" / "open_meteo_archive_daily.json"


class Resp:
    def __init__(self, payload, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self.text = text

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, resp):
        self.resp = resp
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return self.resp


def test_fetch_builds_points_from_fixture():
    data = json.loads(FIXTURE.read_text())
    session = RecordingSession(Resp(data))
    provider = OpenMeteoArchiveProvider(session=session)

    ds = provider.fetch_daily(51.5074, -0.1278, "2024-06-01", "2024-06-03")

    assert len(session.calls) == 1
    assert session.calls[0]["params"]["timezone"] == "UTC"
    assert [p.date for p in ds.points] == ["2024-06-01", "2024-06-02", "2024-06-03"]
    assert ds.points[0].shortwave_radiation_mj_m2 == 20.0
    assert ds.points[0].temperature_c == 18.0
    # null irradiance is carried through, not rejected
    assert ds.points[2].shortwave_radiation_mj_m2 is None
    assert (ds.start_date, ds.end_date) == ("2024-06-01", "2024-06-03")


def test_fetch_echoes_upstream_grid_coordinates():
    data = json.loads(FIXTURE.read_text())
    provider = OpenMeteoArchiveProvider(session=RecordingSession(Resp(data)))
    ds = provider.fetch_daily(51.5074, -0.1278, "2024-06-01", "2024-06-03")
    assert (ds.latitude, ds.longitude) == (51.49, -0.12)


def test_fetch_falls_back_to_requested_coordinates():
    data = json.loads(FIXTURE.read_text())
    del data["latitude"]
    del data["longitude"]
    provider = OpenMeteoArchiveProvider(session=RecordingSession(Resp(data)))
    ds = provider.fetch_daily(51.5074, -0.1278, "2024-06-01", "2024-06-03")
    assert (ds.latitude, ds.longitude) == (51.5074, -0.1278)


def test_fetch_emits_debug_events():
    data = json.loads(FIXTURE.read_text())
    debug = ListDebugCollector()
    provider = OpenMeteoArchiveProvider(session=RecordingSession(Resp(data)), debug=debug)
    provider.fetch_daily(51.5074, -0.1278, "2024-06-01", "2024-06-03")

    assert debug.stages() == ["weather.request", "weather.response_meta", "weather.summary"]
    summary = debug.events[-1]["payload"]
    assert summary["radiation_max"] == 20.0
    assert summary["radiation_missing"] == 1
    assert summary["temp_min"] == 15.1


def test_module_level_fetch_uses_given_session():
    data = json.loads(FIXTURE.read_text())
    session = RecordingSession(Resp(data))
    ds = fetch_historical_daily(51.5, -0.13, "2024-06-01", "2024-06-03", session=session)
    assert len(ds.points) == 3
    assert session.calls[0]["url"].startswith("https://archive-api.open-meteo.com")
