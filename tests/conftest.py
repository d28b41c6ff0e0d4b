import datetime as dt
import sys
from pathlib import Path

import pytest

# ensure src package importable
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture
def config_fields():
    """Keyword arguments for a valid Configuration (June 2024, 4 kWp, PR 0.85)."""
    return dict(
        latitude=51.5,
        longitude=-0.13,
        system_capacity_kwp=4.0,
        tilt_deg=30.0,
        azimuth_deg=0.0,
        panel_efficiency=0.2,
        performance_ratio=0.85,
        start_date=dt.date(2024, 6, 1),
        end_date=dt.date(2024, 6, 30),
    )
