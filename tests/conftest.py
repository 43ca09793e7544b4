import pytest

from drone_overlay.config import OverlayConfig
from drone_overlay.telemetry import TelemetryRecord

HEADER = "isVideo,latitude,longitude,ascent(feet),compass_heading(degrees)"


@pytest.fixture
def config():
    return OverlayConfig()


@pytest.fixture
def two_row_log():
    """One pre-recording row followed by one video row."""
    return f"{HEADER}\n0,10,10,50,0\n1,20,20,100,90\n"


@pytest.fixture
def flight_log():
    """Twenty video rows flying north with a slowly turning heading."""
    rows = [HEADER, "0,52.2790,20.9080,0,0"]
    for i in range(20):
        rows.append(f"1,{52.2800 + i * 0.0001:.4f},20.9090,{100 + i},{i * 18}")
    rows.append("0,52.2830,20.9090,0,0")
    return "\n".join(rows) + "\n"


def make_record(lon=20.0, lat=20.0, ascent=100.0, heading=90.0, video=True):
    return TelemetryRecord(
        is_video_phase=video,
        latitude=lat,
        longitude=lon,
        ascent_feet=ascent,
        compass_heading_degrees=heading,
    )
