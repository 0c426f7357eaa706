"""Generate a synthetic RTIS trip with matching OHE and signal catalogues."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
import pandas as pd
import yaml

from rtis_audit import analyze, load_rules
from rtis_audit.logging_setup import configure_logging

START_TIMESTAMP = "2024-01-01T08:00:00Z"
ORIGIN_LAT = 21.0
ORIGIN_LON = 79.0
START_KM = 962
POLES_PER_KM = 16
POLE_SPACING_M = 60.0
METRES_PER_DEG_LAT = 111_111.0

SAMPLES_DIR = Path(__file__).resolve().parents[1] / "data" / "samples"

rng = np.random.default_rng(seed=42)

# (target km/h, change per second, seconds to hold once reached)
PROFILE: Sequence[Tuple[float, float, int]] = (
    (0, 1.0, 60),     # standing at the start
    (12, 1.0, 20),
    (5, 1.0, 10),     # brake feel test
    (80, 1.0, 60),
    (35, 2.0, 10),    # brake power test
    (110, 1.0, 240),
    (118, 0.5, 60),   # over the limit
    (100, 1.0, 120),
    (0, 1.0, 120),    # halt at a signal
    (100, 1.0, 300),
)


def generate_speed_profile() -> np.ndarray:
    """Piecewise ramp-and-hold speed profile at 1 Hz, in km/h."""

    speeds: list[float] = []
    current = 0.0
    for target, rate, hold in PROFILE:
        while abs(current - target) > 1e-9:
            step = min(rate, abs(target - current))
            current += step if target > current else -step
            speeds.append(current)
        speeds.extend([target] * hold)
    return np.asarray(speeds, dtype=float)


def chainage_to_latlon(chainage_m: np.ndarray | float, offset_east_m: float = 0.0):
    """Straight northbound track starting at ``START_KM`` on the origin."""

    north = np.asarray(chainage_m, dtype=float) - START_KM * 1000.0
    lat = ORIGIN_LAT + north / METRES_PER_DEG_LAT
    lon = ORIGIN_LON + offset_east_m / (METRES_PER_DEG_LAT * np.cos(np.radians(ORIGIN_LAT)))
    return lat, lon


def integrate_chainage(speed_kmph: np.ndarray) -> np.ndarray:
    """Chainage of the train head at each second."""

    metres = np.concatenate([[0.0], np.cumsum(speed_kmph[:-1] / 3.6)])
    return START_KM * 1000.0 + metres


def build_rtis(speed_kmph: np.ndarray) -> pd.DataFrame:
    chainage = integrate_chainage(speed_kmph)
    lat, lon = chainage_to_latlon(chainage)
    jitter = rng.normal(0, 2.0, size=(2, speed_kmph.size)) / METRES_PER_DEG_LAT
    index = pd.date_range(start=START_TIMESTAMP, periods=speed_kmph.size, freq="s", tz="UTC")
    noisy_speed = np.clip(speed_kmph + rng.normal(0, 0.3, size=speed_kmph.size), 0.0, None)
    noisy_speed[speed_kmph == 0] = 0.0
    return pd.DataFrame(
        {
            "Logging Time": index.strftime("%Y-%m-%d %H:%M:%S"),
            "Latitude": np.round(lat + jitter[0], 7),
            "Longitude": np.round(lon + jitter[1], 7),
            "Speed": np.round(noisy_speed, 1),
        }
    )


def build_ohe(last_chainage_m: float) -> pd.DataFrame:
    labels: list[str] = []
    chainages: list[float] = []
    km = START_KM
    while km * 1000.0 <= last_chainage_m:
        for pole in range(POLES_PER_KM):
            labels.append(f"{km}/{pole}")
            chainages.append(km * 1000.0 + pole * POLE_SPACING_M)
        km += 1
    lat, lon = chainage_to_latlon(np.asarray(chainages), offset_east_m=4.0)
    lon = np.broadcast_to(lon, lat.shape)
    return pd.DataFrame(
        {"OHEMas": labels, "Latitude": np.round(lat, 7), "Longitude": np.round(lon, 7)}
    )


def build_signals(stop_chainage_m: float) -> pd.DataFrame:
    chainages = [stop_chainage_m - 4000.0, stop_chainage_m - 1500.0, stop_chainage_m + 20.0]
    names = ["S-12 Distant", "S-14 Inner", "S-16 Home"]
    lat, lon = chainage_to_latlon(np.asarray(chainages), offset_east_m=-4.0)
    lon = np.broadcast_to(lon, lat.shape)
    return pd.DataFrame(
        {"Signal": names, "Latitude": np.round(lat, 7), "Longitude": np.round(lon, 7)}
    )


def write_demo_data() -> Path:
    speed = generate_speed_profile()
    chainage = integrate_chainage(speed)
    stop_positions = np.flatnonzero(speed == 0)
    stop_chainage = float(chainage[stop_positions[stop_positions > 100][0]])

    df_rtis = build_rtis(speed)
    df_ohe = build_ohe(float(chainage[-1]))
    df_signals = build_signals(stop_chainage)
    config = {
        "global_mps_kmph": 110,
        "max_distance_m": 50,
        "train_type": "passenger",
        "caution_orders": [
            {"start_label": f"{START_KM + 9}/0", "end_label": f"{START_KM + 10}/0", "speed_limit_kmph": 100}
        ],
    }

    SAMPLES_DIR.mkdir(parents=True, exist_ok=True)
    df_rtis.to_csv(SAMPLES_DIR / "rtis_demo.csv", index=False)
    df_ohe.to_csv(SAMPLES_DIR / "ohe_demo.csv", index=False)
    df_signals.to_csv(SAMPLES_DIR / "signals_demo.csv", index=False)
    (SAMPLES_DIR / "rules_demo.yaml").write_text(yaml.safe_dump(config, sort_keys=False))

    minutes = speed.size / 60.0
    distance_km = (chainage[-1] - chainage[0]) / 1000.0
    print(f"Generated {speed.size} samples ({minutes:.1f} min @ 1 Hz, ~{distance_km:.1f} km)")
    print(f"OHE masts: {len(df_ohe)}, signals: {len(df_signals)}")
    print(f"Wrote demo files to {SAMPLES_DIR}")
    return SAMPLES_DIR


def main() -> None:
    configure_logging("WARNING")
    samples = write_demo_data()
    result = analyze(
        pd.read_csv(samples / "rtis_demo.csv", dtype=str),
        pd.read_csv(samples / "ohe_demo.csv", dtype=str),
        pd.read_csv(samples / "signals_demo.csv", dtype=str),
        config=load_rules(samples / "rules_demo.yaml"),
    )
    print()
    print(result.summary_md)


if __name__ == "__main__":
    main()
