"""Per-epoch output records for position solver runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

import numpy as np

from gnss_pos.models import PosSolver

EPOCH_CSV_COLUMNS = [
    "epoch",
    "adc_ticks",
    "sats",
    "pos_valid",
    "spp_valid",
    "ekf_valid",
    "ekf_confidence",
    "pos_ecef_x",
    "pos_ecef_y",
    "pos_ecef_z",
    "lat_deg",
    "lon_deg",
    "alt_m",
    "t_rx_s",
    "osc_corr",
    "t_gps_s",
]

_CSV_HEADER = ",".join(EPOCH_CSV_COLUMNS) + "\n"


@dataclass(frozen=True)
class EpochRecord:
    """Snapshot of the exported solver state after one epoch."""

    epoch: int
    adc_ticks: int
    sats: int
    pos_valid: bool
    spp_valid: bool
    ekf_valid: bool
    ekf_confidence: int
    pos_ecef: np.ndarray
    lat_deg: float
    lon_deg: float
    alt_m: float
    t_rx_s: float
    osc_corr: float
    t_gps_s: float | None = None


def record_epoch(
    solver: PosSolver,
    epoch: int,
    adc_ticks: int,
    sats: int,
    t_gps_s: float | None = None,
) -> EpochRecord:
    """Capture the solver's exported state."""

    llh = solver.llh()
    return EpochRecord(
        epoch=epoch,
        adc_ticks=int(adc_ticks),
        sats=sats,
        pos_valid=solver.pos_valid(),
        spp_valid=solver.spp_valid(),
        ekf_valid=solver.ekf_valid(),
        ekf_confidence=solver.ekf_confidence,
        pos_ecef=np.array(solver.pos(), dtype=float),
        lat_deg=llh.lat_deg,
        lon_deg=llh.lon_deg,
        alt_m=llh.alt_m,
        t_rx_s=solver.t_rx(),
        osc_corr=solver.osc_corr(),
        t_gps_s=t_gps_s,
    )


def save_epochs_csv(path: str | Path, records: list[EpochRecord]) -> None:
    """Save all epoch records to a CSV file."""

    target = Path(path)
    with target.open("w", encoding="utf-8") as handle:
        handle.write(_CSV_HEADER)
        for record in records:
            handle.write(_record_to_csv_line(record))


def save_epochs_npz(path: str | Path, records: list[EpochRecord]) -> None:
    """Save epoch records to a compressed NPZ file."""

    payload = [asdict(record) for record in records]
    np.savez_compressed(path, epochs=np.array(payload, dtype=object))


def load_epochs_npz(path: str | Path) -> list[dict]:
    """Load epoch records from a compressed NPZ file."""

    data = np.load(path, allow_pickle=True)
    return list(data["epochs"].tolist())


def _record_to_csv_line(record: EpochRecord) -> str:
    row = [
        record.epoch,
        record.adc_ticks,
        record.sats,
        _format_value(record.pos_valid),
        _format_value(record.spp_valid),
        _format_value(record.ekf_valid),
        _format_value(record.ekf_confidence),
        _format_value(float(record.pos_ecef[0])),
        _format_value(float(record.pos_ecef[1])),
        _format_value(float(record.pos_ecef[2])),
        _format_value(record.lat_deg),
        _format_value(record.lon_deg),
        _format_value(record.alt_m),
        _format_value(record.t_rx_s),
        _format_value(record.osc_corr),
        _format_value(record.t_gps_s),
    ]
    return ",".join(str(value) for value in row) + "\n"


def _format_value(value: float | int | bool | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return repr(value) if isinstance(value, float) else str(value)
