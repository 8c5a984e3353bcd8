import numpy as np
import pytest

from gnss_pos.constants import LIGHT_SPEED_MPS, OMEGA_EARTH
from gnss_pos.receiver.geometry import geometric_ranges, range_model, sagnac_rotate
from gnss_pos.timing.gps_time import GPS_WEEK_M
from gnss_pos.utils.angles import elev_azim_deg


def test_sagnac_rotation_preserves_norm_and_z() -> None:
    sv = np.array([[2.0e7], [1.5e7], [0.8e7]])
    rotated = sagnac_rotate(sv, np.array([2.2e7]))

    assert np.linalg.norm(rotated) == pytest.approx(np.linalg.norm(sv))
    assert rotated[2, 0] == sv[2, 0]
    angle = OMEGA_EARTH * 2.2e7 / LIGHT_SPEED_MPS
    # earth rotates eastward during the flight, so the satellite appears to move west
    assert np.arctan2(rotated[1, 0], rotated[0, 0]) == pytest.approx(
        np.arctan2(sv[1, 0], sv[0, 0]) - angle
    )


def test_geometric_range_correction_is_tens_of_meters() -> None:
    receiver = np.array([6_378_137.0, 0.0, 0.0])
    sv = np.array([[2.0e7], [1.6e7], [0.0]])
    _, ranges = geometric_ranges(sv, receiver)
    raw = np.linalg.norm(sv[:, 0] - receiver)

    assert 0.0 < abs(ranges[0] - raw) < 50.0


def test_range_model_residual_and_design_matrix() -> None:
    receiver = np.array([6_378_137.0, 0.0, 0.0])
    sv_xyz = np.array([[2.6e7, 1.0e7], [0.0, 2.0e7], [0.0, 1.0e7]])
    _, ranges = geometric_ranges(sv_xyz, receiver)
    ct_rx = 1.0e12
    sv = np.vstack([sv_xyz, ct_rx - ranges - np.array([3.0, -4.0])])

    residuals, h_matrix = range_model(sv, receiver, ct_rx)

    assert residuals == pytest.approx([3.0, -4.0], abs=1e-3)
    assert h_matrix.shape == (2, 4)
    assert np.all(h_matrix[:, 3] == -1.0)
    assert np.allclose(np.linalg.norm(h_matrix[:, :3], axis=1), 1.0)
    assert h_matrix[0, 0] == pytest.approx(-1.0, abs=1e-5)


def test_range_model_across_week_boundary() -> None:
    receiver = np.array([6_378_137.0, 0.0, 0.0])
    sv_xyz = np.array([[2.6e7], [0.0], [0.0]])
    _, ranges = geometric_ranges(sv_xyz, receiver)
    ct_rx = 0.01 * LIGHT_SPEED_MPS
    sv = np.vstack([sv_xyz, np.mod(ct_rx - ranges, GPS_WEEK_M)])

    residuals, _ = range_model(sv, receiver, ct_rx)

    assert residuals[0] == pytest.approx(0.0, abs=0.1)


def test_elevation_azimuth_of_overhead_and_east() -> None:
    receiver = np.array([6_378_137.0, 0.0, 0.0])
    elev, _ = elev_azim_deg(receiver, np.array([2.6e7, 0.0, 0.0]))
    assert elev == pytest.approx(90.0)

    elev, azim = elev_azim_deg(receiver, np.array([6_378_137.0, 1.0e6, 0.0]))
    assert elev == pytest.approx(0.0, abs=1e-6)
    assert azim == pytest.approx(90.0)
