"""
Tests for profiles, CSV export and plotting.
"""

import math

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest

from tabatmo.export import export_profile_csv
from tabatmo.plotting import plot_profiles
from tabatmo.profiles import altitude_grid, sample_profile
from tabatmo.tables import ussa1976_atmosphere


@pytest.fixture(scope="module")
def ussa():
    return ussa1976_atmosphere()


@pytest.fixture
def profile(ussa):
    return sample_profile(ussa, altitude_grid(0.0, 20_000.0, 21), speed_of_sound=True)


class TestAltitudeGrid:

    def test_spacing(self):
        h = altitude_grid(0.0, 1000.0, 11)
        assert len(h) == 11
        assert h[1] == pytest.approx(100.0)

    def test_invalid(self):
        with pytest.raises(ValueError):
            altitude_grid(0.0, 1000.0, 1)
        with pytest.raises(ValueError):
            altitude_grid(5000.0, 1000.0, 10)


class TestSampleProfile:

    def test_columns(self, profile):
        assert list(profile) == ['altitude', 'density', 'pressure',
                                 'temperature', 'speed_of_sound']
        assert all(len(v) == 21 for v in profile.values())

    def test_matches_point_queries(self, ussa, profile):
        for i, h in enumerate(profile['altitude']):
            assert profile['density'][i] == ussa.get_density(h)
            assert profile['temperature'][i] == ussa.get_temperature(h)

    def test_sea_level_speed_of_sound(self, profile):
        assert profile['speed_of_sound'][0] == pytest.approx(
            math.sqrt(1.4 * 287.0 * 288.15), rel=1e-12)

    def test_selected_variables(self, ussa):
        out = sample_profile(ussa, [0.0, 500.0], variables=['temperature'])
        assert list(out) == ['altitude', 'temperature']
        np.testing.assert_allclose(out['temperature'], [288.15, 284.9], atol=1e-2)

    def test_density_decreases(self, profile):
        assert np.all(np.diff(profile['density']) < 0.0)


class TestExport:

    def test_csv(self, profile, tmp_path):
        path = export_profile_csv(profile, tmp_path / "profile.csv")
        lines = path.read_text().splitlines()
        assert lines[0] == "altitude,density,pressure,temperature,speed_of_sound"
        assert len(lines) == 22
        first = [float(x) for x in lines[1].split(",")]
        assert first[0] == 0.0
        assert first[1] == pytest.approx(1.225)

    def test_subsampled(self, profile, tmp_path):
        path = export_profile_csv(profile, tmp_path / "short.csv", n_points=5)
        assert len(path.read_text().splitlines()) == 6

    def test_unequal_columns(self, tmp_path):
        with pytest.raises(ValueError):
            export_profile_csv({'altitude': [0.0, 1.0], 'density': [1.0]},
                               tmp_path / "bad.csv")


class TestPlotting:

    def test_one_panel_per_quantity(self, profile):
        fig = plot_profiles(profile, show=False)
        assert len(fig.axes) == 4
        assert fig.axes[0].get_xscale() == 'log'
        assert fig.axes[2].get_xscale() == 'linear'
        plt.close(fig)

    def test_save(self, profile, tmp_path):
        out = tmp_path / "profile.png"
        fig = plot_profiles(profile, show=False, save_path=str(out))
        assert out.exists()
        plt.close(fig)

    def test_empty_profile(self):
        with pytest.raises(ValueError):
            plot_profiles({'altitude': np.array([0.0, 1.0])}, show=False)
