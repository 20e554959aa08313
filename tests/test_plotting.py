#   Open Ocean marine data processing
#   Copyright (C) 2025 John Kennedy
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU General Public License as published by
#   the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU General Public License for more details.
#
#   You should have received a copy of the GNU General Public License
#   along with this program.  If not, see <https://www.gnu.org/licenses/>.
import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
import xarray as xr

import ocean_erddap.plotting as plotting


@pytest.fixture
def sst_field():
    latitudes = np.linspace(30.0, 32.0, 9)
    longitudes = np.linspace(-120.0, -118.0, 9)
    data = 15.0 + np.outer(np.linspace(-1, 1, 9), np.ones(9))
    return xr.DataArray(
        data,
        dims=("latitude", "longitude"),
        coords={"latitude": latitudes, "longitude": longitudes},
        name="analysed_sst",
    )


@pytest.fixture
def anomalies():
    return pd.DataFrame(
        {
            "year": [2010, 2011, 2012, 2013],
            "weight_anomaly": [-0.75, 1.5, 0.2, np.nan],
            "count_anomaly": [1.0, -2.0, 0.5, 0.1],
            "latitude": [42.5, 43.1, 44.0, 45.2],
            "longitude": [-125.1, -125.4, -124.9, -125.0],
        }
    )


def test_plot_style():
    style = plotting.PlotStyle(cmap="RdBu_r", levels=np.arange(-3, 3, 0.5))
    kwargs = style.colour_kwargs()
    assert kwargs["cmap"] == "RdBu_r"
    assert "vmin" not in kwargs

    style = plotting.PlotStyle(vmin=10, vmax=20)
    assert style.colour_kwargs() == {"cmap": "viridis", "vmin": 10, "vmax": 20}


def test_plot_map(tmp_path, sst_field):
    filename = tmp_path / "map.png"
    style = plotting.PlotStyle(cmap="plasma", coastlines=False, figsize=(8, 6), colorbar_label="SST (C)")
    plotting.plot_map(sst_field, style, filename=filename)
    assert filename.exists()


def test_plot_time_series(tmp_path, anomalies):
    filename = tmp_path / "series.png"
    plotting.plot_time_series(anomalies, "year", ["weight_anomaly", "count_anomaly"], filename=filename)
    assert filename.exists()


def test_plot_scatter(tmp_path, anomalies):
    filename = tmp_path / "scatter.png"
    plotting.plot_scatter(
        anomalies, "longitude", "latitude", c="count_anomaly",
        style=plotting.PlotStyle(cmap="RdBu_r", vmin=-2, vmax=2), filename=filename,
    )
    assert filename.exists()
