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
import numpy as np

from ocean_erddap.catalog import get_info
from ocean_erddap.config import OUTPUT_DIR, PLAUSIBLE_SST_RANGE
from ocean_erddap.plotting import PlotStyle, plot_map
from ocean_erddap.query import Bound, griddap
from ocean_erddap.regrid import regularise_dataset_axis

DATASET_ID = "jplMURSST41"
LAT_RANGE = (34.0, 36.0)
LON_RANGE = (-123.0, -121.0)


def latest_sst_box(lat_range, lon_range):
    info = get_info(DATASET_ID)
    ds = griddap(
        info,
        ["analysed_sst"],
        {"time": Bound.LAST, "latitude": lat_range, "longitude": lon_range},
    )

    # MUR axes are stored as floats with rounding noise, put them on an exact 0.01 degree grid
    for dim in ["latitude", "longitude"]:
        ds = regularise_dataset_axis(ds, dim)

    return info, ds


if __name__ == "__main__":
    info, ds = latest_sst_box(LAT_RANGE, LON_RANGE)
    sst = ds.analysed_sst.isel(time=0)

    print(f"Retrieved {DATASET_ID} for {str(ds.time.values[0])[:10]}")
    print(f"Grid is {ds.sizes['latitude']} x {ds.sizes['longitude']}")

    values = sst.values[~np.isnan(sst.values)]
    outside = (values < PLAUSIBLE_SST_RANGE[0]) | (values > PLAUSIBLE_SST_RANGE[1])
    print(f"{len(values)} ocean points, {np.count_nonzero(outside)} outside the plausible range")

    style = PlotStyle(
        cmap="RdYlBu_r",
        levels=np.arange(np.floor(values.min()), np.ceil(values.max()) + 0.25, 0.25),
        figsize=(10, 8),
        title=f"MUR SST {str(ds.time.values[0])[:10]}",
        colorbar_label="SST (degree C)",
    )
    plot_map(sst, style, filename=OUTPUT_DIR / "mur_sst_box.png")
