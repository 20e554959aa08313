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
import os

import numpy as np

from ocean_erddap.catalog import get_info
from ocean_erddap.config import OUTPUT_DIR
from ocean_erddap.plotting import PlotStyle, plot_map
from ocean_erddap.query import Bound, griddap
from ocean_erddap.regrid import regrid_dataarray

# Ocean model output on a grid with unevenly spaced latitudes
DATASET_ID = os.getenv("IRREGULAR_DATASET", "ucsc_ccsra_wcra31_daily")
FIELD = os.getenv("IRREGULAR_FIELD", "temp")
LAT_RANGE = (32.0, 42.0)
LON_RANGE = (-128.0, -117.0)


if __name__ == "__main__":
    info = get_info(DATASET_ID)
    ranges = {"time": Bound.LAST, "latitude": LAT_RANGE, "longitude": LON_RANGE}
    # Take the shallowest level if the model has depth
    for dim in info.dimensions:
        if dim not in ranges:
            ranges[dim] = Bound.FIRST

    ds = griddap(info, [FIELD], ranges)
    field = ds[FIELD]

    spacing = np.diff(field.latitude.values)
    print(f"Latitude spacing varies from {spacing.min():.4f} to {spacing.max():.4f} degrees")

    even = regrid_dataarray(field, "longitude", "latitude")
    print(f"Interpolated onto a {even.sizes['latitude']} x {even.sizes['longitude']} even grid")

    plot_map(
        even,
        PlotStyle(cmap="RdYlBu_r", figsize=(8, 9), title=f"{DATASET_ID} {FIELD}", colorbar_label=field.attrs.get("units")),
        filename=OUTPUT_DIR / "irregular_grid.png",
    )
