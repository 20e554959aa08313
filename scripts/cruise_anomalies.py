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

from ocean_erddap.aggregation import add_calendar_columns, anomalies, climatology, group_summary, rollup
from ocean_erddap.catalog import get_info
from ocean_erddap.config import OUTPUT_DIR
from ocean_erddap.normalise import infer_types, normalise
from ocean_erddap.plotting import PlotStyle, plot_time_series
from ocean_erddap.query import tabledap

DATASET_ID = "FRDCPSTrawlLHHaulCatch"
FIELDS = ["cruise", "time", "scientific_name", "subsample_count", "subsample_weight"]
QUANTITIES = ["subsample_count", "subsample_weight"]


def cruise_means(species, start, end):
    info = get_info(DATASET_ID)
    table = tabledap(
        info, FIELDS,
        [f'scientific_name="{species}"', f"time>={start}", f"time<={end}"],
    )
    table = normalise(table, infer_types(info, FIELDS))
    table = add_calendar_columns(table, "time")

    cruises = group_summary(table, "cruise", QUANTITIES, carry=["year", "month"])
    # Cruises spanning two months get a half month median, use the earlier one
    cruises["month"] = np.floor(cruises["month"]).astype(int)
    cruises["year"] = np.floor(cruises["year"]).astype(int)
    return cruises


if __name__ == "__main__":
    cruises = cruise_means("Engraulis mordax", "2003-01-01", "2019-12-31")
    print(f"{len(cruises)} cruises")

    monthly = climatology(cruises, "month", QUANTITIES)
    print("Monthly climatology")
    print(monthly)

    cruise_anomalies = anomalies(cruises, monthly, "month", QUANTITIES)
    yearly = rollup(cruise_anomalies, "year", [f"{q}_anomaly" for q in QUANTITIES])
    print(yearly.to_string(index=False))

    plot_time_series(
        yearly, "year", [f"{q}_anomaly" for q in QUANTITIES],
        style=PlotStyle(figsize=(12, 5), title="Northern anchovy catch anomalies"),
        filename=OUTPUT_DIR / "anchovy_anomalies.png",
    )
