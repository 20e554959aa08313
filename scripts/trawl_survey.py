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
from ocean_erddap.aggregation import add_calendar_columns, group_summary
from ocean_erddap.catalog import get_info
from ocean_erddap.config import OUTPUT_DIR
from ocean_erddap.normalise import infer_types, normalise
from ocean_erddap.plotting import PlotStyle, plot_scatter
from ocean_erddap.query import Predicate, tabledap

DATASET_ID = "FRDCPSTrawlLHHaulCatch"
FIELDS = ["cruise", "haul", "latitude", "longitude", "time", "scientific_name", "subsample_count", "subsample_weight"]
SPECIES = "Sardinops sagax"


def get_catches(species, start, end):
    info = get_info(DATASET_ID)
    predicates = [
        Predicate("scientific_name", "=", species),
        Predicate("time", ">=", start),
        Predicate("time", "<=", end),
    ]
    table = tabledap(info, FIELDS, predicates)
    table = normalise(table, infer_types(info, FIELDS))

    # The server did the filtering, make sure it did what we asked
    for p in predicates:
        if not p.mask(table).all():
            raise RuntimeError(f"Rows returned by {DATASET_ID} don't satisfy {p}")

    return table


if __name__ == "__main__":
    catches = get_catches(SPECIES, "2010-01-01", "2012-12-31")
    print(f"{len(catches)} hauls with {SPECIES}")

    catches = add_calendar_columns(catches, "time")
    cruises = group_summary(
        catches, "cruise", ["subsample_count", "subsample_weight"], carry=["year", "month", "latitude", "longitude"]
    )
    print(cruises.to_string(index=False))

    plot_scatter(
        catches, "longitude", "latitude", c="subsample_weight",
        style=PlotStyle(cmap="viridis", figsize=(8, 10), title=SPECIES, colorbar_label="Subsample weight (kg)"),
        filename=OUTPUT_DIR / "trawl_catches.png",
    )
