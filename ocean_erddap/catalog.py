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
import io

import pandas as pd
from erddapy import ERDDAP
from loguru import logger

from ocean_erddap.config import ERDDAP_SERVER
from ocean_erddap.exceptions import DatasetNotFoundError, InvalidRangeError, ParseError
from ocean_erddap.get_data import get_response, raise_for_status
from ocean_erddap.utils import is_time_units

INFO_COLUMNS = ["Row Type", "Variable Name", "Attribute Name", "Data Type", "Value"]


class Variable:
    """A variable or dimension described by an ERDDAP info table."""

    def __init__(self, name, data_type=None, is_dimension=False):
        self.name = name
        self.data_type = data_type
        self.is_dimension = is_dimension
        self.attributes = {}
        self.n_values = None
        self.evenly_spaced = None
        self.average_spacing = None

    @property
    def units(self):
        return self.attributes.get("units")

    @property
    def long_name(self):
        return self.attributes.get("long_name")

    @property
    def actual_range(self):
        """(min, max) as floats, or None. Times are seconds since 1970-01-01 UTC."""
        value = self.attributes.get("actual_range")
        if value is None:
            return None
        try:
            low, high = [float(v) for v in value.split(",")]
        except ValueError:
            return None
        return min(low, high), max(low, high)

    @property
    def is_time(self):
        return is_time_units(self.units)

    @property
    def is_string(self):
        return self.data_type is not None and self.data_type.lower() in ("string", "char")

    def __repr__(self):
        kind = "dimension" if self.is_dimension else "variable"
        return f"Variable({self.name!r}, {kind}, units={self.units!r})"


class DatasetInfo:

    def __init__(self, dataset_id, dimensions, variables, attributes):
        self.dataset_id = dataset_id
        self.dimensions = dimensions
        self.variables = variables
        self.attributes = attributes
        self.protocol = "griddap" if dimensions else "tabledap"

    @property
    def fields(self):
        """Names of the data variables, excluding dimensions."""
        return [name for name, var in self.variables.items() if not var.is_dimension]

    def has(self, name):
        return name in self.variables

    def variable(self, name):
        if name not in self.variables:
            raise InvalidRangeError(f"{name} is not a variable of dataset {self.dataset_id}")
        return self.variables[name]

    def __repr__(self):
        return (
            f"DatasetInfo({self.dataset_id!r}, protocol={self.protocol!r}, "
            f"dimensions={self.dimensions}, fields={self.fields})"
        )


def parse_dimension_value(var, value):
    # e.g. "nValues=8030, evenlySpaced=false, averageSpacing=1 day 0h 0m 0s"
    for item in value.split(","):
        if "=" not in item:
            continue
        key, entry = [part.strip() for part in item.split("=", 1)]
        if key == "nValues":
            var.n_values = int(entry)
        elif key == "evenlySpaced":
            var.evenly_spaced = entry.lower() == "true"
        elif key == "averageSpacing":
            try:
                var.average_spacing = float(entry)
            except ValueError:
                var.average_spacing = None


def parse_info(text, dataset_id):
    """Build a DatasetInfo from the text of an ERDDAP info/<dataset_id>/index.csv response."""
    table = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)

    missing = [c for c in INFO_COLUMNS if c not in table.columns]
    if missing:
        raise ParseError(f"Info table for {dataset_id} is missing columns {missing}")

    dimensions = []
    variables = {}
    attributes = {}

    for row in table.itertuples(index=False):
        row_type, name, attribute, data_type, value = row[:5]

        if row_type == "attribute" and name == "NC_GLOBAL":
            attributes[attribute] = value
        elif row_type == "dimension":
            var = Variable(name, data_type, is_dimension=True)
            parse_dimension_value(var, value)
            variables[name] = var
            dimensions.append(name)
        elif row_type == "variable":
            variables[name] = Variable(name, data_type)
        elif row_type == "attribute" and name in variables:
            variables[name].attributes[attribute] = value

    return DatasetInfo(dataset_id, dimensions, variables, attributes)


def get_info(dataset_id, server=None):
    """Look up the variables and dimensions of an ERDDAP dataset.

    Parameters
    ----------
    dataset_id: str
        ERDDAP dataset identifier, e.g. jplMURSST41
    server: str or None
        Base URL of the ERDDAP server. Defaults to config.ERDDAP_SERVER.

    Returns
    -------
    DatasetInfo
    """
    server = server or ERDDAP_SERVER
    url = ERDDAP(server=server).get_info_url(dataset_id=dataset_id, response="csv")

    r = get_response(url)
    if r.status_code == 404:
        raise DatasetNotFoundError(f"Dataset {dataset_id} not found on {server}")
    raise_for_status(r, url)

    info = parse_info(r.text, dataset_id)
    logger.info(
        f"{dataset_id}: {info.protocol} dataset with {len(info.fields)} fields "
        f"and dimensions {info.dimensions}"
    )
    return info
