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
import re
from enum import Enum
from urllib.parse import quote

import numpy as np
import pandas as pd
from erddapy import ERDDAP
from loguru import logger

from ocean_erddap.config import ERDDAP_SERVER
from ocean_erddap.exceptions import InvalidRangeError, ServerError
from ocean_erddap.get_data import get_response, get_text, is_empty_result, raise_for_status
from ocean_erddap.utils import format_time, parse_times, to_epoch_seconds


class Bound(Enum):
    """Earliest or most recent coordinate held by the server."""
    FIRST = "first"
    LAST = "last"


class DimensionRange:
    """An inclusive [start, stop] interval along one named dimension.

    Either end may be a Bound instead of an explicit value. For time, explicit values can be
    anything pandas.Timestamp understands.
    """

    def __init__(self, name, start, stop=None, stride=1):
        self.name = name
        self.start = start
        self.stop = start if stop is None else stop
        self.stride = int(stride)
        if self.stride < 1:
            raise InvalidRangeError(f"Stride for {name} must be a positive integer")

    @classmethod
    def latest(cls, name):
        return cls(name, Bound.LAST, Bound.LAST)

    @classmethod
    def earliest(cls, name):
        return cls(name, Bound.FIRST, Bound.FIRST)

    @property
    def explicit(self):
        return not isinstance(self.start, Bound) and not isinstance(self.stop, Bound)

    def __repr__(self):
        return f"DimensionRange({self.name!r}, {self.start!r}, {self.stop!r}, stride={self.stride})"


class Predicate:
    """A tabledap filter of the form ``field operator literal``."""

    OPERATORS = (">=", "<=", "=")
    PATTERN = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*(>=|<=|=)\s*(.*?)\s*$")

    def __init__(self, field, op, value):
        if op not in self.OPERATORS:
            raise InvalidRangeError(f"Unsupported operator {op!r}, use one of {self.OPERATORS}")
        self.field = field
        self.op = op
        self.value = value

    @classmethod
    def parse(cls, text):
        """Parse strings like 'scientific_name="Sardinops sagax"' or 'time>=2010-01-01'."""
        match = cls.PATTERN.match(text)
        if match is None:
            raise InvalidRangeError(f"Can't parse filter {text!r}")
        field, op, value = match.groups()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        return cls(field, op, value)

    @property
    def key(self):
        return f"{self.field}{self.op}"

    def mask(self, table):
        """Boolean Series of the rows of a normalised table that satisfy the predicate."""
        column = table[self.field]
        value = self.value
        if pd.api.types.is_datetime64_any_dtype(column):
            value = pd.Timestamp(to_epoch_seconds(value), unit="s")
        elif pd.api.types.is_numeric_dtype(column):
            value = float(value)
        else:
            column = column.astype(str)
            value = str(value)
        if self.op == "=":
            return column == value
        if self.op == ">=":
            return column >= value
        return column <= value

    def __str__(self):
        return f"{self.field}{self.op}{self.value}"

    def __repr__(self):
        return f"Predicate({self.field!r}, {self.op!r}, {self.value!r})"


def as_ranges(ranges):
    """Accept a list of DimensionRange or a mapping of name -> (start, stop) and return a dict."""
    if ranges is None:
        return {}
    if isinstance(ranges, dict):
        out = {}
        for name, value in ranges.items():
            if isinstance(value, DimensionRange):
                out[name] = value
            elif isinstance(value, Bound):
                out[name] = DimensionRange(name, value, value)
            else:
                start, stop = value
                out[name] = DimensionRange(name, start, stop)
        return out
    return {r.name: r for r in ranges}


def as_predicates(predicates):
    return [p if isinstance(p, Predicate) else Predicate.parse(p) for p in predicates or []]


def check_fields(info, fields):
    if not fields:
        raise InvalidRangeError("At least one field must be requested")
    for field in fields:
        var = info.variable(field)
        if var.is_dimension:
            raise InvalidRangeError(f"{field} is a dimension of {info.dataset_id}, not a data field")


def format_bound(value, var):
    if value is Bound.FIRST:
        return "0"
    if value is Bound.LAST:
        return "last"
    if var.is_time:
        return f"({format_time(value)})"
    return f"({np.format_float_positional(float(value), trim='-')})"


def bound_as_number(value, var):
    if var.is_time:
        return to_epoch_seconds(value)
    return float(value)


def check_bound(value, var, dataset_id):
    actual_range = var.actual_range
    if actual_range is None:
        return
    tolerance = abs(var.average_spacing) / 2 if var.average_spacing else 0.0
    # Allow for the rounding of the actual_range attribute
    tolerance += 1e-6 * max(1.0, abs(actual_range[1] - actual_range[0]))
    if value < actual_range[0] - tolerance or value > actual_range[1] + tolerance:
        raise InvalidRangeError(
            f"{var.name}={value} is outside the range {actual_range} of dataset {dataset_id}"
        )


def griddap_block(info, dim, dim_range):
    """One [start:stride:stop] block of a griddap query, in the order the dataset stores the axis."""
    var = info.variable(dim)

    if dim_range is None:
        return "[0:1:last]"

    start, stop = dim_range.start, dim_range.stop

    for value in (start, stop):
        if not isinstance(value, Bound):
            check_bound(bound_as_number(value, var), var, info.dataset_id)

    if dim_range.explicit:
        low, high = bound_as_number(start, var), bound_as_number(stop, var)
        if low > high:
            raise InvalidRangeError(f"Range for {dim} starts after it stops: {dim_range}")
        if var.average_spacing is not None and var.average_spacing < 0:
            start, stop = stop, start

    return f"[{format_bound(start, var)}:{dim_range.stride}:{format_bound(stop, var)}]"


def build_griddap_query(info, fields, ranges=None):
    if info.protocol != "griddap":
        raise InvalidRangeError(f"{info.dataset_id} is not a gridded dataset")
    check_fields(info, fields)

    ranges = as_ranges(ranges)
    unknown = [name for name in ranges if name not in info.dimensions]
    if unknown:
        raise InvalidRangeError(f"{unknown} are not dimensions of {info.dataset_id}: {info.dimensions}")

    blocks = "".join(griddap_block(info, dim, ranges.get(dim)) for dim in info.dimensions)
    return ",".join(f"{field}{blocks}" for field in fields)


def griddap_url(info, fields, ranges=None, server=None):
    server = (server or ERDDAP_SERVER).rstrip("/")
    query = build_griddap_query(info, fields, ranges)
    return f"{server}/griddap/{info.dataset_id}.csv?{quote(query, safe='(),:')}"


def read_erddap_csv(text):
    """Read an ERDDAP CSV response, which has a row of names followed by a row of units.

    Every cell is kept as text.
    """
    if len(text.splitlines()) < 2:
        raise ServerError("ERDDAP returned a truncated CSV response")
    header = pd.read_csv(io.StringIO(text), nrows=1, dtype=str, keep_default_na=False)
    table = pd.read_csv(io.StringIO(text), skiprows=[1], dtype=str, keep_default_na=False)
    table.attrs["units"] = header.iloc[0].to_dict()
    return table


def csv_to_dataset(text, info, fields):
    """Pivot a griddap CSV response into an xarray.Dataset with NaN for cells with no data."""
    table = read_erddap_csv(text)
    units = table.attrs["units"]

    missing = [c for c in list(fields) if c not in table.columns]
    if missing:
        raise ServerError(f"ERDDAP response for {info.dataset_id} is missing columns {missing}")

    dims = [dim for dim in info.dimensions if dim in table.columns]

    columns = {}
    for dim in dims:
        if info.variable(dim).is_time:
            columns[dim] = parse_times(table[dim]).values
        else:
            columns[dim] = pd.to_numeric(table[dim], errors="coerce").values
    for field in fields:
        columns[field] = pd.to_numeric(table[field], errors="coerce").values

    df = pd.DataFrame(columns)
    ds = df.set_index(dims)[list(fields)].to_xarray()

    for name in dims + list(fields):
        var = info.variable(name)
        ds[name].attrs.update({"units": units.get(name, var.units or "")})
        if var.long_name:
            ds[name].attrs["long_name"] = var.long_name
    ds.attrs["dataset_id"] = info.dataset_id

    return ds


def griddap(info, fields, ranges=None, server=None):
    """Retrieve a subset of a gridded dataset.

    Parameters
    ----------
    info: DatasetInfo
        Catalog entry returned by catalog.get_info
    fields: list of str
        Names of the data variables to retrieve
    ranges: list of DimensionRange, or dict
        Inclusive range per dimension. A dict maps dimension name to (start, stop) or to a Bound.
        Dimensions without a range are retrieved in full.
    server: str or None
        Base URL of the ERDDAP server

    Returns
    -------
    xarray.Dataset
        One data variable per field on the dataset's dimensions.
    """
    fields = list(fields)
    url = griddap_url(info, fields, ranges, server)
    text = get_text(url)
    ds = csv_to_dataset(text, info, fields)
    logger.info(f"{info.dataset_id}: retrieved {dict(ds.sizes)} of {fields}")
    return ds


def tabledap_constraints(info, predicates):
    constraints = {}
    for p in predicates:
        var = info.variable(p.field)
        if var.is_time:
            if p.field.startswith("time"):
                value = format_time(p.value)
            else:
                value = to_epoch_seconds(p.value)
        elif var.is_string:
            value = str(p.value)
        else:
            try:
                value = float(p.value)
            except (TypeError, ValueError) as err:
                raise InvalidRangeError(f"{p} compares numeric field {p.field} with a non-number") from err
        if p.key in constraints:
            raise InvalidRangeError(f"More than one filter of the form {p.key}, can't send both to the server")
        constraints[p.key] = value
    return constraints


def tabledap_url(info, fields, predicates=None, server=None):
    if info.protocol != "tabledap":
        raise InvalidRangeError(f"{info.dataset_id} is not a tabular dataset")
    fields = list(fields)
    check_fields(info, fields)
    predicates = as_predicates(predicates)
    constraints = tabledap_constraints(info, predicates)

    e = ERDDAP(server=server or ERDDAP_SERVER, protocol="tabledap")
    return e.get_download_url(
        dataset_id=info.dataset_id,
        variables=fields,
        constraints=constraints,
        response="csv",
    )


def tabledap(info, fields, predicates=None, server=None):
    """Retrieve rows of a tabular dataset.

    Parameters
    ----------
    info: DatasetInfo
        Catalog entry returned by catalog.get_info
    fields: list of str
        Columns to retrieve
    predicates: list of Predicate or str
        Filters such as 'scientific_name="Sardinops sagax"' or 'time>=2010-01-01'
    server: str or None
        Base URL of the ERDDAP server

    Returns
    -------
    pandas.DataFrame
        All columns hold text. Units are in DataFrame.attrs["units"].
    """
    fields = list(fields)
    url = tabledap_url(info, fields, predicates, server)

    r = get_response(url)
    if is_empty_result(r):
        logger.info(f"{info.dataset_id}: query matched no rows")
        table = pd.DataFrame({field: pd.Series(dtype=object) for field in fields})
        table.attrs["units"] = {field: info.variable(field).units or "" for field in fields}
        return table
    raise_for_status(r, url)

    table = read_erddap_csv(r.text)
    missing = [c for c in fields if c not in table.columns]
    if missing:
        raise ServerError(f"ERDDAP response for {info.dataset_id} is missing columns {missing}")

    units = table.attrs["units"]
    table = table[fields].copy()
    table.attrs["units"] = {field: units.get(field, "") for field in fields}
    logger.info(f"{info.dataset_id}: retrieved {len(table)} rows of {fields}")
    return table
