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
from enum import Enum

import pandas as pd
from loguru import logger

from ocean_erddap.exceptions import InvalidRangeError, ParseError
from ocean_erddap.utils import from_epoch_seconds, parse_times

# Text that ERDDAP and friends use to mean "no data"
MISSING_TEXT = ("", "NaN", "nan", "NA", "null")


class ColumnType(Enum):
    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


def present_mask(column):
    """True for cells holding a value, False for cells that are missing or blank."""
    text = column.astype(str).str.strip()
    return column.notna() & ~text.isin(MISSING_TEXT)


def to_numeric(column):
    """Convert a text column to floats. Cells that can't be parsed become NaN.

    Raises ParseError if the column has values but none of them can be parsed.
    """
    present = present_mask(column)
    values = pd.to_numeric(column.where(present), errors="coerce").astype(float)

    failed = present & values.isna()
    if present.any() and not values.notna().any():
        raise ParseError(f"No value of column {column.name} can be read as a number")
    if failed.any():
        logger.warning(f"{failed.sum()} cells of column {column.name} could not be read as numbers")
    return values


def to_dates(column):
    """Convert a column of ISO 8601 strings, or of seconds since 1970-01-01 UTC, to timestamps.

    The result is timezone-naive UTC. Cells that can't be parsed become NaT.
    """
    present = present_mask(column)
    cleaned = column.where(present)

    seconds = pd.to_numeric(cleaned, errors="coerce")
    if present.any() and seconds[present].notna().all():
        dates = from_epoch_seconds(seconds)
    else:
        dates = parse_times(cleaned)
        dates.index = column.index

    failed = present & dates.isna()
    if present.any() and not dates.notna().any():
        raise ParseError(f"No value of column {column.name} can be read as a date")
    if failed.any():
        logger.warning(f"{failed.sum()} cells of column {column.name} could not be read as dates")
    return pd.Series(dates, index=column.index, name=column.name)


def to_categorical(column):
    return column.where(present_mask(column)).astype("category")


CONVERTERS = {
    ColumnType.NUMERIC: to_numeric,
    ColumnType.DATE: to_dates,
    ColumnType.CATEGORICAL: to_categorical,
}


def normalise(table, types):
    """Return a copy of a text table with columns converted to the requested types.

    Parameters
    ----------
    table: pandas.DataFrame
        Table as returned by query.tabledap, every cell text
    types: dict
        Maps column name to a ColumnType (or its value, e.g. "numeric"). Columns not listed stay as
        text.

    Returns
    -------
    pandas.DataFrame
    """
    unknown = [name for name in types if name not in table.columns]
    if unknown:
        raise InvalidRangeError(f"Columns {unknown} are not in the table")

    result = table.copy()
    for name, column_type in types.items():
        result[name] = CONVERTERS[ColumnType(column_type)](table[name])
    result.attrs = dict(table.attrs)
    return result


def infer_types(info, columns):
    """Work out column types from the catalog entry of the dataset."""
    types = {}
    for name in columns:
        var = info.variable(name)
        if var.is_time:
            types[name] = ColumnType.DATE
        elif var.is_string:
            types[name] = ColumnType.CATEGORICAL
        else:
            types[name] = ColumnType.NUMERIC
    return types
