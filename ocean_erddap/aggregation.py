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
import pandas as pd


def nanmean(values):
    """Arithmetic mean ignoring NaN. Returns NaN when there are no valid values."""
    values = np.asarray(values, dtype=float)
    valid = values[~np.isnan(values)]
    if len(valid) == 0:
        return np.nan
    return np.mean(valid)


def as_list(keys):
    if keys is None:
        return []
    if isinstance(keys, str):
        return [keys]
    return list(keys)


def group_summary(table, keys, columns, carry=None):
    """Summarise a table with one row per distinct value of the grouping key(s).

    Parameters
    ----------
    table: pandas.DataFrame
        Normalised observations
    keys: str or list of str
        Grouping key, e.g. "cruise", or a composite key
        Rows with a missing key are left out of the summary.
    columns: str or list of str
        Numeric columns to average. Missing values are ignored and a group with no valid values
        gets NaN.
    carry: str or list of str or None
        Further columns carried along as the median of the group, e.g. a representative year and
        month for each cruise.

    Returns
    -------
    pandas.DataFrame
        Keys, means, carried medians and the number of observations, n_obs, in each group.
    """
    keys = as_list(keys)
    columns = as_list(columns)
    carry = as_list(carry)

    grouped = table.groupby(keys, observed=True, sort=True)

    aggregation = {column: nanmean for column in columns}
    aggregation.update({column: "median" for column in carry})

    summary = grouped.agg(aggregation)
    summary["n_obs"] = grouped.size()
    return summary.reset_index()


def climatology(table, period_key, columns):
    """Long-run mean of each column per period, e.g. per calendar month, indexed by period."""
    columns = as_list(columns)
    return table.groupby(period_key, observed=True, sort=True)[columns].agg(nanmean)


def anomalies(summary, clim, period_key, columns):
    """Difference between each summary row and the climatology for its period.

    A new column <column>_anomaly is added for each column. Rows whose period is not in the
    climatology get NaN.
    """
    columns = as_list(columns)
    if period_key in clim.columns:
        clim = clim.set_index(period_key)

    baseline = clim[columns].reindex(summary[period_key].values)

    result = summary.copy()
    for column in columns:
        result[f"{column}_anomaly"] = result[column].values - baseline[column].values
    return result


def rollup(table, key, columns):
    """Group again by a coarser key, e.g. year, using the same missing-value rule."""
    return group_summary(table, key, columns)


def add_calendar_columns(table, date_column="time"):
    """Add year, month and day_of_year columns derived from a date column."""
    result = table.copy()
    dates = pd.to_datetime(result[date_column])
    result["year"] = dates.dt.year
    result["month"] = dates.dt.month
    result["day_of_year"] = dates.dt.dayofyear
    return result
