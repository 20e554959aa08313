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

from ocean_erddap.config import EPOCH


def to_epoch_seconds(value):
    """Convert a date string, datetime or number of seconds to seconds since the epoch (UTC)."""
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value)
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.tz_localize("UTC")
    return (timestamp - pd.Timestamp(EPOCH)).total_seconds()


def format_time(value):
    """Format a date as the ISO 8601 string that ERDDAP expects in a query."""
    timestamp = pd.Timestamp(to_epoch_seconds(value), unit="s")
    return timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")


def from_epoch_seconds(seconds):
    """Decode seconds since 1970-01-01 UTC. No other time zone offset is applied."""
    return pd.to_datetime(seconds, unit="s", origin="unix")


def parse_times(values):
    """Parse ERDDAP ISO 8601 time strings into timezone-naive UTC timestamps.

    Unparseable entries become NaT.
    """
    times = pd.to_datetime(pd.Series(values), errors="coerce", utc=True, format="ISO8601")
    return times.dt.tz_localize(None)


def is_time_units(units):
    return units is not None and "since" in units


def strictly_monotonic(values):
    values = np.asarray(values)
    if len(values) < 2:
        return True
    steps = np.diff(values)
    return bool(np.all(steps > 0) or np.all(steps < 0))
