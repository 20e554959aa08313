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
import pytest

import ocean_erddap.aggregation as aggregation


@pytest.fixture
def observations():
    return pd.DataFrame(
        {
            "cruise": ["201004", "201004", "201007", "201007", "201104", "201104", "201107"],
            "time": pd.to_datetime([
                "2010-04-12", "2010-04-14", "2010-07-08", "2010-07-10",
                "2011-04-02", "2011-04-05", "2011-07-20",
            ]),
            "weight": [3.0, np.nan, 8.0, 2.0, 5.0, 7.0, np.nan],
            "count": [10.0, 20.0, np.nan, 30.0, 4.0, 6.0, np.nan],
        }
    )


def test_nanmean():
    assert aggregation.nanmean([3.0, np.nan, 5.0]) == 4.0
    assert np.isnan(aggregation.nanmean([np.nan, np.nan]))
    assert np.isnan(aggregation.nanmean([]))


def test_add_calendar_columns(observations):
    result = aggregation.add_calendar_columns(observations, "time")
    assert list(result.year) == [2010, 2010, 2010, 2010, 2011, 2011, 2011]
    assert list(result.month) == [4, 4, 7, 7, 4, 4, 7]
    assert result.day_of_year[0] == 102
    assert "year" not in observations.columns


def test_group_summary(observations):
    table = aggregation.add_calendar_columns(observations, "time")
    summary = aggregation.group_summary(table, "cruise", ["weight", "count"], carry=["year", "month"])

    assert list(summary.cruise) == ["201004", "201007", "201104", "201107"]
    assert list(summary.weight[:3]) == [3.0, 5.0, 6.0]
    assert np.isnan(summary.weight[3])
    assert list(summary["count"][:3]) == [15.0, 30.0, 5.0]
    assert list(summary.year) == [2010, 2010, 2011, 2011]
    assert list(summary.month) == [4, 7, 4, 7]
    assert list(summary.n_obs) == [2, 2, 2, 1]


def test_group_summary_composite_key(observations):
    table = aggregation.add_calendar_columns(observations, "time")
    summary = aggregation.group_summary(table, ["year", "month"], "weight")
    assert len(summary) == 4
    assert list(summary.columns) == ["year", "month", "weight", "n_obs"]


def test_climatology(observations):
    table = aggregation.add_calendar_columns(observations, "time")
    clim = aggregation.climatology(table, "month", ["weight"])
    assert list(clim.index) == [4, 7]
    assert clim.loc[4, "weight"] == 5.0
    assert clim.loc[7, "weight"] == 5.0


def test_anomalies():
    summary = pd.DataFrame({"cruise": ["a", "b"], "month": [4, 9], "weight": [5.0, 1.0]})
    clim = pd.DataFrame({"weight": [3.0]}, index=pd.Index([4], name="month"))

    result = aggregation.anomalies(summary, clim, "month", ["weight"])

    assert result.weight_anomaly[0] == 2.0
    assert np.isnan(result.weight_anomaly[1])
    assert "weight_anomaly" not in summary.columns


def test_anomalies_with_period_column():
    summary = pd.DataFrame({"month": [4, 7], "weight": [5.0, np.nan]})
    clim = pd.DataFrame({"month": [4, 7], "weight": [3.0, 2.0]})
    result = aggregation.anomalies(summary, clim, "month", "weight")
    assert result.weight_anomaly[0] == 2.0
    assert np.isnan(result.weight_anomaly[1])


def test_rollup(observations):
    table = aggregation.add_calendar_columns(observations, "time")
    summary = aggregation.group_summary(table, "cruise", ["weight"], carry=["year", "month"])
    clim = aggregation.climatology(summary, "month", ["weight"])
    anomalies = aggregation.anomalies(summary, clim, "month", ["weight"])

    yearly = aggregation.rollup(anomalies, "year", ["weight_anomaly"])

    assert list(yearly.year) == [2010, 2011]
    # 2010: April 3 - 4.5, July 5 - 5. 2011: April 6 - 4.5, July missing.
    assert np.allclose(yearly.weight_anomaly, [-0.75, 1.5])


def test_group_summary_missing_key(observations):
    observations.loc[1, "cruise"] = None
    summary = aggregation.group_summary(observations, "cruise", ["count"])
    assert list(summary.cruise) == ["201004", "201007", "201104", "201107"]
    assert summary["count"][0] == 10.0
    assert summary.n_obs[0] == 1
